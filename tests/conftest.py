"""Root pytest configuration for all tests.

This conftest applies to all test types.
"""

import logging

# Keep urllib3 connection chatter out of captured logs
logging.getLogger("urllib3").setLevel(logging.WARNING)
