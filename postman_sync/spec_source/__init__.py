"""Specification sources for generated collections.

This package discovers API specification files, normalizes them, converts
each into a collection fragment and assembles the generated collection.
"""

from .converter import OpenAPIConverter
from .errors import ConversionError, SpecParseError, SpecSourceError
from .incoming_builder import IncomingBuilder
from .spec_loader import SpecLoader

__all__ = [
    'OpenAPIConverter',
    'IncomingBuilder',
    'SpecLoader',
    'SpecSourceError',
    'SpecParseError',
    'ConversionError',
]
