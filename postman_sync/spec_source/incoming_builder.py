"""Assembly of the generated collection from specification files."""

import logging
from typing import Optional

from postman_sync.collection.models import CollectionTree, empty_collection, node_from_dict

from .converter import OpenAPIConverter
from .spec_loader import SpecLoader

logger = logging.getLogger(__name__)


class IncomingBuilder:
    """Builds one generated collection with a folder per service.

    Files are converted sequentially; the first failure aborts the build.

    Example:
        >>> builder = IncomingBuilder(OpenAPIConverter())
        >>> incoming = builder.build("services/**/designtime/*_API.json", "MIDDLEWARE")
    """

    def __init__(self, converter: Optional[OpenAPIConverter] = None):
        self.converter = converter or OpenAPIConverter()

    def build(self, pattern: str, collection_name: str) -> CollectionTree:
        """Convert every file matching ``pattern`` into one collection.

        Args:
            pattern: Glob pattern for specification files
            collection_name: Name of the resulting collection

        Returns:
            CollectionTree whose top-level items are service folders

        Raises:
            SpecParseError: If a file cannot be parsed
            ConversionError: If a file cannot be converted
        """
        incoming = empty_collection(collection_name)

        for file_path in SpecLoader.discover(pattern):
            logger.info(f"Converting {file_path}")
            spec = SpecLoader.normalize(SpecLoader.load(file_path), file_path)
            service = SpecLoader.service_name(file_path)
            fragment = self.converter.convert(spec, service)
            incoming.item.append(node_from_dict({
                'name': fragment.get('name') or service,
                'item': fragment.get('item') or [],
            }))

        return incoming
