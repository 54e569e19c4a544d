"""Sync command orchestration for CLI.

This module provides the SyncCommand class that orchestrates one sync run.
It coordinates the Postman APIWrapper, the IncomingBuilder, the reconciliation
engine and the OutputHandler.
"""

import logging
from typing import Optional

from postman_sync.cli.config import SyncConfig
from postman_sync.cli.models import ExitCode, SyncSummary
from postman_sync.cli.output import OutputHandler
from postman_sync.collection.diff_reporter import collect_keys
from postman_sync.collection.models import CollectionTree, ensure_collection
from postman_sync.collection.reconciler import reconcile
from postman_sync.postman_client.api_wrapper import APIWrapper
from postman_sync.postman_client.auth import Authenticator
from postman_sync.postman_client.errors import (
    APIAccessError,
    APIUnreachableError,
    CollectionNotFoundError,
    InvalidCredentialsError,
)
from postman_sync.spec_source.converter import OpenAPIConverter
from postman_sync.spec_source.errors import SpecSourceError
from postman_sync.spec_source.incoming_builder import IncomingBuilder

logger = logging.getLogger(__name__)


class SyncCommand:
    """Orchestrates the complete sync workflow for the CLI.

    The sync workflow:
        1. Fetch the persisted collection (missing means create a new one)
        2. Convert every specification file into the generated collection
        3. Report removals, preserve metadata, then replace or merge
        4. Dry run: stop and show the preview
        5. Create or replace the collection in Postman, exactly once
        6. Return an exit code

    Example:
        >>> config = ConfigLoader.load()
        >>> sync_cmd = SyncCommand(config, output_handler=OutputHandler(verbosity=1))
        >>> sys.exit(sync_cmd.run(dry_run=False))
    """

    def __init__(
        self,
        config: SyncConfig,
        api: Optional[APIWrapper] = None,
        builder: Optional[IncomingBuilder] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            config: Resolved run configuration
            api: Postman API wrapper (optional)
            builder: IncomingBuilder for generated collections (optional)
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for the Postman API (optional)

        Note:
            Dependencies are optional to support testing. Missing ones are
            created on first run.
        """
        self.config = config
        self.api = api
        self.builder = builder
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.summary: Optional[SyncSummary] = None

    def run(self, dry_run: bool = False) -> ExitCode:
        """Execute one sync run.

        Args:
            dry_run: If True, compute and show the payload without writing it

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            self._init_dependencies()
            return self._run(dry_run)

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            return ExitCode.AUTH_ERROR

        # CollectionNotFoundError here means the write target vanished after the fetch
        except (APIUnreachableError, APIAccessError, CollectionNotFoundError) as e:
            logger.error(f"Postman API error: {e}")
            self.output_handler.error(f"Postman API error: {e}")
            return ExitCode.NETWORK_ERROR

        except SpecSourceError as e:
            logger.error(f"Specification error: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except ValueError as e:
            logger.error(f"Invalid input: {e}")
            self.output_handler.error(f"Invalid input: {e}")
            return ExitCode.GENERAL_ERROR

    def _init_dependencies(self) -> None:
        if not self.api:
            if not self.authenticator:
                self.authenticator = Authenticator()
            self.api = APIWrapper(self.authenticator)

        if not self.builder:
            self.builder = IncomingBuilder(OpenAPIConverter(self.config.converter_command))

    def _run(self, dry_run: bool) -> ExitCode:
        config = self.config

        # Step 1: Fetch existing collection
        logger.info(f"Fetching existing collection {config.collection_uid}")
        with self.output_handler.spinner("Fetching existing collection..."):
            existing, create = self._fetch_existing()

        # Step 2: Build generated collection
        logger.info(f"Building collection from {config.source_glob_pattern}")
        with self.output_handler.spinner("Converting specifications..."):
            incoming = self.builder.build(config.source_glob_pattern, config.collection_name)
        self.output_handler.info(f"Generated {len(incoming.item)} service folder(s)")

        # Step 3: Reconcile
        result = reconcile(existing, incoming, prune=config.prune_mode)
        self.output_handler.print_removals(
            result.diff.removed_folders,
            result.diff.removed_requests,
        )

        payload_keys = collect_keys(result.payload.item)
        self.summary = SyncSummary(
            strategy=result.strategy.value,
            folder_count=len(payload_keys.folders),
            request_count=len(payload_keys.requests),
            preserved_count=result.preserved_requests + result.preserved_folders,
            removed_folders=result.diff.removed_folders,
            removed_requests=result.diff.removed_requests,
            created=create,
            dry_run=dry_run,
            collection_uid=config.collection_uid,
        )

        # Step 4: Dry run stops here
        if dry_run:
            logger.info("Dry run: skipping write")
            self.output_handler.print_summary(self.summary)
            return ExitCode.SUCCESS

        # Step 5: Create or replace
        self._write(result.payload, create)
        self.output_handler.print_summary(self.summary)
        return ExitCode.SUCCESS

    def _fetch_existing(self):
        """Fetch the persisted collection.

        Returns:
            Tuple of (existing CollectionTree, True if it must be created)
        """
        try:
            data = self.api.get_collection(self.config.collection_uid)
        except CollectionNotFoundError:
            logger.info("Collection not found (404). Will create new.")
            self.output_handler.info("Collection not found. A new one will be created.")
            return ensure_collection(None, self.config.collection_name), True

        existing = ensure_collection(data.get('collection'), self.config.collection_name)
        logger.info(f"Fetched existing collection '{existing.name}'")
        return existing, False

    def _write(self, payload: CollectionTree, create: bool) -> None:
        body = payload.to_dict()
        if create:
            logger.info("Creating new collection in Postman")
            with self.output_handler.spinner("Creating collection in Postman..."):
                self.api.create_collection(body)
        else:
            logger.info(f"Updating collection {self.config.collection_uid} in Postman")
            with self.output_handler.spinner("Updating collection in Postman..."):
                self.api.update_collection(self.config.collection_uid, body)
