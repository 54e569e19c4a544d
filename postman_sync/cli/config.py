"""Run configuration loading and validation.

Configuration is resolved once at start-up into an immutable SyncConfig and
passed explicitly to the sync command. Sources, lowest precedence first:

    1. Built-in defaults
    2. YAML config file (.postman-sync/config.yaml by default)
    3. Environment variables (a .env file is honoured via python-dotenv)
    4. Command-line overrides

Config file structure:
    collection_uid: "12345-abcd-..."
    collection_name: "IMAGELINE_MIDDLEWARE"
    source_glob_pattern: "services/**/designtime/*_API.json"
    prune_mode: true
    converter_command: "openapi2postmanv2"
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from postman_sync.spec_source.converter import DEFAULT_CONVERTER_COMMAND

from .errors import ConfigError

DEFAULT_CONFIG_PATH = ".postman-sync/config.yaml"

_TRUE_VALUES = {'true', '1', 'yes', 'on'}
_FALSE_VALUES = {'false', '0', 'no', 'off'}


@dataclass(frozen=True)
class SyncConfig:
    """Immutable run configuration.

    Attributes:
        collection_uid: UID of the Postman collection to create or replace
        collection_name: Name of the generated collection
        source_glob_pattern: Glob pattern locating specification files
        prune_mode: True replaces the collection (removals propagate),
            False merges into it (nothing is removed)
        converter_command: Executable used to convert specifications
    """
    collection_uid: str
    collection_name: str = "IMAGELINE_MIDDLEWARE"
    source_glob_pattern: str = "services/**/designtime/*_API.json"
    prune_mode: bool = True
    converter_command: str = DEFAULT_CONVERTER_COMMAND


class ConfigLoader:
    """Builds SyncConfig from defaults, a YAML file, the environment and overrides."""

    # Environment variable for each config field
    ENV_VARS = {
        'collection_uid': 'POSTMAN_TARGET_UID',
        'collection_name': 'POSTMAN_COLLECTION_NAME',
        'source_glob_pattern': 'POSTMAN_SOURCE_GLOB',
        'prune_mode': 'POSTMAN_PRUNE',
        'converter_command': 'POSTMAN_CONVERTER',
    }

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> SyncConfig:
        """Resolve the run configuration.

        Args:
            config_path: YAML file to read. When None, the default path is
                read only if it exists; an explicit path must exist.
            overrides: Values from the command line (None values are ignored)

        Returns:
            Validated SyncConfig

        Raises:
            ConfigError: If the file is invalid or a value fails validation
        """
        load_dotenv()

        values: Dict[str, Any] = {}

        if config_path is not None:
            values.update(cls._read_file(config_path, required=True))
        elif os.path.exists(DEFAULT_CONFIG_PATH):
            values.update(cls._read_file(DEFAULT_CONFIG_PATH, required=False))

        for field_name, env_var in cls.ENV_VARS.items():
            env_value = os.getenv(env_var)
            if env_value is not None and env_value != "":
                values[field_name] = env_value

        for field_name, value in (overrides or {}).items():
            if value is not None:
                values[field_name] = value

        return cls._parse_config(values)

    @classmethod
    def _read_file(cls, config_path: str, required: bool) -> Dict[str, Any]:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            if required:
                raise ConfigError(f"Configuration file not found at {config_path}")
            return {}
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(data).__name__}"
            )

        known = {f.name for f in fields(SyncConfig)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown fields: {', '.join(sorted(unknown))}")
        return data

    @classmethod
    def _parse_config(cls, values: Dict[str, Any]) -> SyncConfig:
        uid = values.get('collection_uid')
        if not uid or not str(uid).strip():
            raise ConfigError(
                "collection_uid is required (set POSTMAN_TARGET_UID or --uid)",
                config_field='collection_uid'
            )

        kwargs: Dict[str, Any] = {'collection_uid': str(uid).strip()}
        for name in ('collection_name', 'source_glob_pattern', 'converter_command'):
            if name in values:
                value = values[name]
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError("must be a non-empty string", config_field=name)
                kwargs[name] = value.strip()

        if 'prune_mode' in values:
            kwargs['prune_mode'] = parse_bool(values['prune_mode'], 'prune_mode')

        return SyncConfig(**kwargs)


def parse_bool(value: Any, field_name: str) -> bool:
    """Parse a boolean from YAML or environment text.

    Raises:
        ConfigError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"expected a boolean, got '{value}'", config_field=field_name)
