"""Configuration loader with YAML support and environment variable substitution."""

import copy
import os
import re
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    'source': {
        'world_path': '.',
        'data_path': None,
        'folders_file': None,
        'journal_file': None,
        'document_type': 'JournalEntry'
    },
    'export': {
        'vault_path': '.',
        'destination_folder': 'FoundryImport',
        'asset_folder': 'assets',
        'folder_notes': False,
        'progress_bars': True
    },
    'logging': {
        'level': 'WARNING',
        'file': None
    }
}

ILLEGAL_FOLDER_CHARS = re.compile(r'[<>:"\\|?*]')


class ConfigLoader:
    """Handles loading and validation of configuration files."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

    @classmethod
    def load(cls, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file with environment variable substitution.

        The file is merged over ``DEFAULT_CONFIG`` so every key is present.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ValueError("Configuration file must contain a dictionary")

        config_data = cls._substitute_env_vars_recursive(config_data)

        return cls.with_defaults(config_data)

    @classmethod
    def with_defaults(cls, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Return ``config`` deep-merged over the built-in defaults."""
        return _deep_merge(DEFAULT_CONFIG, config or {})

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate configuration for required fields and correct values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValueError: If validation fails
        """
        cls._validate_required_field(config, 'source.world_path')
        cls._validate_required_field(config, 'export.vault_path')

        for field in ('export.destination_folder', 'export.asset_folder'):
            cls._validate_required_field(config, field)
            cls._validate_folder_name(get_nested(config, field), field)

        cls._validate_required_field(config, 'source.document_type')

        for field in ('export.folder_notes', 'export.progress_bars'):
            value = get_nested(config, field)
            if not isinstance(value, bool):
                raise ValueError(f"{field} must be a boolean")

        vault_path = get_nested(config, 'export.vault_path')
        if os.path.exists(vault_path) and not os.path.isdir(vault_path):
            raise ValueError(f"export.vault_path '{vault_path}' is not a directory")

        level = get_nested(config, 'logging.level', 'WARNING')
        if str(level).upper() not in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
            raise ValueError(f"logging.level '{level}' is not a valid log level")

    @classmethod
    def merge_with_args(cls, config: Dict[str, Any], args) -> Dict[str, Any]:
        """
        Merge configuration file with CLI arguments.
        CLI arguments take precedence over config file values.

        Args:
            config: Base configuration dictionary
            args: CLI arguments with attributes matching config keys

        Returns:
            Merged configuration dictionary
        """
        merged = cls.with_defaults(config)

        overrides = {
            'world': 'source.world_path',
            'data_path': 'source.data_path',
            'folders_file': 'source.folders_file',
            'journal_file': 'source.journal_file',
            'vault': 'export.vault_path',
            'destination': 'export.destination_folder',
            'asset_folder': 'export.asset_folder',
        }
        for attribute, path in overrides.items():
            value = getattr(args, attribute, None)
            if value:
                _set_nested(merged, path, value)

        if getattr(args, 'folder_notes', None) is not None:
            _set_nested(merged, 'export.folder_notes', args.folder_notes)

        if getattr(args, 'log_file', None):
            _set_nested(merged, 'logging.file', args.log_file)

        verbose = getattr(args, 'verbose', 0) or 0
        if verbose >= 2:
            _set_nested(merged, 'logging.level', 'DEBUG')
        elif verbose == 1:
            _set_nested(merged, 'logging.level', 'INFO')

        return merged

    @classmethod
    def _substitute_env_vars_recursive(cls, data: Any) -> Any:
        """Recursively substitute environment variables in data structure."""
        if isinstance(data, dict):
            return {key: cls._substitute_env_vars_recursive(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [cls._substitute_env_vars_recursive(item) for item in data]
        elif isinstance(data, str):
            return cls._substitute_env_vars(data)
        else:
            return data

    @classmethod
    def _substitute_env_vars(cls, value: str) -> str:
        """Substitute environment variables in a string value."""
        def replace_match(match):
            var_name = match.group(1)
            env_value = os.getenv(var_name)
            return env_value if env_value is not None else match.group(0)

        return cls.ENV_VAR_PATTERN.sub(replace_match, value)

    @staticmethod
    def _validate_required_field(config_section: dict, field: str) -> None:
        """Validate that a required field exists and has a value."""
        value = get_nested(config_section, field)
        if value is None or value == '':
            raise ValueError(f"Missing required configuration: {field}")

        # Check for unsubstituted environment variables
        if isinstance(value, str) and '${' in value:
            match = ConfigLoader.ENV_VAR_PATTERN.search(value)
            var_name = match.group(1) if match else value
            raise ValueError(
                f"Configuration field '{field}' contains unsubstituted environment variable: {value}. "
                f"Please set the {var_name} environment variable or provide a value in config file."
            )

    @staticmethod
    def _validate_folder_name(value: Any, field: str) -> None:
        """Validate a vault-relative folder path: nested ``a/b`` is allowed, ``..`` and absolute paths are not."""
        if not isinstance(value, str):
            raise ValueError(f"{field} must be a string")
        if ILLEGAL_FOLDER_CHARS.search(value):
            raise ValueError(f"{field} '{value}' contains characters that are not allowed in paths")
        if value.startswith('/') or '..' in value.split('/'):
            raise ValueError(f"{field} '{value}' must be a relative path inside the vault")


def get_nested(config: dict, path: str, default: Any = None) -> Any:
    """Safely retrieve nested configuration values using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "export.asset_folder")
        default: Default value if path doesn't exist

    Returns:
        Value at the nested path or default
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def _set_nested(config: dict, path: str, value: Any) -> None:
    keys = path.split('.')
    target = config
    for key in keys[:-1]:
        target = target.setdefault(key, {})
    target[keys[-1]] = value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ['ConfigLoader', 'DEFAULT_CONFIG', 'get_nested']
