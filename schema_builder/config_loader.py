"""
Configuration loading utilities for the schema tree editor.

This module provides functionality to load and validate application
configuration with fallback to defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_EXPORT_FORMATS = ['json', 'yaml']

_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Schema Tree Editor',
            'version': '1.0.0',
            'debug': False
        },
        'ui': {
            'page_title': 'Schema Tree Editor',
            'show_diff': True
        },
        'export': {
            'format': 'json',
            'indent': 2,
            'file_name': 'schema'
        },
        'logging': {
            'level': 'INFO'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary, defaults where the file is
        missing, empty or unreadable
    """
    if config_path is None:
        config_path = Path("config.yaml")

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return default_config

        if not isinstance(user_config, dict):
            logger.error(f"Configuration file is not a valid dictionary: {config_path}")
            logger.info("Using default configuration")
            return default_config

        config = deep_merge(default_config, user_config)

        logger.info(f"Successfully loaded configuration from {config_path}")
        return config

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config

    except (IOError, OSError) as e:
        logger.error(f"Failed to read configuration file {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'ui', 'export', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    export = config['export']
    if export.get('format') not in VALID_EXPORT_FORMATS:
        logger.warning(f"export.format must be one of {VALID_EXPORT_FORMATS}, got {export.get('format')!r}")
        return False

    if 'indent' in export:
        try:
            indent = int(export['indent'])
            if indent <= 0:
                logger.warning("export.indent must be positive")
                return False
        except (ValueError, TypeError):
            logger.warning("export.indent must be a valid integer")
            return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        logger.warning(f"logging.level must be one of {VALID_LOG_LEVELS}, got {level!r}")
        return False

    return True


def get_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config(config_path)
    return _config_cache


def reload_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Drop the cached configuration and load it again."""
    global _config_cache
    _config_cache = None
    return get_config(config_path)


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Read a single configuration value.

    Args:
        section: Top-level configuration section
        key: Key within the section
        default: Value returned when the section or key is missing

    Returns:
        Configured value or default
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)
