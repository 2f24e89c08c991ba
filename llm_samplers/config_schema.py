"""
Configuration schema validation and environment variable support.

This module provides schema validation for YAML sampler chain
configuration files and support for environment variable substitution.
"""

from typing import Any, Dict, Optional

import yaml

from .chain import SamplerChain
from .config_validation import ConfigValidator
from .constants import ENV_LOG_FILE, ENV_LOG_LEVEL, LOG_LEVELS
from .env_resolver import EnvironmentVariableResolver
from .errors import ConfigurationError, config_logger as logger
from .factory import SamplerFactory


class ConfigSchema:
    """Defines the schema for sampler chain configuration files."""

    SCHEMA = {
        "samplers": {
            "type": list,
            "required": True,
            "description": "Ordered sampler definitions, each a 'name:options' string or a mapping with a 'type' key",
            "item_type": (str, dict),
            "item_required": ["type"],
            "min_length": 1,
        },
        "log_level": {
            "type": str,
            "required": False,
            "default": "INFO",
            "description": "Logging level",
            "choices": LOG_LEVELS,
            "env_var": ENV_LOG_LEVEL,
        },
        "log_file": {
            "type": str,
            "required": False,
            "default": None,
            "description": "Optional log file path",
            "env_var": ENV_LOG_FILE,
        },
    }


def validate_config(config: Dict[str, Any], schema: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate configuration with environment variable resolution.

    Args:
        config: Configuration dictionary to validate
        schema: Optional custom schema (defaults to ConfigSchema.SCHEMA)

    Returns:
        Validated configuration with environment variables resolved

    Raises:
        ValidationError: If validation fails
        ConfigurationError: If environment variable resolution fails
    """
    if schema is None:
        schema = ConfigSchema.SCHEMA

    config = EnvironmentVariableResolver.resolve_env_vars(config)
    config = EnvironmentVariableResolver.apply_env_var_overrides(config, schema)

    validator = ConfigValidator(schema)
    return validator.validate(config)


def generate_config_template() -> str:
    """Generate a template configuration file with documentation."""
    template = """# Sampler Chain Configuration Template
# Environment variables can be used with ${VAR_NAME} or ${VAR_NAME:default_value}

# Samplers run in the order listed. Each entry is either a mapping with a
# "type" key plus option values, or a "name:options" string.
samplers:
  - type: temperature
    temperature: 0.8  # 0 or 1 disables

  - type: top-k
    k: 40  # 0 disables
    min_keep: 1

  - type: tail-free
    z: 0.95  # 1.0 or higher disables
    min_keep: 1

  - "top-p:p=0.9:min_keep=1"

# Logging
log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
# Environment variable: LLM_SAMPLERS_LOG_LEVEL

log_file: null  # Optional log file path
# Environment variable: LLM_SAMPLERS_LOG_FILE
"""
    return template


def validate_config_file(config_path: str) -> Dict[str, Any]:
    """
    Load and validate a configuration file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
        ValidationError: If validation fails
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}") from None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a YAML dictionary")

    logger.info(f"Loaded configuration from {config_path}")
    return validate_config(config)


def load_chain_config(config_path: str) -> SamplerChain:
    """Load a configuration file and build the sampler chain it describes."""
    config = validate_config_file(config_path)
    return SamplerFactory.create_chain(config["samplers"])
