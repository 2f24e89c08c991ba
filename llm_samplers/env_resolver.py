"""
Environment variable support for sampler chain configuration.

Two mechanisms are provided: ``${VAR}`` / ``${VAR:default}`` references that
may appear in any string of a configuration file (including sampler option
strings such as ``"top-p:p=${TOP_P:0.9}"``), and whole-field overrides for
schema fields that declare an ``env_var``.
"""

import os
import re
from typing import Any, Dict, Iterator, Tuple

from .errors import ConfigurationError, config_logger as logger


class EnvironmentVariableResolver:
    """Resolves environment variable references and overrides in a configuration."""

    REFERENCE_PATTERN = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<default>[^}]*))?\}")

    @classmethod
    def resolve_env_vars(cls, value: Any, path: str = "root") -> Any:
        """
        Substitute environment variable references throughout a configuration.

        Args:
            value: Configuration value; mappings and lists are walked recursively
            path: Location of ``value`` in the configuration, used in error details

        Returns:
            A copy of ``value`` with every reference replaced

        Raises:
            ConfigurationError: If a referenced variable is unset and has no default
        """
        if isinstance(value, dict):
            return {key: cls.resolve_env_vars(item, f"{path}.{key}") for key, item in value.items()}
        if isinstance(value, list):
            return [cls.resolve_env_vars(item, f"{path}[{i}]") for i, item in enumerate(value)]
        if isinstance(value, str) and "${" in value:
            return cls.REFERENCE_PATTERN.sub(lambda match: cls._lookup(match, path), value)
        return value

    @staticmethod
    def _lookup(match: "re.Match", path: str) -> str:
        name, default = match.group("name"), match.group("default")
        resolved = os.environ.get(name, default)
        if resolved is None:
            raise ConfigurationError(
                f"Environment variable '{name}' referenced at '{path}' is not set",
                details={"variable": name, "path": path},
            )
        return resolved

    @staticmethod
    def overridable_fields(schema: Dict[str, Any]) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Yield the schema fields that can be overridden from the environment."""
        for key, field_schema in schema.items():
            if field_schema.get("env_var"):
                yield key, field_schema

    @classmethod
    def apply_env_var_overrides(cls, config: Dict[str, Any], schema: Dict[str, Any]) -> Dict[str, Any]:
        """
        Replace configuration fields with the values of their override variables.

        String fields with ``choices`` match case-insensitively, so
        ``LLM_SAMPLERS_LOG_LEVEL=debug`` selects ``DEBUG``. An empty value
        clears an optional field. Other field types are converted by calling
        the schema type on the raw string.

        Raises:
            ConfigurationError: If an override cannot be converted
        """
        result = dict(config)

        for key, field_schema in cls.overridable_fields(schema):
            env_var = field_schema["env_var"]
            raw = os.environ.get(env_var)
            if raw is None:
                continue
            raw = raw.strip()

            if not raw and not field_schema.get("required", False):
                result[key] = None
            elif field_schema["type"] is str:
                choices = {choice.upper(): choice for choice in field_schema.get("choices", ())}
                result[key] = choices.get(raw.upper(), raw)
            else:
                try:
                    result[key] = field_schema["type"](raw)
                except (TypeError, ValueError):
                    raise ConfigurationError(
                        f"Cannot use {env_var}={raw!r} for field '{key}'",
                        details={"env_var": env_var, "value": raw, "field": key},
                    ) from None

            logger.info(f"{env_var} overrides '{key}' with {result[key]!r}")

        return result
