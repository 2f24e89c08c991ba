"""
Schema validation for sampler chain configuration.

A schema maps each top-level field to a rule dictionary. Recognized rule
keys are ``type``, ``required``, ``default``, ``choices``, ``min_length``,
``item_type`` and ``item_required``.
"""

from typing import Any, Dict, List

from .errors import ValidationError, config_logger as logger


def _type_name(expected: Any) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


class ConfigValidator:
    """Checks a configuration mapping against a schema and fills in defaults."""

    def __init__(self, schema: Dict[str, Dict[str, Any]]):
        self.schema = schema

    def validate(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a configuration and return it with defaults applied.

        Fields the schema does not know are logged and dropped.

        Raises:
            ValidationError: On the first rule the configuration breaks
        """
        missing = [key for key, rule in self.schema.items() if rule.get("required") and key not in config]
        if missing:
            raise ValidationError(
                f"Required field '{missing[0]}' missing",
                details={"field": missing[0], "missing": missing},
            )

        result = {}
        for key, rule in self.schema.items():
            if key in config:
                result[key] = self._check_field(key, config[key], rule)
            elif "default" in rule:
                result[key] = rule["default"]

        unknown = sorted(set(config) - set(self.schema))
        if unknown:
            logger.warning(f"Ignoring unknown configuration fields: {unknown}")

        logger.info("Configuration validation successful")
        return result

    def _check_field(self, path: str, value: Any, rule: Dict[str, Any]) -> Any:
        # Optional fields defaulting to None may be written as null
        if value is None and not rule.get("required") and rule.get("default") is None:
            return None

        expected = rule["type"]
        # bool is an int subclass; reject it for numeric fields
        if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
            raise ValidationError(
                f"Field '{path}' must be of type {_type_name(expected)}",
                details={"path": path, "value": value, "expected_type": _type_name(expected)},
            )

        if "choices" in rule and value not in rule["choices"]:
            raise ValidationError(
                f"Field '{path}' must be one of {rule['choices']}",
                details={"path": path, "value": value, "choices": rule["choices"]},
            )

        if isinstance(value, list):
            self._check_items(path, value, rule)
        return value

    def _check_items(self, path: str, items: List[Any], rule: Dict[str, Any]) -> None:
        min_length = rule.get("min_length")
        if min_length is not None and len(items) < min_length:
            raise ValidationError(
                f"Field '{path}' must contain at least {min_length} item(s)",
                details={"path": path, "length": len(items), "min_length": min_length},
            )

        item_type = rule.get("item_type")
        for i, item in enumerate(items):
            item_path = f"{path}[{i}]"
            if item_type is not None and not isinstance(item, item_type):
                raise ValidationError(
                    f"List item at '{item_path}' must be of type {_type_name(item_type)}",
                    details={"path": item_path, "value": item, "expected_type": _type_name(item_type)},
                )
            if isinstance(item, dict):
                for key in rule.get("item_required", ()):
                    if key not in item:
                        raise ValidationError(
                            f"List item at '{item_path}' is missing required field '{key}'",
                            details={"path": item_path, "field": key},
                        )
