"""Schema validation for configuration payloads.

Schemas are stored as YAML files under ``adoc_reducer/data/schemas`` and
validated with JSON Schema.
"""
from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator

from adoc_reducer.core.utils.io import read_yaml
from adoc_reducer.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema.

    Args:
        schema_name: Path under the schemas directory, with or without the
            ``.yaml`` extension (e.g. ``"config/config.schema"``).

    Raises:
        FileNotFoundError: If the schema does not exist.
        ValueError: If the schema is not a YAML mapping.
    """
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    path = get_data_path("schemas", schema_name)
    schema = read_yaml(path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(payload: Dict[str, Any], schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    schema = load_schema(schema_name)
    try:
        jsonschema.validate(instance=payload, schema=schema, cls=Draft202012Validator)
    except jsonschema.ValidationError as exc:
        location = ".".join(str(p) for p in exc.absolute_path) or "<root>"
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}' at {location}: {exc.message}"
        ) from exc


__all__ = ["SchemaValidationError", "load_schema", "validate_payload"]
