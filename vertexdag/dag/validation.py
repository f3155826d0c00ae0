"""
Input Validation

Pluggable validators consulted before a vertex's work runs.
A validator maps raw input to a parsed value, or raises to reject it.
"""

from typing import Any, Callable, Dict
import logging

from pydantic import TypeAdapter, ValidationError

from .errors import InputValidationError, PipelineConfigError

logger = logging.getLogger(__name__)

Validator = Callable[[Any], Any]

# Type names accepted by pipeline configs (input_schema)
SCHEMA_TYPES: Dict[str, Any] = {
    "any": Any,
    "dict": Dict[str, Any],
    "list": list,
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
}


def schema_validator(schema: Any) -> Validator:
    """
    Build a validator from a type or pydantic model.

    The schema is compiled once, when the validator is built. Each call
    parses raw input with pydantic and returns the parsed value.

    Example usage:
        class Order(BaseModel):
            sku: str
            quantity: int

        graph.create_vertex(handle_order, validator=schema_validator(Order))

    Args:
        schema: Any type pydantic can build a TypeAdapter for

    Returns:
        Validator callable
    """
    adapter = TypeAdapter(schema)

    def validate(raw: Any) -> Any:
        return adapter.validate_python(raw)

    validate.__name__ = f"validate_{getattr(schema, '__name__', 'schema')}"
    return validate


def schema_from_name(type_name: str) -> Validator:
    """
    Build a validator from a config type name (e.g. "dict", "int").

    Raises:
        PipelineConfigError: If type_name is not a known schema type
    """
    if type_name not in SCHEMA_TYPES:
        available = ", ".join(SCHEMA_TYPES)
        raise PipelineConfigError(
            f"Unknown input schema: {type_name}. Available schemas: {available}"
        )
    return schema_validator(SCHEMA_TYPES[type_name])


def run_validator(validator: Validator, vertex_name: str, raw: Any) -> Any:
    """
    Apply a validator to raw input.

    Args:
        validator: Validator to consult
        vertex_name: Name of the vertex, for error messages
        raw: Raw input about to be dispatched

    Returns:
        Parsed input

    Raises:
        InputValidationError: If the validator rejects the input
    """
    try:
        return validator(raw)
    except InputValidationError:
        raise
    except ValidationError as e:
        logger.debug(f"Validation failed for vertex '{vertex_name}': {e.error_count()} errors")
        raise InputValidationError(
            vertex_name,
            f"{e.error_count()} validation error(s)",
            errors=e.errors(),
        ) from e
    except (ValueError, TypeError) as e:
        raise InputValidationError(vertex_name, str(e)) from e
