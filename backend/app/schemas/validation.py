"""Non-raising schema validation that reports every failing field."""

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class FieldError(BaseModel):
    """One violated field/constraint."""

    field: str = Field(..., description="Dotted path of the offending field")
    message: str = Field(..., description="Human readable reason")
    type: str = Field(..., description="Machine readable error code")


def errors_from_exception(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ValidationError into FieldError entries."""
    return [
        FieldError(
            field=".".join(str(part) for part in error["loc"]) or "__root__",
            message=error["msg"],
            type=error["type"],
        )
        for error in exc.errors(include_url=False)
    ]


def validate_payload(schema: type[BaseModel] | TypeAdapter, payload: Any) -> list[FieldError]:
    """
    Validate a candidate record against a schema.

    Args:
        schema: Pydantic model class or TypeAdapter
        payload: Raw (JSON-like) data

    Returns:
        Empty list when the payload is valid, otherwise one entry per
        violated field. Never raises for invalid input.
    """
    try:
        if isinstance(schema, TypeAdapter):
            schema.validate_python(payload)
        else:
            schema.model_validate(payload)
    except ValidationError as exc:
        return errors_from_exception(exc)
    return []
