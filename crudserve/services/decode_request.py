"""Request Decoding — shared decode + validate step of both dispatchers.

Invariants:
    - A fresh instance of the declared shape is built from the raw body every time
    - Decode failures are 400 DecodeError with field-level details
    - validate_self() failures are 400 ItemValidationError, checked after decoding

Design Decisions:
    - model_validate_json over json.loads + model_validate: one pass, pydantic reports
      malformed JSON and shape mismatches through the same ValidationError
"""

from pydantic import BaseModel, ValidationError
from starlette.requests import Request

from crudserve.core.errors import DecodeError, ErrorContext, ItemValidationError
from crudserve.core.validation import find_validation_error


async def decode_and_validate(
    request: Request, shape: type[BaseModel], label: str, context: ErrorContext,
) -> BaseModel:
    """Decode the request body into shape, then run its validation hook."""
    body = await request.body()
    try:
        value = shape.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(
            f"Cannot parse body as JSON {label}",
            details=build_error_details(e),
            context=context,
        ) from e

    error = find_validation_error(value)
    if error is not None:
        raise ItemValidationError(f"invalid {label}: {error}", context=context)
    return value


def build_error_details(exc: ValidationError) -> list[dict]:
    """Field-level details in the same shape as the error envelope expects."""
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
