"""Validation Capability — optional self-check exposed by item and request shapes.

Invariants:
    - Presence is detected per instance (runtime_checkable Protocol), never declared
    - Absence of the hook means no validation beyond decoding
    - Any exception raised by the hook is a validation failure, whatever its type

Design Decisions:
    - Hook named validate_self: pydantic's BaseModel already owns a deprecated
      `validate` classmethod, so every model would match a `validate` protocol
    - Returns the error instead of raising: callers wrap it into their own 400 error
    - Shapes may raise their own exception classes, not only ValueError
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Validatable(Protocol):
    """A value that can check its own invariants after decoding."""

    def validate_self(self) -> None: ...


def find_validation_error(value: object) -> Exception | None:
    """Run value.validate_self() when present; return the failure, if any."""
    if not isinstance(value, Validatable):
        return None
    try:
        value.validate_self()
    except Exception as e:
        return e
    return None
