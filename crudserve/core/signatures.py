"""Operation Signatures — registration-time inspection of process(request) -> (response, error).

Invariants:
    - process takes exactly one parameter (besides self) and nothing else
    - The parameter is annotated with a pydantic model class (the request shape)
    - The return annotation is tuple[Response, Error] where Error is an exception
      type, optionally unioned with None
    - Any violation raises RegistrationError before a single request is served

Design Decisions:
    - Annotations as the schema descriptor: the request shape is read once here and
      bound into the OperationBinding, so request-time decoding never reflects again
    - get_type_hints over raw __annotations__: resolves string annotations
      (from __future__ import annotations) against the operation's module
"""

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel

from crudserve.core.errors import RegistrationError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)
_PROTOTYPE = "process(request) -> (response, error)"


@dataclass(frozen=True)
class ProcessSignature:
    """What registration learned about an operation's process method."""
    request_shape: type[BaseModel]
    response_shape: Any
    is_async: bool


def is_model_class(shape: object) -> bool:
    """True for pydantic model classes (the only decodable shapes)."""
    return isinstance(shape, type) and issubclass(shape, BaseModel)


def inspect_process(operation: object) -> ProcessSignature:
    """Validate operation.process against the two-output contract."""
    type_name = type(operation).__name__
    process = getattr(operation, "process", None)
    if process is None or not callable(process):
        raise RegistrationError(
            f"{type_name} does not have {_PROTOTYPE} method",
        )

    try:
        sig = inspect.signature(process)
    except (TypeError, ValueError) as e:
        raise RegistrationError(
            f"{type_name}.process() cannot be inspected: {e}",
        ) from e
    params = list(sig.parameters.values())
    if len(params) != 1 or params[0].kind not in _POSITIONAL:
        raise RegistrationError(
            f"{type_name}.process() does not have prototype {_PROTOTYPE}",
        )

    try:
        hints = typing.get_type_hints(getattr(process, "__func__", process))
    except (NameError, TypeError) as e:
        raise RegistrationError(
            f"{type_name}.process() annotations cannot be resolved: {e}",
        ) from e

    request_shape = hints.get(params[0].name)
    if not is_model_class(request_shape):
        shape_name = getattr(request_shape, "__name__", repr(request_shape))
        raise RegistrationError(
            f"invalid operation request {shape_name} used as arg "
            f"{type_name}.process(<request>): expected a pydantic model class",
        )

    returns = hints.get("return")
    args = typing.get_args(returns)
    if typing.get_origin(returns) is not tuple or len(args) != 2 or Ellipsis in args:
        raise RegistrationError(
            f"{type_name}.process() must be annotated to return "
            f"tuple[response, error], not {returns!r}",
        )
    response_shape, error_type = args
    if not _is_error_annotation(error_type):
        raise RegistrationError(
            f"{type_name}.process() second result must be an exception type "
            f"or None, not {error_type!r}",
        )

    return ProcessSignature(
        request_shape=request_shape,
        response_shape=response_shape,
        is_async=inspect.iscoroutinefunction(process),
    )


def _is_error_annotation(annotation: object) -> bool:
    """Exception subclass, or a union of exception subclasses and None."""
    if typing.get_origin(annotation) in (Union, types.UnionType):
        options = typing.get_args(annotation)
    else:
        options = (annotation,)
    errors = [o for o in options if o is not type(None)]
    return bool(errors) and all(
        isinstance(o, type) and issubclass(o, BaseException) for o in errors
    )
