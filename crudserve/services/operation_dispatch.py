"""Operation Dispatch — decode, validate, invoke and encode for custom operations.

Invariants:
    - POST only; every other method is 405 naming the path
    - process() is invoked exactly once per accepted request
    - A result that is not a 2-tuple, or a failure that is not an exception,
      is a DispatchContractError (500): registration should have prevented it
    - Every operation failure is 400, whatever its cause
    - Sync process() runs in the thread pool, async process() on the event loop

Design Decisions:
    - Operations may return (response, error) or raise OperationFailedError: both map
      to the same 400 response; any other exception reaches the catch-all handler
    - jsonable_encoder for responses: operations may answer with models, dicts or scalars
"""

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from crudserve.core.domain_types import HttpMethod
from crudserve.core.errors import (
    DispatchContractError, ErrorContext, MethodNotAllowedError,
    OperationFailedError,
)
from crudserve.services.bindings import OperationBinding
from crudserve.services.decode_request import decode_and_validate

logger = logging.getLogger(__name__)


def make_operation_endpoint(binding: OperationBinding):
    """Build the endpoint serving POST <path> for one operation."""

    async def operation_endpoint(request: Request) -> Response:
        logger.debug(f"HTTP {request.method} {request.url.path}")
        if request.method != HttpMethod.POST:
            raise MethodNotAllowedError(
                f"{request.url.path} accepts only POST",
                context=_context(binding, request),
            )
        return await invoke_operation(binding, request)

    operation_endpoint.__name__ = f"operation_{binding.type_name}"
    return operation_endpoint


async def invoke_operation(
    binding: OperationBinding, request: Request,
) -> JSONResponse:
    """POST <path> {...} -> process(request) -> JSON response."""
    context = _context(binding, request)
    value = await decode_and_validate(
        request, binding.request_shape, binding.request_shape.__name__, context,
    )

    try:
        if binding.signature.is_async:
            result = await binding.process(value)
        else:
            result = await run_in_threadpool(binding.process, value)
    except OperationFailedError as e:
        raise OperationFailedError(f"failed: {e.message}", context=context) from e

    response, error = unpack_result(binding, result, context)
    if error is not None:
        logger.info(
            f"{binding.type_name}.process() failed: {error}",
            extra={"operation": binding.path},
        )
        raise OperationFailedError(f"failed: {error}", context=context) from error
    return JSONResponse(content=jsonable_encoder(response))


def unpack_result(
    binding: OperationBinding, result: Any, context: ErrorContext,
) -> tuple[Any, BaseException | None]:
    """Split process() output into (response, error), enforcing its arity."""
    if not isinstance(result, (tuple, list)) or len(result) != 2:
        count = len(result) if isinstance(result, (tuple, list)) else 1
        raise DispatchContractError(
            f"{binding.type_name}.process() returned {count} instead of 2 values",
            context=context,
        )
    response, error = result
    if error is not None and not isinstance(error, BaseException):
        raise DispatchContractError(
            f"{type(error).__name__}:{error!r} is not error", context=context,
        )
    return response, error


def _context(binding: OperationBinding, request: Request) -> ErrorContext:
    return ErrorContext(path=request.url.path, operation=binding.path)
