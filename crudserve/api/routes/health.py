"""Health & Readiness Checks — what this process serves, and whether it can serve it.

Invariants:
    - GET /health/ always returns 200 if the process is up, listing the bound
      stores and operations from the app's registry
    - GET /health/ready checks the database only when a SQL-backed store is bound;
      503 names those stores when the database does not answer
    - Memory-only registries are ready as soon as they are bound

Design Decisions:
    - Registry read from app.state: create_app() owns it, the router stays module-level
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from crudserve.infrastructure import database
from crudserve.infrastructure.sql_store import SqlStore
from crudserve.services.bindings import OperationBinding, StoreBinding
from crudserve.services.registry import Registry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness check with the served routes."""
    registry: Registry = request.app.state.registry
    return {
        "status": "healthy",
        "service": "crudserve",
        "version": request.app.version,
        "stores": [describe_store(b) for b in registry.stores],
        "operations": [describe_operation(b) for b in registry.operations],
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check. Database connectivity matters only to SQL-backed stores."""
    registry: Registry = request.app.state.registry
    sql_stores = [b.name for b in registry.stores if isinstance(b.store, SqlStore)]
    if not sql_stores:
        return {"status": "ready", "checks": {"database": "not_required"}}

    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning(f"Not ready: database unavailable for {', '.join(sql_stores)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "stores": sql_stores,
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "stores": sql_stores,
    }


def describe_store(binding: StoreBinding) -> dict:
    return {
        "path": binding.path,
        "shape": binding.item_shape.__name__,
        "backend": type(binding.store).__name__,
    }


def describe_operation(binding: OperationBinding) -> dict:
    return {
        "path": binding.path,
        "operation": binding.type_name,
        "request": binding.request_shape.__name__,
        "async": binding.signature.is_async,
    }
