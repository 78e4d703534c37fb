"""
Health check router for observability.
"""
from fastapi import APIRouter

from app.api.dependencies import (
    get_catalog_circuit_breaker,
    get_identity_circuit_breaker,
    store_backend,
)
from app.config import get_settings
from app.models.schemas import HealthComponent, ReadinessResponse

router = APIRouter(tags=["health"])


@router.get("/", summary="Welcome")
async def root() -> dict:
    return {"message": "Welcome to Movie Magic server"}


@router.get("/health", summary="Health Check")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/health/ready", response_model=ReadinessResponse, summary="Readiness Check")
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check for Kubernetes.
    Returns store/auth backends and circuit breaker states.
    """
    breakers = [get_identity_circuit_breaker(), get_catalog_circuit_breaker()]
    return ReadinessResponse(
        status="ready",
        store_backend=store_backend(),
        auth_backend=get_settings().AUTH_BACKEND,
        circuit_breakers=[
            HealthComponent(name=b.name, state=b.state.value) for b in breakers
        ],
    )
