"""Core infrastructure components."""
from .cache import TTLCache
from .circuit_breaker import CircuitBreaker, CircuitState
from .exceptions import (
    AppException,
    BridgeError,
    CircuitBreakerOpenError,
    ForbiddenError,
    InvalidCredentialError,
    InvalidParameterError,
    MissingCredentialError,
    NotFoundError,
    ServiceUnavailableError,
    StoreError,
)
from .pagination import PageWindow, resolve

__all__ = [
    "AppException",
    "BridgeError",
    "CircuitBreaker",
    "CircuitBreakerOpenError",
    "CircuitState",
    "ForbiddenError",
    "InvalidCredentialError",
    "InvalidParameterError",
    "MissingCredentialError",
    "NotFoundError",
    "PageWindow",
    "ServiceUnavailableError",
    "StoreError",
    "TTLCache",
    "resolve",
]
