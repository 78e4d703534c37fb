"""
Custom exception hierarchy for centralized error handling.
All exceptions map to appropriate HTTP status codes and render as
``{"error": <message>}``.
"""
from typing import Any, Dict, List, Optional


class AppException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response format."""
        return {"error": self.message}


# =============================================================================
# Authentication / Authorization
# =============================================================================


class MissingCredentialError(AppException):
    """Authorization header absent or not a bearer credential."""

    def __init__(self) -> None:
        super().__init__(
            message="No token provided",
            status_code=401,
            error_code="MISSING_CREDENTIAL",
        )


class InvalidCredentialError(AppException):
    """Identity provider rejected the credential. Never carries provider text."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid token",
            status_code=401,
            error_code="INVALID_CREDENTIAL",
        )


class ForbiddenError(AppException):
    """Authenticated principal does not own the targeted resource."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code="FORBIDDEN",
        )


# =============================================================================
# Request / Resource
# =============================================================================


class InvalidParameterError(AppException):
    """Missing or malformed input."""

    def __init__(self, message: str, fields: Optional[List[str]] = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_PARAMETER",
            details={"fields": fields or []},
        )

    @classmethod
    def for_fields(cls, fields: List[str]) -> "InvalidParameterError":
        """Build an error naming the offending fields."""
        return cls(f"Missing or invalid field(s): {', '.join(fields)}", fields=fields)


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=404,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
        )


class StoreError(AppException):
    """Underlying store failure, surfaced with the store's own message."""

    def __init__(self, message: str, operation: str = "query") -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code="STORE_ERROR",
            details={"operation": operation},
        )


# =============================================================================
# Dependencies
# =============================================================================


class BridgeError(AppException):
    """External catalog lookup failed."""

    def __init__(self, reason: str = "unavailable") -> None:
        super().__init__(
            message="Failed to fetch details from external catalog",
            status_code=500,
            error_code="BRIDGE_ERROR",
            details={"reason": reason},
        )


class ServiceUnavailableError(AppException):
    """Dependency service is unavailable."""

    def __init__(self, service_name: str) -> None:
        super().__init__(
            message=f"Service temporarily unavailable: {service_name}",
            status_code=503,
            error_code="SERVICE_UNAVAILABLE",
            details={"service": service_name},
        )


class CircuitBreakerOpenError(AppException):
    """Circuit breaker is open - service calls blocked."""

    def __init__(self, service_name: str) -> None:
        super().__init__(
            message=f"Circuit breaker open for: {service_name}",
            status_code=503,
            error_code="CIRCUIT_BREAKER_OPEN",
            details={"service": service_name},
        )
