"""
Ownership rule for mutating operations.
A principal may mutate a resource only when it is the recorded owner.
No roles, no delegation.
"""
import logging

from app.core.exceptions import ForbiddenError
from app.models.schemas import Principal

logger = logging.getLogger(__name__)


def is_owner(principal: Principal, resource_owner_id: str) -> bool:
    """True iff the principal is the resource's owner."""
    return principal.id == resource_owner_id


def authorize_mutation(
    principal: Principal,
    resource_owner_id: str,
    message: str = "Forbidden",
) -> None:
    """
    Allow the mutation or raise ``ForbiddenError``.

    ``resource_owner_id`` must come from the stored record, never from the
    request body.
    """
    if not is_owner(principal, resource_owner_id):
        logger.info(
            "Ownership check denied",
            extra={"principal_id": principal.id},
        )
        raise ForbiddenError(message)
