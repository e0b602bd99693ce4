"""Property scoping shared by the reporting and analytics services."""

from __future__ import annotations

from uuid import UUID

from landlord_ledger.domain.properties import Property
from landlord_ledger.exceptions import PropertyNotFoundError
from landlord_ledger.logging_config import get_logger
from landlord_ledger.repositories.interfaces import PropertyRepository

logger = get_logger(__name__)


def resolve_property_scope(
    property_repo: PropertyRepository, user_id: UUID, property_id: UUID | None
) -> Property | None:
    """Return the scoped property, or None for a portfolio-wide request.

    Raises:
        PropertyNotFoundError: If the property does not exist or belongs to
            another user. Both cases look the same to the caller.
    """
    if property_id is None:
        return None
    prop = property_repo.get(property_id)
    if prop is None or prop.user_id != user_id:
        logger.warning(
            "property_scope_rejected",
            user_id=str(user_id),
            property_id=str(property_id),
            exists=prop is not None,
        )
        raise PropertyNotFoundError(property_id, user_id)
    return prop
