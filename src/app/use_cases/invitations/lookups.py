import logging
from uuid import UUID

from src.app.repositories.exceptions import StorageError
from src.app.services.invitation_email import DEFAULT_ORGANIZATION_NAME
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import OrganizationKind

logger = logging.getLogger(__name__)


async def resolve_organization_name(
    uow: UnitOfWork,
    kind: OrganizationKind,
    organization_id: UUID,
    default: str = DEFAULT_ORGANIZATION_NAME,
) -> str:
    """Display name for emails and the registration page; never fails."""
    try:
        name = await uow.organizations.get_name(kind, organization_id)
    except StorageError:
        logger.warning("Organization lookup failed for %s %s", kind.value, organization_id)
        return default
    return name or default
