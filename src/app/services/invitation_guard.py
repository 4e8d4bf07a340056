"""
Invitation Authorization Guard

Decides whether a principal may manage invitations for an organization.
"""

import logging
from typing import Awaitable, Callable, Dict
from uuid import UUID

from src.app.repositories.exceptions import StorageError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import MemberRole, OrganizationKind
from src.domain.principal import AuthenticatedPrincipal

logger = logging.getLogger(__name__)

COMPANY_INVITER_ROLES = (MemberRole.owner, MemberRole.admin)


class InvitationAuthorizationGuard:
    """
    Business Rules:
    - company: caller needs an active member row with role owner or admin
    - association: caller needs an active association manager row (any role)
    - fails closed: lookup errors and unknown kinds deny
    - read-only
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self._checks: Dict[
            OrganizationKind, Callable[[UUID, UUID], Awaitable[bool]]
        ] = {
            OrganizationKind.company: self._is_company_admin,
            OrganizationKind.association: self._is_association_manager,
        }

    async def is_authorized(
        self,
        principal: AuthenticatedPrincipal,
        organization_kind: OrganizationKind,
        organization_id: UUID,
    ) -> bool:
        check = self._checks.get(organization_kind)
        if check is None:
            return False
        try:
            return await check(principal.user_id, organization_id)
        except StorageError:
            logger.exception(
                "Authorization lookup failed for user %s on %s %s; denying",
                principal.user_id,
                organization_kind.value,
                organization_id,
            )
            return False

    async def _is_company_admin(self, user_id: UUID, company_id: UUID) -> bool:
        member = await self.uow.members.get_active_by_user_and_company(
            user_id, company_id, COMPANY_INVITER_ROLES
        )
        return member is not None

    async def _is_association_manager(self, user_id: UUID, association_id: UUID) -> bool:
        manager = await self.uow.association_managers.get_active_by_user_and_association(
            user_id, association_id
        )
        return manager is not None
