"""
List Invitations Use Case
"""

from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import StorageError
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import Invitation, OrganizationKind
from src.domain.principal import AuthenticatedPrincipal

from .dtos import InvitationListResponse, InvitationSummary


def _isoformat(value):
    return value.isoformat() if value else None


def to_summary(invitation: Invitation, now: datetime) -> InvitationSummary:
    """Public view of an invitation; the token hash is never included."""
    return InvitationSummary(
        id=str(invitation.id),
        email=invitation.email,
        first_name=invitation.first_name,
        last_name=invitation.last_name,
        role=invitation.role.value,
        designation=invitation.designation,
        department=invitation.department,
        status=invitation.effective_status(now).value,
        invited_by=str(invitation.invited_by),
        created_at=invitation.created_at.isoformat(),
        expires_at=invitation.expires_at.isoformat(),
        accepted_at=_isoformat(invitation.accepted_at),
        revoked_at=_isoformat(invitation.revoked_at),
    )


class ListInvitationsUseCase:
    """
    Use case for listing an organization's invitations, newest first.

    Business Rules:
    - Same authorization as creation
    - Status is reported as ``expired`` for pending invitations past expiry
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock
        self.guard = InvitationAuthorizationGuard(uow)

    async def execute(
        self,
        principal: AuthenticatedPrincipal,
        organization_id: str,
        organization_type: str,
    ) -> Result[InvitationListResponse]:
        try:
            org_id = UUID(organization_id)
        except (TypeError, ValueError):
            return Return.err(Error("VALIDATION_ERROR", "Invalid organization id"))

        try:
            kind = OrganizationKind((organization_type or "").lower())
        except ValueError:
            return Return.err(Error("VALIDATION_ERROR", "Invalid organization type"))

        async with self.uow:
            if not await self.guard.is_authorized(principal, kind, org_id):
                return Return.err(
                    Error(
                        "UNAUTHORIZED",
                        "Unauthorized: you cannot view invitations for this organization",
                    )
                )

            try:
                invitations = await self.uow.invitations.list_by_organization(org_id)
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            now = self.clock()
            return Return.ok(
                InvitationListResponse(
                    invitations=[to_summary(invitation, now) for invitation in invitations]
                )
            )
