"""
Get Invitation Audit Trail Use Case
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import StorageError
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.principal import AuthenticatedPrincipal

from .dtos import AuditEntryResponse, InvitationAuditTrailResponse


class GetInvitationAuditUseCase:
    """
    Use case for reading one invitation's audit trail, oldest entry first.

    Business Rules:
    - Same authorization as creation, against the invitation's organization
    - Read-only
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.guard = InvitationAuthorizationGuard(uow)

    async def execute(
        self, principal: AuthenticatedPrincipal, invitation_id: UUID
    ) -> Result[InvitationAuditTrailResponse]:
        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_id(invitation_id)
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            if invitation is None:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            authorized = await self.guard.is_authorized(
                principal, invitation.organization_type, invitation.organization_id
            )
            if not authorized:
                return Return.err(
                    Error(
                        "UNAUTHORIZED",
                        "Unauthorized: you cannot view this invitation's history",
                    )
                )

            try:
                entries = await self.uow.invitation_audit.list_by_invitation(invitation.id)
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            return Return.ok(
                InvitationAuditTrailResponse(
                    invitation_id=str(invitation.id),
                    entries=[
                        AuditEntryResponse(
                            action=entry.action.value,
                            performed_by=str(entry.performed_by) if entry.performed_by else None,
                            notes=entry.notes,
                            timestamp=entry.created_at.isoformat(),
                        )
                        for entry in entries
                    ],
                )
            )
