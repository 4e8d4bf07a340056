"""
Revoke Invitation Use Case
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditAction, InvitationStatus
from src.domain.principal import AuthenticatedPrincipal

from .dtos import RevokeInvitationResponse

MAX_REASON_LENGTH = 500


class RevokeInvitationUseCase:
    """
    Use case for revoking a pending invitation.

    Business Rules:
    - Only pending invitations can be revoked; revoked is terminal
    - Same authorization as creation, against the invitation's organization
    - Transition is a conditional update, so a concurrent acceptance wins cleanly
    - Optional reason is kept as the audit entry's notes
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock
        self.guard = InvitationAuthorizationGuard(uow)
        self.audit = InvitationAuditLogger(uow)

    async def execute(
        self,
        principal: AuthenticatedPrincipal,
        invitation_id: UUID,
        reason: Optional[str] = None,
    ) -> Result[RevokeInvitationResponse]:
        reason = (reason or "").strip() or None
        if reason is not None and len(reason) > MAX_REASON_LENGTH:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Reason must be at most {MAX_REASON_LENGTH} characters",
                )
            )

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
                    Error("UNAUTHORIZED", "Unauthorized: User cannot revoke this invitation")
                )

            terminal = Error(
                "INVITATION_TERMINAL",
                f"Invitation is {invitation.status.value} and cannot be revoked",
            )
            if invitation.status != InvitationStatus.pending:
                return Return.err(terminal)

            try:
                revoked = await self.uow.invitations.mark_revoked(
                    invitation.id, principal.user_id, self.clock()
                )
                if not revoked:
                    await self.uow.rollback()
                    return Return.err(
                        Error("INVITATION_TERMINAL", "Invitation is no longer pending")
                    )
                await self.uow.commit()
            except StorageError as exc:
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            await self.audit.record(
                invitation.id,
                AuditAction.revoked,
                principal.user_id,
                reason or "Invitation revoked",
            )

            return Return.ok(
                RevokeInvitationResponse(
                    status=InvitationStatus.revoked.value,
                    message="Invitation revoked successfully",
                )
            )
