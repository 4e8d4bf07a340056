"""
Verify Invitation Use Case

Public lookup behind the registration page: is this token usable, and what
was the invitee offered?
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.token_service import hash_token, is_well_formed_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditAction, InvitationStatus, OrganizationKind

from .dtos import VerifyInvitationResponse
from .lookups import resolve_organization_name

logger = logging.getLogger(__name__)

UNKNOWN_ORGANIZATION = {
    OrganizationKind.company: "Unknown Company",
    OrganizationKind.association: "Unknown Association",
}


class VerifyInvitationUseCase:
    """
    Use case for checking an invitation token without redeeming it.

    Business Rules:
    - Token must be 64 hex characters
    - accepted, revoked and expired invitations are rejected with distinct errors
    - A pending invitation seen past its expiry is persisted as expired
    - Never returns the token hash or inviter details
    - Appends a ``viewed`` audit entry (no actor)
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock
        self.audit = InvitationAuditLogger(uow)

    async def execute(self, token: str) -> Result[VerifyInvitationResponse]:
        if not is_well_formed_token(token):
            return Return.err(Error("VALIDATION_ERROR", "Invalid token format"))

        now = self.clock()

        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_token_hash(hash_token(token))
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            if invitation is None:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invalid or expired invitation")
                )

            if invitation.status == InvitationStatus.accepted:
                return Return.err(
                    Error("INVITATION_ALREADY_USED", "This invitation has already been used")
                )

            if invitation.status == InvitationStatus.revoked:
                return Return.err(
                    Error("INVITATION_REVOKED", "This invitation has been revoked")
                )

            if invitation.effective_status(now) == InvitationStatus.expired:
                if invitation.status == InvitationStatus.pending:
                    await self._persist_expiry(invitation.id)
                return Return.err(Error("INVITATION_EXPIRED", "This invitation has expired"))

            organization_name = await resolve_organization_name(
                self.uow,
                invitation.organization_type,
                invitation.organization_id,
                default=UNKNOWN_ORGANIZATION[invitation.organization_type],
            )

            await self.audit.record(invitation.id, AuditAction.viewed, None)

            return Return.ok(
                VerifyInvitationResponse(
                    email=invitation.email,
                    first_name=invitation.first_name,
                    last_name=invitation.last_name,
                    organization_id=str(invitation.organization_id),
                    organization_type=invitation.organization_type.value,
                    organization_name=organization_name,
                    role=invitation.role.value,
                    designation=invitation.designation,
                    department=invitation.department,
                    expires_at=invitation.expires_at.isoformat(),
                )
            )

    async def _persist_expiry(self, invitation_id) -> None:
        try:
            await self.uow.invitations.mark_expired(invitation_id)
            await self.uow.commit()
        except StorageError:
            logger.exception("Could not mark invitation %s as expired", invitation_id)
            await self.uow.rollback()
