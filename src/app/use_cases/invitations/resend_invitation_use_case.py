"""
Resend Invitation Use Case

Issues a fresh link for an invitation that has not been redeemed or revoked.
"""

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import DuplicateRecordError, StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.app.services.token_service import generate_token, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditAction, InvitationStatus
from src.domain.principal import AuthenticatedPrincipal

from .dtos import ResendInvitationResponse
from .lookups import resolve_organization_name

logger = logging.getLogger(__name__)


class ResendInvitationUseCase:
    """
    Use case for resending an invitation.

    Business Rules:
    - Only pending or expired invitations can be resent
    - Same authorization as creation, against the invitation's organization
    - Rotates the token (the old link stops working) and restarts the 48h window
    - Fails with DUPLICATE_ACTIVE_INVITATION if reviving an expired invitation
      would shadow another active one for the same email
    - Sends a reminder email and appends a ``resent`` audit entry, best-effort
    """

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.clock = clock
        self.guard = InvitationAuthorizationGuard(uow)
        self.audit = InvitationAuditLogger(uow)

    async def execute(
        self, principal: AuthenticatedPrincipal, invitation_id: UUID
    ) -> Result[ResendInvitationResponse]:
        now = self.clock()

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
                    Error("UNAUTHORIZED", "Unauthorized: User cannot resend this invitation")
                )

            if invitation.is_terminal:
                return Return.err(
                    Error(
                        "INVITATION_TERMINAL",
                        f"Invitation is {invitation.status.value} and cannot be resent",
                    )
                )

            try:
                raw_token = generate_token()
            except (OSError, NotImplementedError):
                logger.exception("Secure randomness unavailable; invitation not resent")
                return Return.err(
                    Error("TOKEN_GENERATION_FAILED", "Failed to generate invitation token")
                )

            try:
                if invitation.status == InvitationStatus.expired:
                    # A stale pending row for the same pair must not block the revival
                    await self.uow.invitations.expire_stale(
                        invitation.organization_id, [invitation.email], now
                    )
                invitation.rotate_token(hash_token(raw_token), now)
                await self.uow.invitations.update(invitation)
                await self.uow.commit()
            except DuplicateRecordError:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        "DUPLICATE_ACTIVE_INVITATION",
                        "An active invitation already exists for this email",
                    )
                )
            except StorageError as exc:
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            logger.info("Invitation %s resent by %s", invitation.id, principal.user_id)

            organization_name = await resolve_organization_name(
                self.uow, invitation.organization_type, invitation.organization_id
            )
            self.dispatcher.dispatch(invitation, raw_token, organization_name, reminder=True)

            await self.audit.record(
                invitation.id, AuditAction.resent, principal.user_id, "Invitation resent"
            )

            return Return.ok(
                ResendInvitationResponse(
                    status=invitation.status.value,
                    expires_at=invitation.expires_at.isoformat(),
                    message="Invitation resent successfully",
                )
            )
