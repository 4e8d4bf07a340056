"""
Create Invitation Use Case

Issues a single invitation on behalf of an authenticated inviter.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import DuplicateRecordError, StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.invitation_limiter import (
    RATE_LIMIT_MAX_INVITATIONS,
    InvitationLimiter,
)
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.app.services.token_service import generate_token, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditAction
from src.domain.principal import AuthenticatedPrincipal

from .drafts import DraftValidationError, build_invitation, validate_draft
from .dtos import CreateInvitationResponse, InvitationDraft
from .lookups import resolve_organization_name

logger = logging.getLogger(__name__)

DUPLICATE_ACTIVE_MESSAGE = "An active invitation already exists for this email"


class CreateInvitationUseCase:
    """
    Use case for issuing one invitation.

    Business Rules:
    - Required: email, first_name, last_name, organization_id,
      organization_type, role
    - Caller must be an owner/admin of the company, or a manager of the
      association
    - At most 5 invitations per caller in any trailing 60 seconds
    - No second active invitation for the same (email, organization)
    - Token is generated fresh; only its SHA-256 hash is stored
    - Expires 48 hours after creation
    - Email delivery and audit are best-effort and happen after commit
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
        self.limiter = InvitationLimiter(uow)
        self.audit = InvitationAuditLogger(uow)

    async def execute(
        self, principal: AuthenticatedPrincipal, draft: InvitationDraft
    ) -> Result[CreateInvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            principal: Authenticated inviter
            draft: Invitation fields as submitted

        Returns:
            Result with CreateInvitationResponse DTO, or Error
        """
        try:
            valid = validate_draft(draft)
        except DraftValidationError as exc:
            return Return.err(Error("VALIDATION_ERROR", exc.detail))

        now = self.clock()

        async with self.uow:
            authorized = await self.guard.is_authorized(
                principal, valid.organization_type, valid.organization_id
            )
            if not authorized:
                return Return.err(
                    Error(
                        "UNAUTHORIZED",
                        "Unauthorized: you cannot invite members to this organization",
                    )
                )

            try:
                if await self.limiter.is_rate_limited(principal.user_id, now):
                    return Return.err(
                        Error(
                            "RATE_LIMIT_EXCEEDED",
                            f"Rate limit exceeded. Maximum {RATE_LIMIT_MAX_INVITATIONS} "
                            "invitations per minute.",
                        )
                    )

                active = await self.limiter.find_active_emails(
                    valid.organization_id, [valid.email], now
                )
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            if active:
                return Return.err(
                    Error("DUPLICATE_ACTIVE_INVITATION", DUPLICATE_ACTIVE_MESSAGE)
                )

            try:
                raw_token = generate_token()
            except (OSError, NotImplementedError):
                logger.exception("Secure randomness unavailable; invitation not issued")
                return Return.err(
                    Error("TOKEN_GENERATION_FAILED", "Failed to generate invitation token")
                )

            invitation = build_invitation(
                valid, hash_token(raw_token), principal.user_id, now
            )

            try:
                await self.uow.invitations.expire_stale(
                    valid.organization_id, [valid.email], now
                )
                await self.uow.invitations.create(invitation)
                await self.uow.commit()
            except DuplicateRecordError:
                # Lost a race with a concurrent request for the same pair
                await self.uow.rollback()
                return Return.err(
                    Error("DUPLICATE_ACTIVE_INVITATION", DUPLICATE_ACTIVE_MESSAGE)
                )
            except StorageError as exc:
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            logger.info(
                "Invitation %s created for %s by %s",
                invitation.id,
                invitation.email,
                principal.user_id,
            )

            organization_name = await resolve_organization_name(
                self.uow, invitation.organization_type, invitation.organization_id
            )
            self.dispatcher.dispatch(invitation, raw_token, organization_name)

            await self.audit.record(invitation.id, AuditAction.created, principal.user_id)

            return Return.ok(
                CreateInvitationResponse(
                    invitation_id=str(invitation.id),
                    message="Invitation created and email queued for delivery",
                )
            )
