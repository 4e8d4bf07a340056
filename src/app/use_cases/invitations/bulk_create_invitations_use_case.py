"""
Bulk Create Invitations Use Case

Issues many invitations in one request with per-row failure reporting.
"""

import logging
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.repositories.exceptions import DuplicateRecordError, StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.invitation_guard import InvitationAuthorizationGuard
from src.app.services.invitation_limiter import InvitationLimiter
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.app.services.token_service import generate_token, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditAction, Invitation, OrganizationKind
from src.domain.principal import AuthenticatedPrincipal

from .drafts import (
    DraftValidationError,
    ValidDraft,
    build_invitation,
    parse_draft,
    raw_row_email,
    validate_draft,
)
from .dtos import (
    BulkCreateInvitationsResponse,
    BulkInvitationFailure,
    BulkInvitationResults,
)
from .lookups import resolve_organization_name

logger = logging.getLogger(__name__)

DUPLICATE_IN_BATCH = "Duplicate entry in batch"
ACTIVE_INVITATION_EXISTS = "Active invitation already exists"
TOKEN_GENERATION_FAILED = "Failed to generate invitation token"
CREATE_FAILED = "Failed to create invitation"


class BulkCreateInvitationsUseCase:
    """
    Use case for issuing a batch of invitations.

    Business Rules:
    - Rows are independent: a row that fails validation, dedup or token
      generation is reported under ``failed`` and the rest proceed
    - Later occurrences of the same (email, organization) in one batch fail
    - Caller must be authorized for every organization named by a valid row,
      otherwise the whole request is rejected before anything is written
    - Existing active invitations are checked with one query per organization
    - Surviving rows are written with a single insert; if that insert fails,
      only its rows are reported as failed
    - No per-caller rate limit
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
        self, principal: AuthenticatedPrincipal, drafts: List[Any]
    ) -> Result[BulkCreateInvitationsResponse]:
        """
        Execute bulk create invitations use case.

        Args:
            principal: Authenticated inviter
            drafts: Invitation rows as submitted (InvitationDraft or raw JSON objects)

        Returns:
            Result with BulkCreateInvitationsResponse DTO, or Error when the
            request as a whole is rejected
        """
        if not drafts:
            return Return.err(Error("VALIDATION_ERROR", "No invitations provided"))

        now = self.clock()
        failures: List[Tuple[int, BulkInvitationFailure]] = []

        def fail(index: int, email: Optional[str], reason: str) -> None:
            failures.append((index, BulkInvitationFailure(email=email, error=reason)))

        # Phase 1: validate and drop repeats within the batch
        candidates: List[Tuple[int, ValidDraft]] = []
        seen = set()
        for index, row in enumerate(drafts):
            try:
                valid = validate_draft(parse_draft(row))
            except DraftValidationError as exc:
                fail(index, raw_row_email(row), exc.reason)
                continue

            key = (valid.email, valid.organization_id)
            if key in seen:
                fail(index, valid.email, DUPLICATE_IN_BATCH)
                continue
            seen.add(key)
            candidates.append((index, valid))

        async with self.uow:
            # Phase 2: authorization, once per organization
            organizations: Dict[UUID, OrganizationKind] = OrderedDict()
            for _, valid in candidates:
                organizations.setdefault(valid.organization_id, valid.organization_type)

            for organization_id, kind in organizations.items():
                if not await self.guard.is_authorized(principal, kind, organization_id):
                    return Return.err(
                        Error(
                            "UNAUTHORIZED",
                            "Unauthorized: you cannot invite members to organization "
                            f"{organization_id}",
                        )
                    )

            # Phase 3: existing active invitations, one query per organization
            try:
                active = await self._active_pairs(candidates, now)
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            # Phase 4: build rows; a token failure only costs its own row
            issued: List[Tuple[int, Invitation, str]] = []
            for index, valid in candidates:
                if (valid.email, valid.organization_id) in active:
                    fail(index, valid.email, ACTIVE_INVITATION_EXISTS)
                    continue
                try:
                    raw_token = generate_token()
                except (OSError, NotImplementedError):
                    logger.exception("Secure randomness unavailable for %s", valid.email)
                    fail(index, valid.email, TOKEN_GENERATION_FAILED)
                    continue
                invitation = build_invitation(
                    valid, hash_token(raw_token), principal.user_id, now
                )
                issued.append((index, invitation, raw_token))

            # Phase 5: single insert
            if issued:
                try:
                    await self._persist([invitation for _, invitation, _ in issued], now)
                except StorageError as exc:
                    await self.uow.rollback()
                    reason = (
                        ACTIVE_INVITATION_EXISTS
                        if isinstance(exc, DuplicateRecordError)
                        else CREATE_FAILED
                    )
                    logger.error(
                        "Bulk insert of %d invitation(s) failed: %s", len(issued), exc
                    )
                    for index, invitation, _ in issued:
                        fail(index, invitation.email, reason)
                    issued = []

            # Phase 6: notify and audit what was persisted
            names: Dict[UUID, str] = {}
            for _, invitation, raw_token in issued:
                if invitation.organization_id not in names:
                    names[invitation.organization_id] = await resolve_organization_name(
                        self.uow, invitation.organization_type, invitation.organization_id
                    )
                self.dispatcher.dispatch(
                    invitation, raw_token, names[invitation.organization_id]
                )

            await self.audit.record_many(
                (invitation.id, AuditAction.created, principal.user_id, None)
                for _, invitation, _ in issued
            )

            successful = [invitation.email for _, invitation, _ in issued]
            failed = [failure for _, failure in sorted(failures, key=lambda f: f[0])]

            logger.info(
                "Bulk invitations by %s: %d created, %d failed",
                principal.user_id,
                len(successful),
                len(failed),
            )

            return Return.ok(
                BulkCreateInvitationsResponse(
                    results=BulkInvitationResults(successful=successful, failed=failed),
                    message=(
                        f"Successfully sent {len(successful)} invitation(s). "
                        f"{len(failed)} failed."
                    ),
                )
            )

    async def _active_pairs(
        self, candidates: List[Tuple[int, ValidDraft]], now: datetime
    ) -> Set[Tuple[str, UUID]]:
        emails_by_org: Dict[UUID, List[str]] = OrderedDict()
        for _, valid in candidates:
            emails_by_org.setdefault(valid.organization_id, []).append(valid.email)

        active: Set[Tuple[str, UUID]] = set()
        for organization_id, emails in emails_by_org.items():
            found = await self.limiter.find_active_emails(organization_id, emails, now)
            active.update((email, organization_id) for email in found)
        return active

    async def _persist(self, invitations: List[Invitation], now: datetime) -> None:
        emails_by_org: Dict[UUID, List[str]] = OrderedDict()
        for invitation in invitations:
            emails_by_org.setdefault(invitation.organization_id, []).append(
                invitation.email
            )
        for organization_id, emails in emails_by_org.items():
            await self.uow.invitations.expire_stale(organization_id, emails, now)

        await self.uow.invitations.create_batch(invitations)
        await self.uow.commit()
