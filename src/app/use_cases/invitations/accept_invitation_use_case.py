"""
Accept Invitation Use Case

Redeems an invitation token: creates the account, provisions membership in
the inviting organization and consumes the invitation.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

import bcrypt

from libs.result import Error, Result, Return
from src.api.utils.jwt import create_access_token
from src.app.repositories.exceptions import DuplicateRecordError, StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.app.services.token_service import hash_token, is_well_formed_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import (
    AssociationManager,
    AuditAction,
    Invitation,
    InvitationRole,
    Member,
    MemberRole,
    OrganizationKind,
    User,
)

from .dtos import AcceptInvitationResponse

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
ASSOCIATION_MANAGER_ROLES = (InvitationRole.admin, InvitationRole.manager)
INVALID_OR_EXPIRED = "Invalid or expired invitation"
ALREADY_USED = "This invitation has already been used or was modified"
USER_EXISTS = "An account with this email already exists. Please sign in instead."


class AcceptInvitationUseCase:
    """
    Use case for redeeming an invitation.

    Business Rules:
    - Token must match a pending, unexpired invitation
    - Password must be at least 8 characters; hashed with bcrypt cost 12
    - An existing account for the invited email is rejected (sign in instead)
    - company: one members row carrying role, designation and department
    - association: an association_managers row for admin/manager roles, plus a
      members row without company for every invitee
    - The invitation is consumed with a conditional update on status=pending;
      if another redemption won, everything is rolled back
    - Audit entry ``accepted`` is written after commit (actor = new user)
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock
        self.audit = InvitationAuditLogger(uow)

    async def execute(
        self,
        token: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            token: Raw invitation token from the redemption link
            password: Password for the new account
            first_name: Optional override of the invited first name
            last_name: Optional override of the invited last name

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        if not token or not password:
            return Return.err(Error("VALIDATION_ERROR", "Missing required fields"))

        if len(password) < MIN_PASSWORD_LENGTH:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                )
            )

        if not is_well_formed_token(token):
            return Return.err(Error("INVALID_OR_EXPIRED_INVITATION", INVALID_OR_EXPIRED))

        now = self.clock()

        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_redeemable_by_token_hash(
                    hash_token(token), now
                )
                if invitation is None:
                    return Return.err(
                        Error("INVALID_OR_EXPIRED_INVITATION", INVALID_OR_EXPIRED)
                    )

                existing_user = await self.uow.users.get_by_email(invitation.email)
            except StorageError as exc:
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            if existing_user is not None:
                return Return.err(Error("USER_EXISTS", USER_EXISTS))

            password_hash = bcrypt.hashpw(
                password.encode("utf-8"), bcrypt.gensalt(rounds=12)
            ).decode("utf-8")

            try:
                user = await self.uow.users.create(
                    User(
                        email=invitation.email,
                        password_hash=password_hash,
                        first_name=(first_name or "").strip() or invitation.first_name,
                        last_name=(last_name or "").strip() or invitation.last_name,
                    )
                )

                await self._provision_membership(invitation, user.id)

                consumed = await self.uow.invitations.mark_accepted(
                    invitation.id, user.id, now
                )
                if not consumed:
                    await self.uow.rollback()
                    return Return.err(Error("INVITATION_ALREADY_USED", ALREADY_USED))

                await self.uow.commit()
            except DuplicateRecordError:
                await self.uow.rollback()
                return Return.err(Error("USER_EXISTS", USER_EXISTS))
            except StorageError as exc:
                await self.uow.rollback()
                return Return.err(Error("STORAGE_ERROR", str(exc)))

            logger.info("Invitation %s accepted by new user %s", invitation.id, user.id)

            await self.audit.record(
                invitation.id,
                AuditAction.accepted,
                user.id,
                "Registration completed successfully",
            )

            return Return.ok(
                AcceptInvitationResponse(
                    user_id=str(user.id),
                    access_token=create_access_token(user.id),
                    message="Registration completed successfully",
                )
            )

    async def _provision_membership(self, invitation: Invitation, user_id) -> None:
        member_role = MemberRole(invitation.role.value)

        if invitation.organization_type == OrganizationKind.company:
            await self.uow.members.create(
                Member(
                    user_id=user_id,
                    company_id=invitation.organization_id,
                    role=member_role,
                    designation=invitation.designation,
                    department=invitation.department,
                )
            )
            return

        if invitation.role in ASSOCIATION_MANAGER_ROLES:
            await self.uow.association_managers.create(
                AssociationManager(
                    user_id=user_id,
                    association_id=invitation.organization_id,
                    role=invitation.role.value,
                )
            )

        # Every association invitee gets a platform member row without a company
        await self.uow.members.create(Member(user_id=user_id, role=member_role))
