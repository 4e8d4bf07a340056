"""
Invitation Entity

Time-limited, single-use offer for an email to join an organization.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import InvitationRole, InvitationStatus, OrganizationKind

INVITATION_TTL = timedelta(hours=48)

TERMINAL_STATUSES = frozenset({InvitationStatus.accepted, InvitationStatus.revoked})


class Invitation(SQLModel, table=True):
    """
    Invitation entity - pending offer to join a company or association.

    Business Rules:
    - Email is stored lowercased
    - Only the SHA-256 hash of the token is persisted; the raw token lives in
      the redemption link only
    - Expires 48 hours after creation (or after the last resend)
    - At most one pending invitation per (email, organization_id); enforced by
      a partial unique index
    - accepted and revoked are terminal
    - expired is derived from expires_at; it is persisted only when a stale
      invitation is observed
    """

    __tablename__ = "member_invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    email: str = Field(max_length=255, nullable=False, index=True)
    first_name: str = Field(max_length=255, nullable=False)
    last_name: str = Field(max_length=255, nullable=False)

    organization_id: UUID = Field(nullable=False, index=True)
    organization_type: OrganizationKind = Field(nullable=False)
    role: InvitationRole = Field(nullable=False)
    designation: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)

    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 hex

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    invited_by: UUID = Field(nullable=False, index=True)

    accepted_by: Optional[UUID] = Field(default=None)
    revoked_by: Optional[UUID] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_invited_by_created_at", "invited_by", "created_at"),
        Index(
            "uq_invitation_pending_email_org",
            "email",
            "organization_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def is_redeemable(self, now: datetime) -> bool:
        return self.status == InvitationStatus.pending and not self.is_expired(now)

    def effective_status(self, now: datetime) -> InvitationStatus:
        if self.status == InvitationStatus.pending and self.is_expired(now):
            return InvitationStatus.expired
        return self.status

    def rotate_token(self, token_hash: str, now: datetime) -> None:
        """Issue a fresh secret and expiry window; terminal invitations refuse."""
        if self.is_terminal:
            raise ValueError(f"Invitation {self.id} is {self.status.value}")
        self.token_hash = token_hash
        self.expires_at = now + INVITATION_TTL
        self.status = InvitationStatus.pending
