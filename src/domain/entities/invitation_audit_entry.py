"""
InvitationAuditEntry Entity

Append-only trail of actions taken against an invitation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utc_now
from .enums import AuditAction


class InvitationAuditEntry(SQLModel, table=True):
    """
    InvitationAuditEntry entity - one row per lifecycle action.

    Business Rules:
    - Immutable (never updated or deleted)
    - performed_by is null for anonymous actions (token verification)
    - Never read by the create path
    """

    __tablename__ = "member_invitation_audit"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    invitation_id: UUID = Field(nullable=False, index=True)
    action: AuditAction = Field(nullable=False)
    performed_by: Optional[UUID] = Field(default=None, index=True)
    notes: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_invitation_audit_invitation_created", "invitation_id", "created_at"),
    )
