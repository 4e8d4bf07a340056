"""
Member Entity

Links a User to a Company with a role. Association invitees also receive a
member row without a company.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utc_now
from .enums import MemberRole


class Member(SQLModel, table=True):
    """
    Member entity - company membership.

    Business Rules:
    - Owners and admins may invite others to their company
    - Inactive members have no privileges
    """

    __tablename__ = "members"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)
    company_id: Optional[UUID] = Field(default=None, index=True)

    role: MemberRole = Field(nullable=False)
    designation: Optional[str] = Field(default=None, max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (Index("idx_member_user_company", "user_id", "company_id"),)
