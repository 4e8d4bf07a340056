"""
AssociationManager Entity

Grants a User management rights over an Association.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utc_now


class AssociationManager(SQLModel, table=True):
    """
    AssociationManager entity - any active manager may invite to the association.
    """

    __tablename__ = "association_managers"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)
    association_id: UUID = Field(nullable=False, index=True)

    role: str = Field(default="manager", max_length=50)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_association_manager_user_assoc", "user_id", "association_id"),
    )
