from typing import List
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.errors import storage_errors
from src.app.repositories.invitation_audit_repository import IInvitationAuditRepository
from src.domain.entities import InvitationAuditEntry


class InvitationAuditRepository(IInvitationAuditRepository):
    """InvitationAuditEntry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: InvitationAuditEntry) -> InvitationAuditEntry:
        """Append a new audit entry (immutable)"""
        async with storage_errors("append audit entry"):
            self.session.add(entry)
            await self.session.flush()
        return entry

    async def list_by_invitation(self, invitation_id: UUID) -> List[InvitationAuditEntry]:
        """Get the trail for one invitation, oldest first"""
        stmt = (
            select(InvitationAuditEntry)
            .where(InvitationAuditEntry.invitation_id == invitation_id)
            .order_by(col(InvitationAuditEntry.created_at).asc())
        )
        async with storage_errors("list audit entries"):
            result = await self.session.exec(stmt)
        return list(result.all())
