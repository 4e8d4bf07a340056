from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import InvitationAuditEntry


class IInvitationAuditRepository(ABC):
    """InvitationAuditEntry repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: InvitationAuditEntry) -> InvitationAuditEntry:
        """Append a new audit entry (immutable)"""
        pass

    @abstractmethod
    async def list_by_invitation(self, invitation_id: UUID) -> List[InvitationAuditEntry]:
        """Get the trail for one invitation, oldest first"""
        pass
