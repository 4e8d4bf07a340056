from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Set
from uuid import UUID

from src.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[Invitation]:
        """Get invitation by token hash, whatever its status"""
        pass

    @abstractmethod
    async def get_redeemable_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[Invitation]:
        """Get invitation by token hash only if pending and not expired at ``now``"""
        pass

    @abstractmethod
    async def get_active_emails(
        self, organization_id: UUID, emails: Sequence[str], now: datetime
    ) -> Set[str]:
        """Return the subset of ``emails`` holding a pending, unexpired invitation"""
        pass

    @abstractmethod
    async def count_created_since(self, invited_by: UUID, since: datetime) -> int:
        """Count invitations created by ``invited_by`` at or after ``since``"""
        pass

    @abstractmethod
    async def expire_stale(
        self, organization_id: UUID, emails: Sequence[str], now: datetime
    ) -> int:
        """Mark pending-but-past-expiry invitations for these emails as expired"""
        pass

    @abstractmethod
    async def list_by_organization(self, organization_id: UUID) -> List[Invitation]:
        """Get all invitations for an organization, newest first"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def create_batch(self, invitations: List[Invitation]) -> List[Invitation]:
        """Create many invitations in one write; all or nothing"""
        pass

    @abstractmethod
    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        pass

    @abstractmethod
    async def mark_accepted(
        self, invitation_id: UUID, accepted_by: UUID, now: datetime
    ) -> bool:
        """Transition pending -> accepted. False if the invitation was not pending."""
        pass

    @abstractmethod
    async def mark_revoked(
        self, invitation_id: UUID, revoked_by: UUID, now: datetime
    ) -> bool:
        """Transition pending -> revoked. False if the invitation was not pending."""
        pass

    @abstractmethod
    async def mark_expired(self, invitation_id: UUID) -> bool:
        """Transition pending -> expired. False if the invitation was not pending."""
        pass
