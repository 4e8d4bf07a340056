from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from src.domain.entities import Member, MemberRole


class IMemberRepository(ABC):
    """Member repository interface - application layer"""

    @abstractmethod
    async def get_active_by_user_and_company(
        self, user_id: UUID, company_id: UUID, roles: Sequence[MemberRole]
    ) -> Optional[Member]:
        """Get an active membership of the user in the company holding one of ``roles``"""
        pass

    @abstractmethod
    async def create(self, member: Member) -> Member:
        """Create a new member"""
        pass
