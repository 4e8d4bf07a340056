from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import AssociationManager


class IAssociationManagerRepository(ABC):
    """AssociationManager repository interface - application layer"""

    @abstractmethod
    async def get_active_by_user_and_association(
        self, user_id: UUID, association_id: UUID
    ) -> Optional[AssociationManager]:
        """Get an active manager record of the user for the association"""
        pass

    @abstractmethod
    async def create(self, manager: AssociationManager) -> AssociationManager:
        """Create a new association manager"""
        pass
