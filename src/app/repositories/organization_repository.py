from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import OrganizationKind


class IOrganizationRepository(ABC):
    """Organization directory interface - application layer"""

    @abstractmethod
    async def get_name(
        self, organization_kind: OrganizationKind, organization_id: UUID
    ) -> Optional[str]:
        """Get the display name of a company or association, None if unknown"""
        pass
