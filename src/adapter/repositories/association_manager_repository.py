from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.errors import storage_errors
from src.app.repositories.association_manager_repository import (
    IAssociationManagerRepository,
)
from src.domain.entities import AssociationManager


class AssociationManagerRepository(IAssociationManagerRepository):
    """AssociationManager repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_user_and_association(
        self, user_id: UUID, association_id: UUID
    ) -> Optional[AssociationManager]:
        """Get an active manager record of the user for the association"""
        stmt = (
            select(AssociationManager)
            .where(
                AssociationManager.user_id == user_id,
                AssociationManager.association_id == association_id,
                AssociationManager.is_active == True,  # noqa: E712
            )
            .limit(1)
        )
        async with storage_errors("get association manager"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, manager: AssociationManager) -> AssociationManager:
        """Create a new association manager"""
        async with storage_errors("create association manager"):
            self.session.add(manager)
            await self.session.flush()
        return manager
