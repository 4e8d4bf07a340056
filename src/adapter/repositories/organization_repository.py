from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.errors import storage_errors
from src.app.repositories.organization_repository import IOrganizationRepository
from src.domain.entities import Association, Company, OrganizationKind


class OrganizationRepository(IOrganizationRepository):
    """Organization directory backed by the companies and associations tables"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_name(
        self, organization_kind: OrganizationKind, organization_id: UUID
    ) -> Optional[str]:
        """Get the display name of a company or association, None if unknown"""
        if organization_kind == OrganizationKind.company:
            stmt = select(Company.name).where(Company.id == organization_id)
        else:
            stmt = select(Association.name).where(Association.id == organization_id)
        async with storage_errors("get organization name"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
