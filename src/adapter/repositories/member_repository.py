from typing import Optional, Sequence
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.errors import storage_errors
from src.app.repositories.member_repository import IMemberRepository
from src.domain.entities import Member, MemberRole


class MemberRepository(IMemberRepository):
    """Member repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active_by_user_and_company(
        self, user_id: UUID, company_id: UUID, roles: Sequence[MemberRole]
    ) -> Optional[Member]:
        """Get an active membership of the user in the company holding one of ``roles``"""
        stmt = (
            select(Member)
            .where(
                Member.user_id == user_id,
                Member.company_id == company_id,
                Member.is_active == True,  # noqa: E712
                col(Member.role).in_(list(roles)),
            )
            .limit(1)
        )
        async with storage_errors("get company member"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, member: Member) -> Member:
        """Create a new member"""
        async with storage_errors("create member"):
            self.session.add(member)
            await self.session.flush()
        return member
