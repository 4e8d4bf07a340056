from datetime import datetime
from typing import List, Optional, Sequence, Set
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.errors import storage_errors
from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        async with storage_errors("get invitation"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[Invitation]:
        """Get invitation by token hash, whatever its status"""
        stmt = select(Invitation).where(Invitation.token_hash == token_hash)
        async with storage_errors("get invitation by token"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_redeemable_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[Invitation]:
        """Get invitation by token hash only if pending and not expired at ``now``"""
        stmt = select(Invitation).where(
            Invitation.token_hash == token_hash,
            Invitation.status == InvitationStatus.pending,
            col(Invitation.expires_at) >= now,
        )
        async with storage_errors("get redeemable invitation"):
            result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_emails(
        self, organization_id: UUID, emails: Sequence[str], now: datetime
    ) -> Set[str]:
        """Return the subset of ``emails`` holding a pending, unexpired invitation"""
        if not emails:
            return set()
        stmt = select(Invitation.email).where(
            Invitation.organization_id == organization_id,
            col(Invitation.email).in_(list(emails)),
            Invitation.status == InvitationStatus.pending,
            col(Invitation.expires_at) >= now,
        )
        async with storage_errors("check active invitations"):
            result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def count_created_since(self, invited_by: UUID, since: datetime) -> int:
        """Count invitations created by ``invited_by`` at or after ``since``"""
        stmt = (
            select(func.count())
            .select_from(Invitation)
            .where(
                Invitation.invited_by == invited_by,
                col(Invitation.created_at) >= since,
            )
        )
        async with storage_errors("count recent invitations"):
            result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def expire_stale(
        self, organization_id: UUID, emails: Sequence[str], now: datetime
    ) -> int:
        """Mark pending-but-past-expiry invitations for these emails as expired"""
        if not emails:
            return 0
        stmt = (
            update(Invitation)
            .where(
                col(Invitation.organization_id) == organization_id,
                col(Invitation.email).in_(list(emails)),
                col(Invitation.status) == InvitationStatus.pending,
                col(Invitation.expires_at) < now,
            )
            .values(status=InvitationStatus.expired)
        )
        async with storage_errors("expire stale invitations"):
            result = await self.session.execute(stmt)
        return result.rowcount

    async def list_by_organization(self, organization_id: UUID) -> List[Invitation]:
        """Get all invitations for an organization, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.organization_id == organization_id)
            .order_by(col(Invitation.created_at).desc())
        )
        async with storage_errors("list invitations"):
            result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        async with storage_errors("create invitation"):
            self.session.add(invitation)
            await self.session.flush()
            await self.session.refresh(invitation)
        return invitation

    async def create_batch(self, invitations: List[Invitation]) -> List[Invitation]:
        """Create many invitations in one flush; all or nothing"""
        if not invitations:
            return []
        async with storage_errors("create invitation batch"):
            self.session.add_all(invitations)
            await self.session.flush()
        return invitations

    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        async with storage_errors("update invitation"):
            self.session.add(invitation)
            await self.session.flush()
            await self.session.refresh(invitation)
        return invitation

    async def mark_accepted(
        self, invitation_id: UUID, accepted_by: UUID, now: datetime
    ) -> bool:
        """Transition pending -> accepted. False if the invitation was not pending."""
        return await self._transition_from_pending(
            invitation_id,
            status=InvitationStatus.accepted,
            accepted_at=now,
            accepted_by=accepted_by,
        )

    async def mark_revoked(
        self, invitation_id: UUID, revoked_by: UUID, now: datetime
    ) -> bool:
        """Transition pending -> revoked. False if the invitation was not pending."""
        return await self._transition_from_pending(
            invitation_id,
            status=InvitationStatus.revoked,
            revoked_at=now,
            revoked_by=revoked_by,
        )

    async def mark_expired(self, invitation_id: UUID) -> bool:
        """Transition pending -> expired. False if the invitation was not pending."""
        return await self._transition_from_pending(
            invitation_id, status=InvitationStatus.expired
        )

    async def _transition_from_pending(self, invitation_id: UUID, **values) -> bool:
        # Conditional on status so concurrent redemptions cannot both succeed
        stmt = (
            update(Invitation)
            .where(
                col(Invitation.id) == invitation_id,
                col(Invitation.status) == InvitationStatus.pending,
            )
            .values(**values)
        )
        async with storage_errors("transition invitation"):
            result = await self.session.execute(stmt)
        return result.rowcount == 1
