"""
Invitation Limiter

Per-caller rate limit and duplicate-active suppression. Reads only.
"""

from datetime import datetime, timedelta
from typing import Sequence, Set
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork

RATE_LIMIT_MAX_INVITATIONS = 5
RATE_LIMIT_WINDOW = timedelta(seconds=60)


class InvitationLimiter:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def is_rate_limited(self, inviter_id: UUID, now: datetime) -> bool:
        """True once the caller created the maximum within the trailing window."""
        recent = await self.uow.invitations.count_created_since(
            inviter_id, now - RATE_LIMIT_WINDOW
        )
        return recent >= RATE_LIMIT_MAX_INVITATIONS

    async def find_active_emails(
        self, organization_id: UUID, emails: Sequence[str], now: datetime
    ) -> Set[str]:
        """Emails among ``emails`` that already hold an active invitation (one query)."""
        return await self.uow.invitations.get_active_emails(organization_id, emails, now)
