"""
Invitation Audit Logger

Appends audit entries after the invitation itself is committed. A failed
write is logged and dropped; it never undoes the primary outcome.
"""

import logging
from typing import Iterable, Optional, Tuple
from uuid import UUID

from src.app.repositories.exceptions import StorageError
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditAction, InvitationAuditEntry

logger = logging.getLogger(__name__)

AuditRecord = Tuple[UUID, AuditAction, Optional[UUID], Optional[str]]


class InvitationAuditLogger:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(
        self,
        invitation_id: UUID,
        action: AuditAction,
        actor_id: Optional[UUID],
        notes: Optional[str] = None,
    ) -> bool:
        return await self.record_many([(invitation_id, action, actor_id, notes)])

    async def record_many(self, records: Iterable[AuditRecord]) -> bool:
        """Append all records in one commit. Returns False if the write was dropped."""
        records = list(records)
        if not records:
            return True
        try:
            for invitation_id, action, actor_id, notes in records:
                await self.uow.invitation_audit.create(
                    InvitationAuditEntry(
                        invitation_id=invitation_id,
                        action=action,
                        performed_by=actor_id,
                        notes=notes,
                    )
                )
            await self.uow.commit()
        except StorageError:
            logger.exception(
                "Audit write failed for %d invitation action(s); dropping", len(records)
            )
            await self.uow.rollback()
            return False
        return True
