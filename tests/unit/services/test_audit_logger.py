from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.app.repositories.exceptions import StorageError
from src.app.services.audit_logger import InvitationAuditLogger
from src.domain.entities import AuditAction


@pytest.mark.asyncio
async def test_record_appends_entry_and_commits(mock_uow):
    invitation_id = uuid4()
    actor_id = uuid4()

    audit = InvitationAuditLogger(mock_uow)
    assert await audit.record(invitation_id, AuditAction.created, actor_id)

    entry = mock_uow.invitation_audit.create.await_args.args[0]
    assert entry.invitation_id == invitation_id
    assert entry.action == AuditAction.created
    assert entry.performed_by == actor_id
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_record_many_commits_once(mock_uow):
    audit = InvitationAuditLogger(mock_uow)
    records = [(uuid4(), AuditAction.created, uuid4(), None) for _ in range(3)]

    assert await audit.record_many(records)

    assert mock_uow.invitation_audit.create.await_count == 3
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_record_many_with_nothing_to_write_is_a_no_op(mock_uow):
    audit = InvitationAuditLogger(mock_uow)

    assert await audit.record_many([])
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_write_failure_is_swallowed(mock_uow, caplog):
    mock_uow.commit = AsyncMock(side_effect=StorageError("disk full"))

    audit = InvitationAuditLogger(mock_uow)
    written = await audit.record(uuid4(), AuditAction.viewed, None)

    assert written is False
    mock_uow.rollback.assert_awaited_once()
    assert "Audit write failed" in caplog.text
