from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from src.adapter.repositories.invitation_repository import InvitationRepository
from src.app.repositories.exceptions import DuplicateRecordError
from src.app.services.token_service import generate_token, hash_token
from src.domain.entities import (
    INVITATION_TTL,
    Invitation,
    InvitationRole,
    InvitationStatus,
    OrganizationKind,
)

NOW = datetime(2025, 1, 15, 12, 0, 0)
ORG_ID = uuid4()
INVITER_ID = uuid4()


def make_invitation(email="jane@acme.com", created_at=NOW, **overrides) -> Invitation:
    values = dict(
        email=email,
        first_name="Jane",
        last_name="Doe",
        organization_id=ORG_ID,
        organization_type=OrganizationKind.company,
        role=InvitationRole.member,
        token_hash=hash_token(generate_token()),
        invited_by=INVITER_ID,
        created_at=created_at,
        expires_at=created_at + INVITATION_TTL,
    )
    values.update(overrides)
    return Invitation(**values)


@pytest.mark.asyncio
async def test_second_pending_invitation_for_same_pair_is_rejected(db_session):
    repo = InvitationRepository(db_session)
    await repo.create(make_invitation())
    await db_session.commit()

    with pytest.raises(DuplicateRecordError):
        await repo.create(make_invitation())
    await db_session.rollback()


@pytest.mark.asyncio
async def test_non_pending_rows_do_not_block(db_session):
    repo = InvitationRepository(db_session)
    await repo.create(make_invitation(status=InvitationStatus.revoked))
    await repo.create(make_invitation(status=InvitationStatus.accepted))
    await repo.create(make_invitation())
    await repo.create(make_invitation(organization_id=uuid4()))
    await db_session.commit()


@pytest.mark.asyncio
async def test_active_emails_ignore_expired_rows(db_session):
    repo = InvitationRepository(db_session)
    await repo.create_batch(
        [
            make_invitation("a@acme.com"),
            make_invitation("b@acme.com", created_at=NOW - INVITATION_TTL - timedelta(hours=1)),
            make_invitation("c@acme.com", status=InvitationStatus.revoked),
        ]
    )
    await db_session.commit()

    active = await repo.get_active_emails(
        ORG_ID, ["a@acme.com", "b@acme.com", "c@acme.com", "d@acme.com"], NOW
    )

    assert active == {"a@acme.com"}


@pytest.mark.asyncio
async def test_expire_stale_only_touches_past_expiry(db_session):
    repo = InvitationRepository(db_session)
    fresh = make_invitation("a@acme.com")
    stale = make_invitation("b@acme.com", created_at=NOW - INVITATION_TTL - timedelta(hours=1))
    await repo.create_batch([fresh, stale])
    await db_session.commit()

    expired = await repo.expire_stale(ORG_ID, ["a@acme.com", "b@acme.com"], NOW)
    await db_session.commit()

    assert expired == 1
    assert (await repo.get_by_id(stale.id)).status == InvitationStatus.expired
    assert (await repo.get_by_id(fresh.id)).status == InvitationStatus.pending


@pytest.mark.asyncio
async def test_count_created_since(db_session):
    repo = InvitationRepository(db_session)
    await repo.create_batch(
        [
            make_invitation("a@acme.com", created_at=NOW - timedelta(seconds=90)),
            make_invitation("b@acme.com", created_at=NOW - timedelta(seconds=30)),
            make_invitation("c@acme.com", created_at=NOW),
            make_invitation("d@acme.com", created_at=NOW, invited_by=uuid4()),
        ]
    )
    await db_session.commit()

    assert await repo.count_created_since(INVITER_ID, NOW - timedelta(seconds=60)) == 2


@pytest.mark.asyncio
async def test_redeemable_lookup(db_session):
    repo = InvitationRepository(db_session)
    invitation = make_invitation()
    await repo.create(invitation)
    await db_session.commit()

    assert await repo.get_redeemable_by_token_hash(invitation.token_hash, NOW) is not None
    assert await repo.get_redeemable_by_token_hash(invitation.token_hash, invitation.expires_at) is not None
    assert (
        await repo.get_redeemable_by_token_hash(
            invitation.token_hash, invitation.expires_at + timedelta(seconds=1)
        )
        is None
    )
    assert await repo.get_redeemable_by_token_hash("0" * 64, NOW) is None


@pytest.mark.asyncio
async def test_transitions_only_from_pending(db_session):
    repo = InvitationRepository(db_session)
    invitation = make_invitation()
    await repo.create(invitation)
    await db_session.commit()

    user_id = uuid4()
    assert await repo.mark_accepted(invitation.id, user_id, NOW) is True
    assert await repo.mark_accepted(invitation.id, uuid4(), NOW) is False
    assert await repo.mark_revoked(invitation.id, uuid4(), NOW) is False
    await db_session.commit()

    stored = await repo.get_by_id(invitation.id)
    assert stored.status == InvitationStatus.accepted
    assert stored.accepted_by == user_id
    assert stored.accepted_at == NOW
    assert await repo.get_redeemable_by_token_hash(invitation.token_hash, NOW) is None


@pytest.mark.asyncio
async def test_batch_insert_is_all_or_nothing(db_session):
    repo = InvitationRepository(db_session)
    await repo.create(make_invitation("a@acme.com"))
    await db_session.commit()

    with pytest.raises(DuplicateRecordError):
        await repo.create_batch([make_invitation("b@acme.com"), make_invitation("a@acme.com")])
    await db_session.rollback()

    assert await repo.get_active_emails(ORG_ID, ["a@acme.com", "b@acme.com"], NOW) == {
        "a@acme.com"
    }
