from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.domain.principal import AuthenticatedPrincipal

NOW = datetime(2025, 1, 15, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def principal():
    return AuthenticatedPrincipal(user_id=uuid4())


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)

    uow.members = MagicMock()
    uow.members.get_active_by_user_and_company = AsyncMock(return_value=None)
    uow.members.create = AsyncMock(side_effect=lambda member: member)

    uow.association_managers = MagicMock()
    uow.association_managers.get_active_by_user_and_association = AsyncMock(
        return_value=None
    )
    uow.association_managers.create = AsyncMock(side_effect=lambda manager: manager)

    uow.organizations = MagicMock()
    uow.organizations.get_name = AsyncMock(return_value="Acme Corp")

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock(return_value=None)
    uow.invitations.get_by_token_hash = AsyncMock(return_value=None)
    uow.invitations.get_redeemable_by_token_hash = AsyncMock(return_value=None)
    uow.invitations.get_active_emails = AsyncMock(return_value=set())
    uow.invitations.count_created_since = AsyncMock(return_value=0)
    uow.invitations.expire_stale = AsyncMock(return_value=0)
    uow.invitations.list_by_organization = AsyncMock(return_value=[])
    uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.create_batch = AsyncMock(side_effect=lambda invitations: invitations)
    uow.invitations.update = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.mark_accepted = AsyncMock(return_value=True)
    uow.invitations.mark_revoked = AsyncMock(return_value=True)
    uow.invitations.mark_expired = AsyncMock(return_value=True)

    uow.invitation_audit = MagicMock()
    uow.invitation_audit.create = AsyncMock(side_effect=lambda entry: entry)
    uow.invitation_audit.list_by_invitation = AsyncMock(return_value=[])

    return uow


@pytest.fixture
def mock_dispatcher():
    dispatcher = MagicMock()
    dispatcher.dispatch = MagicMock()
    return dispatcher


@pytest.fixture
def make_invitation(now):
    from src.domain.entities import (
        INVITATION_TTL,
        Invitation,
        InvitationRole,
        InvitationStatus,
        OrganizationKind,
    )

    def _make(**overrides):
        values = dict(
            email="jane@acme.com",
            first_name="Jane",
            last_name="Doe",
            organization_id=uuid4(),
            organization_type=OrganizationKind.company,
            role=InvitationRole.member,
            token_hash="a" * 64,
            status=InvitationStatus.pending,
            invited_by=uuid4(),
            created_at=now,
            expires_at=now + INVITATION_TTL,
        )
        values.update(overrides)
        return Invitation(**values)

    return _make


@pytest.fixture
def grant_company_admin(mock_uow, principal):
    """Make the guard treat ``principal`` as an admin of the given company."""
    from src.domain.entities import Member, MemberRole

    def _grant(company_id):
        mock_uow.members.get_active_by_user_and_company.return_value = Member(
            user_id=principal.user_id, company_id=company_id, role=MemberRole.admin
        )

    return _grant
