from uuid import UUID, uuid4

import pytest

from src.app.use_cases.invitations.drafts import (
    DraftValidationError,
    build_invitation,
    parse_draft,
    raw_row_email,
    validate_draft,
)
from src.app.use_cases.invitations.dtos import InvitationDraft
from src.domain.entities import (
    INVITATION_TTL,
    InvitationRole,
    InvitationStatus,
    OrganizationKind,
)


def draft(**overrides) -> InvitationDraft:
    values = dict(
        email="jane@acme.com",
        first_name="Jane",
        last_name="Doe",
        organization_id=str(uuid4()),
        organization_type="company",
        role="member",
    )
    values.update(overrides)
    return InvitationDraft(**values)


def test_valid_draft_is_normalized():
    valid = validate_draft(
        draft(
            email="  Jane.Doe@ACME.com ",
            first_name=" Jane ",
            organization_type="Company",
            role="ADMIN",
            designation="  ",
        )
    )

    assert valid.email == "jane.doe@acme.com"
    assert valid.first_name == "Jane"
    assert valid.organization_type == OrganizationKind.company
    assert valid.role == InvitationRole.admin
    assert valid.designation is None
    assert isinstance(valid.organization_id, UUID)


def test_missing_fields_are_listed():
    with pytest.raises(DraftValidationError) as exc_info:
        validate_draft(draft(last_name="", role=None))

    assert exc_info.value.reason == "Missing required fields"
    assert exc_info.value.fields == ["last_name", "role"]
    assert exc_info.value.detail == "Missing required fields: last_name, role"


@pytest.mark.parametrize(
    "overrides, reason",
    [
        ({"email": "not-an-email"}, "Invalid email address"),
        ({"organization_id": "org-1"}, "Invalid organization id"),
        ({"organization_type": "guild"}, "Invalid organization type"),
        ({"role": "superuser"}, "Invalid role"),
    ],
)
def test_malformed_values_are_rejected(overrides, reason):
    with pytest.raises(DraftValidationError) as exc_info:
        validate_draft(draft(**overrides))

    assert exc_info.value.reason == reason


def test_build_invitation_sets_pending_and_48h_expiry(now):
    inviter = uuid4()
    valid = validate_draft(draft(designation="CTO"))

    invitation = build_invitation(valid, "c" * 64, inviter, now)

    assert invitation.status == InvitationStatus.pending
    assert invitation.created_at == now
    assert invitation.expires_at == now + INVITATION_TTL
    assert invitation.invited_by == inviter
    assert invitation.token_hash == "c" * 64
    assert invitation.designation == "CTO"


def test_parse_draft_reports_the_offending_field():
    with pytest.raises(DraftValidationError) as exc_info:
        parse_draft({"email": "jane@acme.com", "last_name": 5})

    assert exc_info.value.reason == "Invalid field value"
    assert exc_info.value.fields == ["last_name"]

    with pytest.raises(DraftValidationError) as exc_info:
        parse_draft({"role": ["admin"]})

    assert exc_info.value.reason == "Invalid role"


def test_parse_draft_rejects_non_objects():
    with pytest.raises(DraftValidationError) as exc_info:
        parse_draft("jane@acme.com")

    assert exc_info.value.reason == "Missing required fields"


def test_parse_draft_passes_drafts_through():
    original = draft()

    assert parse_draft(original) is original
    assert parse_draft(original.model_dump()) == original


def test_raw_row_email():
    assert raw_row_email({"email": " Jane@Acme.com "}) == "jane@acme.com"
    assert raw_row_email({"email": 5}) is None
    assert raw_row_email(None) is None
    assert raw_row_email(draft()) == "jane@acme.com"


@pytest.mark.parametrize("field", ["first_name", "last_name", "designation", "department"])
def test_fields_longer_than_column_are_rejected(field):
    with pytest.raises(DraftValidationError) as exc_info:
        validate_draft(draft(**{field: "x" * 256}))

    assert exc_info.value.reason == "Field too long"
    assert exc_info.value.fields == [field]


def test_field_at_column_limit_is_accepted():
    valid = validate_draft(draft(first_name="x" * 255))

    assert valid.first_name == "x" * 255
