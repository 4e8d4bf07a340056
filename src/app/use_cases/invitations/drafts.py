"""
Draft validation and invitation construction shared by the single and bulk
create paths.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError

from src.domain.entities import (
    INVITATION_TTL,
    Invitation,
    InvitationRole,
    InvitationStatus,
    OrganizationKind,
)

from .dtos import InvitationDraft

REQUIRED_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "organization_id",
    "organization_type",
    "role",
)

MISSING_REQUIRED_FIELDS = "Missing required fields"
INVALID_EMAIL = "Invalid email address"
INVALID_ORGANIZATION_ID = "Invalid organization id"
INVALID_ORGANIZATION_TYPE = "Invalid organization type"
INVALID_ROLE = "Invalid role"
INVALID_FIELD = "Invalid field value"
FIELD_TOO_LONG = "Field too long"

# Matches the VARCHAR(255) columns of member_invitations
MAX_FIELD_LENGTH = 255
BOUNDED_FIELDS = ("email", "first_name", "last_name", "designation", "department")

FIELD_REASONS = {
    "email": INVALID_EMAIL,
    "organization_id": INVALID_ORGANIZATION_ID,
    "organization_type": INVALID_ORGANIZATION_TYPE,
    "role": INVALID_ROLE,
}


class DraftValidationError(ValueError):
    def __init__(self, reason: str, fields: Optional[List[str]] = None):
        self.reason = reason
        self.fields = fields or []
        super().__init__(reason)

    @property
    def detail(self) -> str:
        if self.fields:
            return f"{self.reason}: {', '.join(self.fields)}"
        return self.reason


@dataclass(frozen=True)
class ValidDraft:
    email: str
    first_name: str
    last_name: str
    organization_id: UUID
    organization_type: OrganizationKind
    role: InvitationRole
    designation: Optional[str]
    department: Optional[str]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_draft(row: Any) -> InvitationDraft:
    """
    Coerce one raw bulk row into an InvitationDraft.

    Bulk rows arrive untyped so that a malformed row fails on its own; a row
    that is not an object, or carries a non-string field, raises
    DraftValidationError with the reason of the first offending field.
    """
    if isinstance(row, InvitationDraft):
        return row
    if not isinstance(row, dict):
        raise DraftValidationError(MISSING_REQUIRED_FIELDS)

    try:
        return InvitationDraft.model_validate(row)
    except ValidationError as exc:
        field = str(exc.errors()[0]["loc"][0]) if exc.errors() else ""
        if field in FIELD_REASONS:
            raise DraftValidationError(FIELD_REASONS[field])
        raise DraftValidationError(INVALID_FIELD, [field] if field else None)


def raw_row_email(row: Any) -> Optional[str]:
    """Best-effort email of a row for failure reporting."""
    if isinstance(row, InvitationDraft):
        email = row.email
    elif isinstance(row, dict):
        email = row.get("email")
    else:
        email = None
    if not isinstance(email, str):
        return None
    return email.strip().lower() or None


def validate_draft(draft: InvitationDraft) -> ValidDraft:
    """Parse a caller-supplied draft; raise DraftValidationError with the row's reason."""
    values = {name: _clean(getattr(draft, name)) for name in REQUIRED_FIELDS}
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise DraftValidationError(MISSING_REQUIRED_FIELDS, missing)

    too_long = [
        name
        for name in BOUNDED_FIELDS
        if len(_clean(getattr(draft, name)) or "") > MAX_FIELD_LENGTH
    ]
    if too_long:
        raise DraftValidationError(FIELD_TOO_LONG, too_long)

    try:
        validate_email(values["email"], check_deliverability=False)
    except EmailNotValidError:
        raise DraftValidationError(INVALID_EMAIL)

    try:
        organization_id = UUID(values["organization_id"])
    except ValueError:
        raise DraftValidationError(INVALID_ORGANIZATION_ID)

    try:
        organization_type = OrganizationKind(values["organization_type"].lower())
    except ValueError:
        raise DraftValidationError(INVALID_ORGANIZATION_TYPE)

    try:
        role = InvitationRole(values["role"].lower())
    except ValueError:
        raise DraftValidationError(INVALID_ROLE)

    return ValidDraft(
        email=values["email"].lower(),
        first_name=values["first_name"],
        last_name=values["last_name"],
        organization_id=organization_id,
        organization_type=organization_type,
        role=role,
        designation=_clean(draft.designation),
        department=_clean(draft.department),
    )


def build_invitation(
    draft: ValidDraft, token_hash: str, invited_by: UUID, now: datetime
) -> Invitation:
    return Invitation(
        email=draft.email,
        first_name=draft.first_name,
        last_name=draft.last_name,
        organization_id=draft.organization_id,
        organization_type=draft.organization_type,
        role=draft.role,
        designation=draft.designation,
        department=draft.department,
        token_hash=token_hash,
        status=InvitationStatus.pending,
        invited_by=invited_by,
        created_at=now,
        expires_at=now + INVITATION_TTL,
    )
