"""
Invitation Service Domain Entities

Each entity in its own file.
"""

from .enums import (
    AuditAction,
    InvitationRole,
    InvitationStatus,
    MemberRole,
    OrganizationKind,
)

from .association_manager import AssociationManager
from .invitation import INVITATION_TTL, TERMINAL_STATUSES, Invitation
from .invitation_audit_entry import InvitationAuditEntry
from .member import Member
from .organization import Association, Company
from .user import User

__all__ = [
    # Enums
    "AuditAction",
    "InvitationRole",
    "InvitationStatus",
    "MemberRole",
    "OrganizationKind",
    # Entities
    "Association",
    "AssociationManager",
    "Company",
    "Invitation",
    "InvitationAuditEntry",
    "Member",
    "User",
    # Policy
    "INVITATION_TTL",
    "TERMINAL_STATUSES",
]
