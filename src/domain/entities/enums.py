"""
Invitation Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class OrganizationKind(str, Enum):
    """Kind of organization an invitation targets"""

    company = "company"
    association = "association"


class InvitationRole(str, Enum):
    """Role granted to the invitee on acceptance"""

    owner = "owner"
    admin = "admin"
    manager = "manager"
    member = "member"


class InvitationStatus(str, Enum):
    """Invitation lifecycle status"""

    pending = "pending"
    accepted = "accepted"
    revoked = "revoked"
    expired = "expired"


class MemberRole(str, Enum):
    """Role of a member within a company"""

    owner = "owner"
    admin = "admin"
    manager = "manager"
    member = "member"


class AuditAction(str, Enum):
    """Actions recorded in the invitation audit trail"""

    created = "created"
    resent = "resent"
    revoked = "revoked"
    accepted = "accepted"
    viewed = "viewed"
