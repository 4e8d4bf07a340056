"""
Invitation Use Cases

Issuance (single and bulk), verification, redemption and lifecycle management
of member invitations.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .bulk_create_invitations_use_case import BulkCreateInvitationsUseCase
from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    AuditEntryResponse,
    BulkCreateInvitationsResponse,
    BulkInvitationFailure,
    BulkInvitationResults,
    CreateInvitationResponse,
    InvitationAuditTrailResponse,
    InvitationDraft,
    InvitationListResponse,
    InvitationSummary,
    ResendInvitationResponse,
    RevokeInvitationResponse,
    VerifyInvitationResponse,
)
from .get_invitation_audit_use_case import GetInvitationAuditUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .resend_invitation_use_case import ResendInvitationUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase
from .verify_invitation_use_case import VerifyInvitationUseCase

__all__ = [
    "CreateInvitationUseCase",
    "BulkCreateInvitationsUseCase",
    "VerifyInvitationUseCase",
    "AcceptInvitationUseCase",
    "ResendInvitationUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    "GetInvitationAuditUseCase",
    "InvitationDraft",
    "CreateInvitationResponse",
    "BulkCreateInvitationsResponse",
    "BulkInvitationResults",
    "BulkInvitationFailure",
    "VerifyInvitationResponse",
    "AcceptInvitationResponse",
    "ResendInvitationResponse",
    "RevokeInvitationResponse",
    "InvitationListResponse",
    "InvitationSummary",
    "InvitationAuditTrailResponse",
    "AuditEntryResponse",
]
