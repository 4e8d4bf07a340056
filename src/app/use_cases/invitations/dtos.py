"""
Invitation Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the invitation domain.
"""

from typing import List, Optional

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class InvitationDraft(BaseModel):
    """
    One invitation as submitted by a caller.

    Every field is optional here so that incomplete rows in a bulk batch can be
    reported individually instead of rejecting the whole request.
    """

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    organization_id: Optional[str] = None
    organization_type: Optional[str] = None
    role: Optional[str] = None
    designation: Optional[str] = None
    department: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInvitationResponse(BaseModel):
    """Response for create invitation use case"""

    success: bool = True
    invitation_id: str
    message: str


class BulkInvitationFailure(BaseModel):
    email: Optional[str]
    error: str


class BulkInvitationResults(BaseModel):
    successful: List[str]
    failed: List[BulkInvitationFailure]


class BulkCreateInvitationsResponse(BaseModel):
    """Response for bulk create invitations use case"""

    success: bool = True
    results: BulkInvitationResults
    message: str


class VerifyInvitationResponse(BaseModel):
    """Safe invitation details shown on the registration page"""

    valid: bool = True
    email: str
    first_name: str
    last_name: str
    organization_id: str
    organization_type: str
    organization_name: str
    role: str
    designation: Optional[str]
    department: Optional[str]
    expires_at: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    success: bool = True
    user_id: str
    access_token: str
    message: str


class ResendInvitationResponse(BaseModel):
    """Response for resend invitation use case"""

    success: bool = True
    status: str
    expires_at: str
    message: str


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    success: bool = True
    status: str
    message: str


class InvitationSummary(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    designation: Optional[str]
    department: Optional[str]
    status: str
    invited_by: str
    created_at: str
    expires_at: str
    accepted_at: Optional[str]
    revoked_at: Optional[str]


class InvitationListResponse(BaseModel):
    invitations: List[InvitationSummary]


class AuditEntryResponse(BaseModel):
    action: str
    performed_by: Optional[str]
    notes: Optional[str]
    timestamp: str


class InvitationAuditTrailResponse(BaseModel):
    invitation_id: str
    entries: List[AuditEntryResponse]
