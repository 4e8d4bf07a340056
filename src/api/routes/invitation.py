from datetime import datetime
from typing import Any, Callable, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.invitations import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    BulkCreateInvitationsResponse,
    BulkCreateInvitationsUseCase,
    CreateInvitationResponse,
    CreateInvitationUseCase,
    GetInvitationAuditUseCase,
    InvitationAuditTrailResponse,
    InvitationDraft,
    InvitationListResponse,
    ListInvitationsUseCase,
    ResendInvitationResponse,
    ResendInvitationUseCase,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
    VerifyInvitationResponse,
    VerifyInvitationUseCase,
)
from src.depends import (
    get_clock,
    get_current_principal,
    get_notification_dispatcher,
    get_unit_of_work,
)
from src.domain.principal import AuthenticatedPrincipal

router = APIRouter(prefix="/invitations", tags=["Invitations"])

CLIENT_ERROR_STATUS = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "DUPLICATE_ACTIVE_INVITATION": status.HTTP_409_CONFLICT,
    "RATE_LIMIT_EXCEEDED": status.HTTP_429_TOO_MANY_REQUESTS,
    "INVITATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITATION_ALREADY_USED": status.HTTP_400_BAD_REQUEST,
    "INVITATION_REVOKED": status.HTTP_400_BAD_REQUEST,
    "INVITATION_EXPIRED": status.HTTP_410_GONE,
    "INVALID_OR_EXPIRED_INVITATION": status.HTTP_400_BAD_REQUEST,
    "INVITATION_TERMINAL": status.HTTP_409_CONFLICT,
    "USER_EXISTS": status.HTTP_409_CONFLICT,
}


def raise_for_error(error: Error):
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)


def parse_invitation_id(invitation_id: str) -> UUID:
    try:
        return UUID(invitation_id)
    except ValueError:
        raise ClientError(
            Error("VALIDATION_ERROR", "Invalid invitation ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class BulkInvitationRequest(BaseModel):
    """
    Bulk invitation HTTP request payload

    Rows are left untyped here and parsed one by one by the use case, so a
    malformed row is reported under ``failed`` instead of rejecting the batch.
    """

    invitations: List[Any] = Field(default_factory=list)


class VerifyInvitationRequest(BaseModel):
    token: str = Field("", description="Raw invitation token from the link")


class AcceptInvitationRequest(BaseModel):
    """
    Accept invitation HTTP request payload
    """

    token: str = Field("", description="Raw invitation token from the link")
    password: str = Field("", description="Password for the new account")
    first_name: Optional[str] = Field(None, description="Overrides the invited first name")
    last_name: Optional[str] = Field(None, description="Overrides the invited last name")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateInvitationResponse,
)
async def create_invitation(
    request: InvitationDraft,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Create Invitation

    Issues one invitation and queues the email carrying its redemption link.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: UNAUTHORIZED (bad token or not an inviter)
        - 409 Conflict: DUPLICATE_ACTIVE_INVITATION
        - 429 Too Many Requests: RATE_LIMIT_EXCEEDED
        - 500 Internal Server Error: STORAGE_ERROR, TOKEN_GENERATION_FAILED
    """
    use_case = CreateInvitationUseCase(uow, dispatcher, clock)
    result = await use_case.execute(principal, request)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/bulk",
    status_code=status.HTTP_200_OK,
    response_model=BulkCreateInvitationsResponse,
)
async def bulk_create_invitations(
    request: BulkInvitationRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Bulk Create Invitations

    Per-row failures are reported in the body with a 200; only whole-request
    rejections (empty batch, unauthorized organization) return an error status.
    """
    use_case = BulkCreateInvitationsUseCase(uow, dispatcher, clock)
    result = await use_case.execute(principal, request.invitations)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=InvitationListResponse,
)
async def list_invitations(
    organization_id: str = Query(...),
    organization_type: str = Query(...),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    use_case = ListInvitationsUseCase(uow, clock)
    result = await use_case.execute(principal, organization_id, organization_type)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/verify",
    status_code=status.HTTP_200_OK,
    response_model=VerifyInvitationResponse,
)
async def verify_invitation(
    request: VerifyInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Verify Invitation (public)

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVITATION_ALREADY_USED, INVITATION_REVOKED
        - 404 Not Found: INVITATION_NOT_FOUND
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = VerifyInvitationUseCase(uow, clock)
    result = await use_case.execute(request.token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accept",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    request: AcceptInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Accept Invitation (public)

    Creates the invitee's account and membership, then consumes the invitation.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_OR_EXPIRED_INVITATION,
                           INVITATION_ALREADY_USED
        - 409 Conflict: USER_EXISTS
    """
    use_case = AcceptInvitationUseCase(uow, clock)
    result = await use_case.execute(
        request.token, request.password, request.first_name, request.last_name
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{invitation_id}/resend",
    status_code=status.HTTP_200_OK,
    response_model=ResendInvitationResponse,
)
async def resend_invitation(
    invitation_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Resend Invitation

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_TERMINAL, DUPLICATE_ACTIVE_INVITATION
    """
    invitation_uuid = parse_invitation_id(invitation_id)

    use_case = ResendInvitationUseCase(uow, dispatcher, clock)
    result = await use_case.execute(principal, invitation_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    invitation_id: str,
    reason: Optional[str] = Query(None),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Revoke Invitation

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_TERMINAL
    """
    invitation_uuid = parse_invitation_id(invitation_id)

    use_case = RevokeInvitationUseCase(uow, clock)
    result = await use_case.execute(principal, invitation_uuid, reason)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/{invitation_id}/audit",
    status_code=status.HTTP_200_OK,
    response_model=InvitationAuditTrailResponse,
)
async def get_invitation_audit(
    invitation_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    invitation_uuid = parse_invitation_id(invitation_id)

    use_case = GetInvitationAuditUseCase(uow)
    result = await use_case.execute(principal, invitation_uuid)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
