from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.email_senders import build_email_sender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.jwt import verify_jwt
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.domain.base import utc_now
from src.domain.principal import AuthenticatedPrincipal

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

notification_dispatcher = NotificationDispatcher(
    build_email_sender(ApplicationConfig), ApplicationConfig.APP_ORIGIN
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_notification_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher


def get_clock() -> Callable[[], datetime]:
    return utc_now


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedPrincipal:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header, if any

    Returns:
        AuthenticatedPrincipal for the token's user

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    unauthorized = ClientError(
        Error("UNAUTHORIZED", "Unauthorized: missing or invalid bearer token"),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )
    if credentials is None:
        raise unauthorized

    payload = verify_jwt(credentials.credentials)
    if payload is None or "user_id" not in payload:
        raise unauthorized

    try:
        return AuthenticatedPrincipal(user_id=UUID(payload["user_id"]))
    except (TypeError, ValueError):
        raise unauthorized
