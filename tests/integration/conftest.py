import re
from datetime import datetime, timedelta
from typing import List, Tuple
from uuid import UUID

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import get_clock, get_notification_dispatcher, get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import create_access_token
from src.app.services.email_sender import EmailSender
from src.app.services.notification_dispatcher import NotificationDispatcher
from src.domain.entities import (
    Association,
    AssociationManager,
    Company,
    Member,
    MemberRole,
    User,
)

APP_ORIGIN = "http://localhost:5173"
TOKEN_PATTERN = re.compile(r"/register\?token=([0-9a-f]{64})")


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class RecordingEmailSender(EmailSender):
    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html: str) -> None:
        self.sent.append((to, subject, html))

    def tokens_for(self, email: str) -> List[str]:
        return [
            TOKEN_PATTERN.search(html).group(1)
            for to, _, html in self.sent
            if to == email
        ]


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return FrozenClock(datetime(2025, 1, 15, 12, 0, 0))


@pytest_asyncio.fixture
def email_sender():
    return RecordingEmailSender()


@pytest_asyncio.fixture
def dispatcher(email_sender):
    return NotificationDispatcher(email_sender, APP_ORIGIN)


@pytest_asyncio.fixture
async def client(db_session, clock, dispatcher):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_user(db_session, data) -> User:
    user = User(
        email=data["email"],
        password_hash="$2b$12$" + "x" * 53,
        first_name=data["first_name"],
        last_name=data["last_name"],
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def seeded(db_session, test_data):
    """Company, association, and one user per inviter role with bearer headers"""
    company_data = test_data.get("company")
    association_data = test_data.get("association")

    company = Company(id=UUID(company_data["id"]), name=company_data["name"])
    association = Association(
        id=UUID(association_data["id"]), name=association_data["name"]
    )
    db_session.add(company)
    db_session.add(association)

    admin_data = test_data.get("company_admin")
    admin = await _create_user(db_session, admin_data)
    db_session.add(
        Member(user_id=admin.id, company_id=company.id, role=MemberRole(admin_data["role"]))
    )

    member_data = test_data.get("company_member")
    member = await _create_user(db_session, member_data)
    db_session.add(
        Member(user_id=member.id, company_id=company.id, role=MemberRole(member_data["role"]))
    )

    manager = await _create_user(db_session, test_data.get("association_manager"))
    db_session.add(AssociationManager(user_id=manager.id, association_id=association.id))

    await db_session.commit()

    def headers(user: User):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    # Plain ids stay readable after a request rolls back the shared session
    return {
        "company_id": company.id,
        "association_id": association.id,
        "admin_id": admin.id,
        "admin_headers": headers(admin),
        "member_headers": headers(member),
        "manager_headers": headers(manager),
    }


@pytest_asyncio.fixture
def invitation_payload(test_data, seeded):
    company_id = str(seeded["company_id"])

    def _payload(**overrides):
        payload = test_data.get_copy("invitation_draft")
        payload["organization_id"] = company_id
        payload.update(overrides)
        return payload

    return _payload
