import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_finance_tracker.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-finance-tracker")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from finance_tracker.database import get_db
from finance_tracker.models.base import Base, utcnow
from finance_tracker.config import settings
from finance_tracker.core.mailer import InvitationEmail, get_email_dispatcher
# Import all model classes to ensure they're registered with SQLAlchemy
from finance_tracker.models.user import User
from finance_tracker.models.organization import Organization
from finance_tracker.models.organization_member import OrganizationMember
from finance_tracker.models.invitation import Invitation
from finance_tracker.models.account import Account
from finance_tracker.models.liability import Liability
from finance_tracker.models.balance import Balance
from finance_tracker.models.role import OrganizationRole
# Import FastAPI app AFTER model imports
from finance_tracker.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingEmailDispatcher:
    """Captures invitation emails (and their plaintext tokens) instead of sending them"""

    def __init__(self):
        self.sent: list[InvitationEmail] = []

    def send_invitation_email(self, email: InvitationEmail) -> None:
        self.sent.append(email)

    @property
    def last_token(self) -> str:
        return self.sent[-1].token


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Opens additional sessions on the test database, closed at teardown"""
    sessions = []

    def open_session():
        session = TestingSessionLocal(bind=db_session.get_bind())
        sessions.append(session)
        return session

    yield open_session
    for session in sessions:
        session.close()


@pytest.fixture
def email_outbox():
    return RecordingEmailDispatcher()


@pytest.fixture(scope="function")
def client(db_session, email_outbox):
    """FastAPI test client with test database and recording email backend"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_dispatcher] = lambda: email_outbox
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: int, expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: users.id to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": str(user_id), "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user: User, organization: Organization | None = None) -> dict:
    """Authorization headers for user, optionally pinned to one organization"""
    headers = {"Authorization": f"Bearer {create_test_token(user.id)}"}
    if organization is not None:
        headers["X-Organization-Id"] = str(organization.id)
    return headers


# Factories


def make_user(db, email: str, first_name: str | None = None) -> User:
    user = User(email=email, email_verified=True, first_name=first_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_organization(db, owner: User, name: str = "Test Organization") -> Organization:
    organization = Organization(name=name)
    db.add(organization)
    db.flush()
    now = utcnow()
    db.add(
        OrganizationMember(
            organization_id=organization.id,
            user_id=owner.id,
            role=OrganizationRole.OWNER,
            invited_at=now,
            accepted_at=now,
        )
    )
    db.commit()
    db.refresh(organization)
    return organization


def add_member(db, organization: Organization, user: User, role: OrganizationRole) -> OrganizationMember:
    membership = OrganizationMember(
        organization_id=organization.id,
        user_id=user.id,
        role=role,
        accepted_at=utcnow(),
    )
    db.add(membership)
    db.commit()
    db.refresh(membership)
    return membership


def make_account(db, organization: Organization, creator: User, name: str = "Checking") -> Account:
    account = Account(
        organization_id=organization.id,
        created_by=creator.id,
        name=name,
        type="CHECKING",
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def make_liability(db, organization: Organization, creator: User, name: str = "Visa") -> Liability:
    liability = Liability(
        organization_id=organization.id,
        created_by=creator.id,
        name=name,
        type="CREDIT_CARD",
    )
    db.add(liability)
    db.commit()
    db.refresh(liability)
    return liability


@pytest.fixture
def alice(db_session):
    return make_user(db_session, "alice@acme.io", first_name="Alice")


@pytest.fixture
def bob(db_session):
    return make_user(db_session, "bob@acme.io", first_name="Bob")


@pytest.fixture
def org_a(db_session, alice):
    """Organization A owned by alice"""
    return make_organization(db_session, alice, name="Org A")


@pytest.fixture
def org_b(db_session, bob):
    """Organization B owned by bob"""
    return make_organization(db_session, bob, name="Org B")


@pytest.fixture
def owner_headers(alice, org_a):
    return headers_for(alice)


@pytest.fixture
def bob_headers(bob, org_b):
    return headers_for(bob)


@pytest.fixture
def member_factory(db_session, org_a):
    """Create a user holding ``role`` in org A and return (user, headers)"""

    def _make(role: OrganizationRole, email: str | None = None):
        user = make_user(db_session, email or f"{role.value.lower()}@acme.io")
        add_member(db_session, org_a, user, role)
        return user, headers_for(user)

    return _make


@pytest.fixture
def admin_headers(member_factory):
    return member_factory(OrganizationRole.ADMIN)[1]


@pytest.fixture
def member_headers(member_factory):
    return member_factory(OrganizationRole.MEMBER)[1]


@pytest.fixture
def viewer_headers(member_factory):
    return member_factory(OrganizationRole.VIEWER)[1]
