import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from teamsync.config import settings
from teamsync.core.exceptions import PaymentProviderException
from teamsync.core.security import hash_password
from teamsync.database import enable_sqlite_foreign_keys, get_db
from teamsync.dependencies import get_email_service, get_payment_gateway
from teamsync.models.base import Base
# Import all model classes to ensure they're registered with SQLAlchemy
from teamsync.models.activity_log import ActivityLog, ActivityType
from teamsync.models.assignment import Assignment, AssignmentStatus
from teamsync.models.branch import Branch
from teamsync.models.client import Client
from teamsync.models.contract import Contract, ContractStatus
from teamsync.models.event import Event, EventStatus
from teamsync.models.invoice import Invoice
from teamsync.models.plan import Plan
from teamsync.models.role import UserRole
from teamsync.models.tenant import Tenant
from teamsync.models.tenant_membership import TenantMembership
from teamsync.models.user import User
# Import FastAPI app AFTER model imports
from teamsync.main import app

# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse-battery"


class FakePaymentGateway:
    """Records every payment call; fails the operations listed in fail_on"""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self._counter = 0

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise PaymentProviderException("Payment provider rejected the request")

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def create_customer(self, tenant_id, name, email=None):
        self._record("create_customer", tenant_id, name, email)
        return self._next_id("cus")

    def create_subscription(self, customer_id, price_id, tenant_id, plan_id):
        self._record("create_subscription", customer_id, price_id, tenant_id, plan_id)
        return {"id": self._next_id("sub"), "status": "active"}

    def cancel_subscription(self, subscription_id):
        self._record("cancel_subscription", subscription_id)


class FakeEmailService:
    """Collects emails instead of sending them"""

    def __init__(self):
        self.sent: list[tuple] = []

    def send_welcome_email(self, email, name):
        self.sent.append(("welcome", email, name))
        return True

    def send_plan_update_email(self, email, tenant_name, plan_name):
        self.sent.append(("plan_update", email, tenant_name, plan_name))
        return True


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
def payments():
    return FakePaymentGateway()


@pytest.fixture
def emails():
    return FakeEmailService()


def _override_dependencies(db_session, payments, emails):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: payments
    app.dependency_overrides[get_email_service] = lambda: emails


@pytest.fixture(scope="function")
def client(db_session, payments, emails):
    """FastAPI test client with test database and fake integrations"""
    _override_dependencies(db_session, payments, emails)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def lenient_client(db_session, payments, emails):
    """Test client that returns 500 responses instead of raising server errors"""
    _override_dependencies(db_session, payments, emails)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth(user_id: str) -> dict:
    """Authorization header carrying an actor id (trusted bearer mode)"""
    return {"Authorization": f"Bearer {user_id}"}


def create_test_token(user_id: str = "user_super", expired: bool = False, secret: str | None = None) -> str:
    """
    Generate a session JWT for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token
        secret: Signing key, defaults to SECRET_KEY

    Returns:
        Encoded JWT token
    """
    now = datetime.now(UTC)
    exp = now - timedelta(minutes=5) if expired else now + timedelta(minutes=15)
    payload = {"sub": user_id, "exp": exp, "iat": now}
    return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm="HS256")


def make_user(db, user_id: str, role: UserRole | None, name: str | None = None, **kwargs) -> User:
    user = User(
        id=user_id,
        name=name or user_id,
        email=kwargs.pop("email", f"{user_id}@example.com"),
        role=role,
        **kwargs,
    )
    db.add(user)
    db.flush()
    return user


def make_employee(db, user_id: str, tenant_id: str, branch_id: str | None = None, **kwargs) -> User:
    user = make_user(db, user_id, UserRole.EMPLOYEE, **kwargs)
    db.add(
        TenantMembership(
            id=f"membership_{user_id}",
            tenant_id=tenant_id,
            user_id=user.id,
            branch_id=branch_id,
        )
    )
    db.flush()
    return user


@pytest.fixture
def world(db_session):
    """
    Two tenants with clients, branches, employees and events.

    T1 (admin ta1): clients "Acme Corp" (admin ca1), "Globex", "ACME Labs"
        branch b1 of client c1, employees e1 and e2 at b1
        event ev1 at b1
    T2 (admin ta2): client "Acme Overseas" with branch b3
        employee e3 at b3, event ev3 at b3
    """
    db = db_session
    start = datetime(2030, 1, 10, 9, 0, tzinfo=UTC)

    make_user(db, "user_super", UserRole.SUPER_ADMIN, password_hash=hash_password(TEST_PASSWORD))
    make_user(db, "ta1", UserRole.TENANT_ADMIN, email="admin@t1.example.com")
    make_user(db, "ta2", UserRole.TENANT_ADMIN)
    make_user(db, "ca1", UserRole.CLIENT_ADMIN)

    plan_free = Plan(id="plan_free", name="Free", price=0)
    plan_pro = Plan(id="plan_pro", name="Pro", price=49, stripe_price_id="price_pro")
    plan_team = Plan(id="plan_team", name="Team", price=99, stripe_price_id="price_team")
    plan_legacy = Plan(id="plan_legacy", name="Legacy", price=10, is_active=False)
    db.add_all([plan_free, plan_pro, plan_team, plan_legacy])

    db.add_all(
        [
            Tenant(id="t1", name="Tenant One", admin_id="ta1", plan_id="plan_free"),
            Tenant(id="t2", name="Tenant Two", admin_id="ta2", email="billing@t2.example.com"),
        ]
    )
    db.flush()

    db.add_all(
        [
            Client(id="c1", tenant_id="t1", name="Acme Corp", admin_id="ca1"),
            Client(id="c2", tenant_id="t1", name="Globex"),
            Client(id="c5", tenant_id="t1", name="ACME Labs"),
            Client(id="c3", tenant_id="t2", name="Acme Overseas"),
        ]
    )
    db.flush()

    db.add_all(
        [
            Branch(id="b1", client_id="c1", name="Downtown", address="1 Main St"),
            Branch(id="b2", client_id="c2", name="Harbor"),
            Branch(id="b3", client_id="c3", name="Overseas HQ"),
        ]
    )
    db.flush()

    make_employee(db, "e1", "t1", "b1", password_hash=hash_password(TEST_PASSWORD))
    make_employee(db, "e2", "t1", "b1")
    make_employee(db, "e3", "t2", "b3")

    db.add_all(
        [
            Event(
                id="ev1",
                tenant_id="t1",
                client_id="c1",
                branch_id="b1",
                name="Launch",
                start_time=start,
                end_time=start + timedelta(hours=8),
                status=EventStatus.SCHEDULED,
            ),
            Event(
                id="ev3",
                tenant_id="t2",
                client_id="c3",
                branch_id="b3",
                name="Overseas Expo",
                start_time=start,
                end_time=start + timedelta(hours=8),
                status=EventStatus.SCHEDULED,
            ),
        ]
    )
    db.add_all(
        [
            Contract(
                id="k1",
                tenant_id="t1",
                client_id="c1",
                start_date=start,
                end_date=start + timedelta(days=365),
                terms="Annual",
                status=ContractStatus.ACTIVE,
            ),
            Contract(
                id="k3",
                tenant_id="t2",
                client_id="c3",
                start_date=start,
                terms="Overseas",
                status=ContractStatus.ACTIVE,
            ),
        ]
    )
    db.commit()
    return db


def make_assignment(db, assignment_id: str, employee_id: str, event_id: str, status=AssignmentStatus.PENDING) -> Assignment:
    event = db.get(Event, event_id)
    assignment = Assignment(
        id=assignment_id,
        employee_id=employee_id,
        event_id=event.id,
        tenant_id=event.tenant_id,
        client_id=event.client_id,
        branch_id=event.branch_id,
        start_date=event.start_time,
        status=status,
    )
    db.add(assignment)
    db.commit()
    return assignment


def make_invoice(db, invoice_id: str, contract_id: str, amount: float = 100.0, paid: bool = False) -> Invoice:
    invoice = Invoice(
        id=invoice_id,
        contract_id=contract_id,
        amount=amount,
        due_date=datetime(2030, 2, 1, tzinfo=UTC),
        paid=paid,
    )
    db.add(invoice)
    db.commit()
    return invoice
