import os

# Configure before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["REDIS_URL"] = ""
os.environ["BUSINESS_TIMEZONE"] = "UTC"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from massage_booking.database import Base, SessionLocal, engine
from massage_booking.domain.planning.router import get_notifier
from massage_booking.main import app
from massage_booking.models import Massage, TimeSlot, User, UserRole
from massage_booking.rate_limiter import reset_rate_limits
from massage_booking.security_utils import create_access_token, hash_password

PASSWORD = "Sup3r-Secret!"


class FakeNotifier:
    """Records every notification instead of sending email"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.confirmations = []
        self.cancellations = []
        self.admin_notifications = []

    async def send_booking_confirmation(self, details):
        self.confirmations.append(details)
        if self.fail:
            raise RuntimeError("smtp down")
        return {"id": "fake"}

    async def send_booking_cancellation(self, details):
        self.cancellations.append(details)
        if self.fail:
            raise RuntimeError("smtp down")
        return {"id": "fake"}

    async def notify_admins(self, details):
        self.admin_notifications.append(details)
        if self.fail:
            raise RuntimeError("smtp down")
        return {"id": "fake"}


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def failing_notifier():
    return FakeNotifier(fail=True)


@pytest.fixture
def client(db, notifier):
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email="client@example.com", role=UserRole.USER, password=PASSWORD, **fields):
        user = User(
            email=email,
            password=hash_password(password),
            role=role.value,
            firstname=fields.get("firstname", "Marie"),
            name=fields.get("name", "Dupont"),
            phone_number=fields.get("phone_number", "0600000000"),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN, firstname="Admin")


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": user.id, "email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def make_massage(db):
    def _make_massage(name="Massage suédois", duration=60, price=70.0, position=0):
        massage = Massage(name=name, duration=duration, price=price, position=position)
        db.add(massage)
        db.commit()
        db.refresh(massage)
        return massage

    return _make_massage


@pytest.fixture
def make_slot(db):
    def _make_slot(start: datetime, end: datetime, is_active: bool = True):
        slot = TimeSlot(start_time=start, end_time=end, is_active=is_active)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make_slot
