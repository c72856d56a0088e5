"""
Pytest configuration and fixtures
"""
import os
import tempfile

# Point the app at a throwaway database before app modules are imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="appointments-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'app.db')}"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""

import threading
import pytest
from sqlalchemy.orm import sessionmaker
from app.database import Base, build_engine
from app.schemas import AppointmentRecord
from app.services.record_store import AppointmentStore

HOUR_MS = 60 * 60 * 1000

# Fixed reference instant: 2026-10-19 16:00:00 UTC
NOW = 1792425600000

PHONE = "+13035551234"
OTHER_PHONE = "+13035559999"


class FakeGateway:
    """Records sends; fails for numbers listed in `failing`"""

    def __init__(self, failing=None, raising=None):
        self.failing = set(failing or [])
        self.raising = set(raising or [])
        self.sent = []
        self._lock = threading.Lock()

    def send_sms(self, to_number: str, message: str) -> dict:
        if to_number in self.raising:
            raise ConnectionError("network down")
        with self._lock:
            self.sent.append((to_number, message))
        if to_number in self.failing:
            return {"status": "error", "message": "Error sending SMS: undeliverable"}
        return {"status": "success", "to": to_number, "message": message, "sid": f"SM{len(self.sent)}"}


@pytest.fixture
def test_engine(tmp_path):
    """Create a file-backed SQLite engine so worker threads get their own connections"""
    engine = build_engine(f"sqlite:///{tmp_path / 'appointments.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def store(session_factory):
    return AppointmentStore(session_factory)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def make_appointment(store):
    """Insert an appointment, offsets given in hours relative to NOW"""

    def _make(appointment_id, hours=None, phone=PHONE, **fields):
        record = AppointmentRecord(
            id=appointment_id,
            owner_name=fields.pop("owner_name", "Jane"),
            dog_name=fields.pop("dog_name", "Rex"),
            owner_phone=phone,
            appointment_ts=None if hours is None else NOW + int(hours * HOUR_MS),
            **fields,
        )
        return store.add(record)

    return _make


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
