# FILE: tests/conftest.py

import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Settings are read on first use: point them at throwaway locations
# before any soar module is imported.
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="soar-tests-"))
os.environ.setdefault("MEMORY_API_KEY", "test-memory-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT / 'ledger.db'}"
os.environ["LOG_DIR"] = str(_TMP_ROOT / "logs")
os.environ["ENABLE_AUDIT_LOGGING"] = "true"

import pytest

from soar.core.config import get_settings
from soar.core.exceptions import HTTPStatusFailure, TransportFailure
from soar.core.rate_limiter import reset_rate_limiter
from soar.database.connection import DatabaseConnection, reset_database
from soar.database.init_db import init_ledger_tables
from soar.database.ledger import SyncLedger, reset_ledger
from soar.llm.client import MessageType, reset_llm_client
from soar.memory.client import reset_memory_client
from soar.models.memory import MemoryRecord
from soar.models.travel import Accommodation, Flight, FlightBooking, TravelPreference, Trip
from soar.services.background import shutdown_background_runner
from soar.services.chat_service import reset_chat_service
from soar.services.sync_service import reset_sync_service

get_settings.cache_clear()

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeMemoryClient:
    """Records writes; fails the ones whose text contains a marker."""

    def __init__(self):
        self.added = []
        self.search_results = []
        self.search_error = None
        self.fail_markers = set()
        self.searches = []
        self._lock = threading.Lock()

    def add(self, text, user_id):
        for marker in self.fail_markers:
            if marker in text:
                raise HTTPStatusFailure(500, service="memory-store", body="boom")
        with self._lock:
            self.added.append((text, user_id))
        return True

    def search(self, query, user_id):
        self.searches.append((query, user_id))
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results)

    def texts(self):
        return [text for text, _ in self.added]


class FakeLLMClient:
    """Canned replies; set <method>_error to make a call fail."""

    def __init__(self):
        self.classification = MessageType.QUERY
        self.response = "Your flight to Tokyo leaves on October 30, 2026."
        self.acknowledgment = "Got it, I've saved that!"
        self.search_reply = "Most visitors need a visa."
        self.classify_error = None
        self.response_error = None
        self.acknowledgment_error = None
        self.search_error = None
        self.calls = []

    def classify(self, message):
        self.calls.append(("classify", message))
        if self.classify_error is not None:
            raise self.classify_error
        return self.classification

    def generate_response(self, query, memories):
        self.calls.append(("generate_response", query, list(memories)))
        if self.response_error is not None:
            raise self.response_error
        return self.response

    def generate_acknowledgment(self, statement):
        self.calls.append(("generate_acknowledgment", statement))
        if self.acknowledgment_error is not None:
            raise self.acknowledgment_error
        return self.acknowledgment

    def search_and_reformat(self, query):
        self.calls.append(("search_and_reformat", query))
        if self.search_error is not None:
            raise self.search_error
        return self.search_reply


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop every shared instance a test may have created"""
    yield
    reset_chat_service()
    reset_sync_service()
    reset_memory_client()
    reset_llm_client()
    reset_ledger()
    reset_database()
    reset_rate_limiter()
    shutdown_background_runner(wait=True)


@pytest.fixture
def now():
    """Fixed 'now' used for temporal labels"""
    return NOW


@pytest.fixture
def fake_memory():
    return FakeMemoryClient()


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def transport_error():
    return TransportFailure("connection refused", service="test")


@pytest.fixture
def ledger_db(tmp_path):
    """File-backed SQLite ledger (shared safely between worker threads)"""
    db = DatabaseConnection(f"sqlite:///{tmp_path / 'ledger.db'}")
    init_ledger_tables(db)
    yield db
    db.close()


@pytest.fixture
def ledger(ledger_db):
    return SyncLedger(ledger_db)


@pytest.fixture
def make_flight():
    def _make(number="NH106", departure=datetime(2026, 10, 30, 11, 5), hours=12, **overrides):
        data = {
            "number": number,
            "airline": "ANA",
            "departure_name": "Los Angeles",
            "departure_code": "LAX",
            "arrival_name": "Tokyo Haneda",
            "arrival_code": "HND",
            "departure_date": departure,
            "arrival_date": departure + timedelta(hours=hours),
        }
        data.update(overrides)
        return Flight(**data)
    return _make


@pytest.fixture
def make_trip(make_flight):
    def _make(trip_id="t1", user_id="u1", name="Tokyo",
              start=datetime(2026, 10, 30), end=datetime(2026, 11, 8),
              flights=None, accommodations=None):
        if flights is None:
            flights = [make_flight()]
        if accommodations is None:
            accommodations = [
                Accommodation(
                    agent="Booking.com",
                    name="Park Hyatt Tokyo",
                    address="3-7-1-2 Nishi-Shinjuku, Tokyo",
                    check_in_date=datetime(2026, 10, 31),
                    check_out_date=datetime(2026, 11, 7),
                )
            ]
        return Trip(
            id=trip_id,
            name=name,
            flights=flights,
            accommodations=accommodations,
            start_date=start,
            end_date=end,
            owner_user_id=user_id,
        )
    return _make


@pytest.fixture
def make_booking(make_flight):
    def _make(booking_id="b1", user_id="u1", trip_id=None, **flight_overrides):
        return FlightBooking(
            id=booking_id,
            flight=make_flight(**flight_overrides),
            owner_user_id=user_id,
            is_part_of_trip=trip_id is not None,
            trip_id=trip_id,
        )
    return _make


@pytest.fixture
def make_preferences():
    def _make(user_id="u1", **overrides):
        data = {
            "owner_user_id": user_id,
            "preferred_destination_types": ["Beach", "City"],
            "preferred_destinations": ["Japan"],
            "accommodation_preferences": ["Boutique hotels"],
            "budget_range": "Mid-range",
            "travel_style": "Planner",
            "activity_preferences": ["Food tours", "Hiking"],
            "dietary_restrictions": [],
            "seasonal_preferences": ["Autumn"],
        }
        data.update(overrides)
        return TravelPreference(**data)
    return _make


@pytest.fixture
def make_record():
    counter = iter(range(1, 10_000))

    def _make(text, score=None, user_id="u1"):
        return MemoryRecord(
            id=f"m{next(counter)}",
            text=text,
            owner_user_id=user_id,
            created_at=NOW,
            updated_at=NOW,
            relevance_score=score,
        )
    return _make
