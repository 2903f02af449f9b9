"""
Shared pytest fixtures for the clinic portal tests.

Provides in-memory session stores, notice buffers, a mocked API client
and sample doctors and sessions.
"""

from unittest.mock import AsyncMock

import pytest

from core.data import MutationResult
from core.presentation import NoticeBuffer
from core.session import KeyValueStore
from use_cases.clinic.api_client import ClinicApiClient
from use_cases.clinic.domain.models import Doctor, Patient
from use_cases.clinic.session import ClinicSession, Role


@pytest.fixture
def store() -> KeyValueStore:
    """In-memory key-value store with no session."""
    return KeyValueStore()


@pytest.fixture
def admin_store(store) -> KeyValueStore:
    store.set("token", "admin-token")
    store.set("userRole", "admin")
    return store


@pytest.fixture
def notifier() -> NoticeBuffer:
    return NoticeBuffer()


@pytest.fixture
def api_client() -> AsyncMock:
    """API client mock; every gateway coroutine is an AsyncMock."""
    client = AsyncMock(spec=ClinicApiClient)
    client.get_doctors.return_value = []
    client.filter_doctors.return_value = []
    client.get_all_appointments.return_value = []
    client.delete_doctor.return_value = MutationResult(success=True, message="Doctor deleted successfully")
    client.save_doctor.return_value = MutationResult(success=True, message="Doctor added")
    client.get_patient_profile.return_value = Patient(id="7", name="Jane Doe", email="jane@example.com")
    return client


@pytest.fixture
def doctors():
    return [
        Doctor(id="5", name="John Smith", specialty="Cardiology", email="smith@clinic.com",
               available_times=["09:00-10:00", "10:00-11:00"]),
        Doctor(id="6", name="Anna Smith", specialty="Dermatology", email="anna@clinic.com",
               available_times=["14:00-15:00"]),
        Doctor(id="8", name="Raj Patel", specialty="Neurology", email="raj@clinic.com"),
    ]


@pytest.fixture
def admin_session() -> ClinicSession:
    return ClinicSession(token="admin-token", role=Role.ADMIN)


@pytest.fixture
def anonymous_session() -> ClinicSession:
    return ClinicSession(token=None, role=Role.ANONYMOUS_PATIENT)


@pytest.fixture
def patient_session() -> ClinicSession:
    return ClinicSession(token="patient-token", role=Role.AUTHENTICATED_PATIENT)
