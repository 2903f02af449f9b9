"""
Clinic Domain Models.

Canonical shapes used throughout the client. Backend records of any
shape are converted into these by the normalizer before anything else
sees them.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain import blank_to_none


@dataclass(frozen=True)
class Doctor:
    """A doctor in the directory. Identity is ``id``."""
    id: str
    name: str
    specialty: str = ""
    email: str = ""
    available_times: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Patient:
    """A patient as shown in rosters and handed to the booking overlay."""
    id: Optional[str]
    name: str = "Unknown"
    email: str = ""
    phone: str = ""
    address: str = ""


@dataclass(frozen=True)
class Appointment:
    """Read-only snapshot of an appointment record."""
    appointment_id: Optional[str]
    doctor_id: Optional[str]
    patient_id: Optional[str]
    patient_name: str = "Unknown"
    patient_phone: str = ""
    patient_email: str = ""
    date: str = ""
    time: str = ""
    status: Optional[str] = None


@dataclass(frozen=True)
class DoctorFilter:
    """
    Directory filter criteria.

    Each field is optional; None means unconstrained. Blank text is
    normalized to None so it can never become an "match empty" filter.
    """
    name: Optional[str] = None
    time: Optional[str] = None
    specialty: Optional[str] = None

    def normalized(self) -> "DoctorFilter":
        return DoctorFilter(
            name=blank_to_none(self.name),
            time=blank_to_none(self.time),
            specialty=blank_to_none(self.specialty),
        )

    def with_name(self, name: Optional[str]) -> "DoctorFilter":
        return replace(self, name=name)

    def with_time(self, time: Optional[str]) -> "DoctorFilter":
        return replace(self, time=time)

    def with_specialty(self, specialty: Optional[str]) -> "DoctorFilter":
        return replace(self, specialty=specialty)

    @property
    def is_empty(self) -> bool:
        criteria = self.normalized()
        return criteria.name is None and criteria.time is None and criteria.specialty is None


@dataclass(frozen=True)
class AppointmentQuery:
    """
    Doctor roster query.

    ``name_filter`` is None when no name filter applies; the wire sentinel
    is only produced by the API client.
    """
    date: date
    name_filter: Optional[str] = None


class NewDoctor(BaseModel):
    """Admin "add doctor" form payload."""
    name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""
    specialty: str = ""
    availability: List[str] = Field(default_factory=list)
