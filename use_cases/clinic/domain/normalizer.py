"""
Clinic Entity Normalizer.

Maps the heterogeneous record shapes returned by the backend onto the
canonical Doctor / Appointment / Patient models. Backend responses vary
by endpoint: fields are flattened on some (``patientName``) and nested on
others (``patient.name``), and a few have alternate spellings
(``speciality``, ``availability``).

These functions have NO I/O dependencies.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .models import Appointment, Doctor, Patient

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def _first_present(*values: Any) -> Any:
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _as_id(value: Any) -> Optional[str]:
    return None if value is None or value == "" else str(value)


def _as_text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


def _nested(record: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = record.get(key)
    return value if isinstance(value, dict) else {}


def _time_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


# =============================================================================
# DOCTORS
# =============================================================================

def normalize_doctor(record: Dict[str, Any]) -> Optional[Doctor]:
    """
    Build a Doctor from a backend record.

    Returns:
        The Doctor, or None if the record has no usable id
    """
    doctor_id = _as_id(_first_present(record.get("id"), record.get("doctorId")))
    if doctor_id is None:
        logger.warning(f"Skipping doctor record without id: {record.get('name')!r}")
        return None

    return Doctor(
        id=doctor_id,
        name=_as_text(record.get("name")),
        specialty=_as_text(_first_present(record.get("specialty"), record.get("speciality"))),
        email=_as_text(record.get("email")),
        available_times=_time_list(_first_present(
            record.get("availableTimes"),
            record.get("available_times"),
            record.get("availability"),
        )),
    )


def normalize_doctors(records: Iterable[Dict[str, Any]]) -> List[Doctor]:
    """
    Build the doctor set for one load.

    Ids are unique within the result: the first record for an id wins and
    later duplicates are dropped with a warning.
    """
    doctors: List[Doctor] = []
    seen = set()
    for record in records or []:
        if not isinstance(record, dict):
            continue
        doctor = normalize_doctor(record)
        if doctor is None:
            continue
        if doctor.id in seen:
            logger.warning(f"Dropping duplicate doctor id {doctor.id}")
            continue
        seen.add(doctor.id)
        doctors.append(doctor)
    return doctors


# =============================================================================
# PATIENTS
# =============================================================================

def normalize_patient(record: Dict[str, Any]) -> Patient:
    """
    Build a Patient from a profile response.

    Accepts either the bare patient object or the ``{"patient": {...}}``
    envelope returned by the profile endpoint.
    """
    data = _nested(record, "patient") or record
    return Patient(
        id=_as_id(data.get("id")),
        name=_as_text(data.get("name"), "Unknown"),
        email=_as_text(data.get("email")),
        phone=_as_text(data.get("phone")),
        address=_as_text(data.get("address")),
    )


def patient_of(appointment: Appointment) -> Patient:
    """The patient columns of a roster row."""
    return Patient(
        id=appointment.patient_id,
        name=appointment.patient_name,
        email=appointment.patient_email,
        phone=appointment.patient_phone,
    )


# =============================================================================
# APPOINTMENTS
# =============================================================================

def _clock(value: Any) -> str:
    """Clock text as HH:MM, e.g. "09:30:00" becomes "09:30"."""
    if value is None:
        return ""
    return str(value).strip()[:5]


def _split_datetime(value: Any) -> tuple:
    """Split "2024-01-02T09:30:00" into ("2024-01-02", "09:30")."""
    if not value:
        return "", ""
    text = str(value)
    if "T" in text:
        day, clock = text.split("T", 1)
    elif " " in text:
        day, clock = text.split(" ", 1)
    else:
        return text, ""
    return day, _clock(clock)


def normalize_appointment(record: Dict[str, Any]) -> Appointment:
    """
    Build an Appointment from a backend record.

    Patient fields resolve through a fallback chain: the flattened field
    (``patientName``), then the nested patient object (``patient.name``),
    then a fixed default.
    """
    patient = _nested(record, "patient")
    doctor = _nested(record, "doctor")
    day, clock = _split_datetime(record.get("appointmentTime"))

    status = record.get("status")

    return Appointment(
        appointment_id=_as_id(_first_present(record.get("appointmentId"), record.get("id"))),
        doctor_id=_as_id(_first_present(record.get("doctorId"), doctor.get("id"))),
        patient_id=_as_id(_first_present(record.get("patientId"), patient.get("id"))),
        patient_name=_as_text(_first_present(record.get("patientName"), patient.get("name")), "Unknown"),
        patient_phone=_as_text(_first_present(record.get("patientPhone"), patient.get("phone"))),
        patient_email=_as_text(_first_present(record.get("patientEmail"), patient.get("email"))),
        date=_as_text(_first_present(record.get("appointmentDate"), day)),
        time=_clock(_first_present(record.get("appointmentTimeOnly"), clock)),
        status=None if status is None else str(status),
    )


def normalize_appointments(records: Iterable[Dict[str, Any]]) -> List[Appointment]:
    """Build appointments for one reload, skipping non-object entries."""
    return [normalize_appointment(r) for r in records or [] if isinstance(r, dict)]
