"""Clinic domain layer - models, normalization and form rules."""

from .models import (
    Appointment,
    AppointmentQuery,
    Doctor,
    DoctorFilter,
    NewDoctor,
    Patient,
)
from .normalizer import (
    normalize_appointment,
    normalize_appointments,
    normalize_doctor,
    normalize_doctors,
    normalize_patient,
    patient_of,
)
from .policies import DoctorFormValidator

__all__ = [
    "Appointment",
    "AppointmentQuery",
    "Doctor",
    "DoctorFilter",
    "NewDoctor",
    "Patient",
    "normalize_appointment",
    "normalize_appointments",
    "normalize_doctor",
    "normalize_doctors",
    "normalize_patient",
    "patient_of",
    "DoctorFormValidator",
]
