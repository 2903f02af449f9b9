"""
Clinic API Gateway.

Async client for the clinic REST backend: doctor listing, filtering,
creation and deletion, the patient profile and the appointment queries.

Every path segment is URL-encoded here, and this is the only place an
omitted filter becomes the backend's ``"null"`` sentinel. Token placement
(path segment or bearer header) follows the endpoint table in
``shared.api_config``.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from config import settings
from core.data import AuthMissing, BaseApiClient, HTTPError, MutationResult
from shared.api_config import NO_FILTER_SENTINEL, get_endpoint

from .domain.models import Appointment, AppointmentQuery, Doctor, DoctorFilter, NewDoctor, Patient
from .domain.normalizer import normalize_appointments, normalize_doctors, normalize_patient
from .domain.policies import APPOINTMENT_CONDITIONS

logger = logging.getLogger(__name__)


def _segment(value: Optional[Any]) -> str:
    """Encode one path segment; None becomes the no-filter sentinel."""
    if value is None:
        return NO_FILTER_SENTINEL
    return quote(str(value), safe="")


def _require_token(token: Optional[str]) -> str:
    if not token:
        raise AuthMissing("This operation requires an auth token")
    return token


def _records(body: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """Pull the record list out of a list response envelope."""
    records = body.get(key)
    if records is None:
        records = body.get("data")
    return records if isinstance(records, list) else []


class ClinicApiClient(BaseApiClient):
    """Gateway to the clinic backend. Returns normalized domain objects."""

    def _route(self, logical_name: str, **segments: Any) -> tuple:
        """
        Resolve an endpoint into (method, path, label, headers).

        The label is the path template, so tokens embedded in the path
        never reach the logs.
        """
        method, template, placement = get_endpoint(logical_name)
        token = segments.pop("token", None)
        headers = None

        if placement == "path":
            segments["token"] = _require_token(token)
        elif placement == "bearer":
            headers = {"Authorization": f"Bearer {_require_token(token)}"}

        path = template.format(**{k: _segment(v) for k, v in segments.items()})
        return method, path, f"{method} {template}", headers

    async def _call(self, logical_name: str, json: Any = None, **segments: Any) -> Dict[str, Any]:
        method, path, label, headers = self._route(logical_name, **segments)
        return await self._request(method, path, label=label, json=json, headers=headers)

    # =========================================================================
    # DOCTORS
    # =========================================================================

    async def get_doctors(self) -> List[Doctor]:
        """List every doctor."""
        body = await self._call("list_doctors")
        return normalize_doctors(_records(body, "doctors"))

    async def filter_doctors(self, criteria: DoctorFilter) -> List[Doctor]:
        """List doctors matching the criteria; None fields are unconstrained."""
        criteria = criteria.normalized()
        body = await self._call(
            "filter_doctors",
            name=criteria.name,
            time=criteria.time,
            specialty=criteria.specialty,
        )
        return normalize_doctors(_records(body, "doctors"))

    async def save_doctor(self, doctor: NewDoctor, token: Optional[str]) -> MutationResult:
        """
        Create a doctor.

        A rejection from the backend is returned as an unsuccessful result
        carrying the server message; transport failures still raise.
        """
        try:
            body = await self._call("save_doctor", json=doctor.model_dump(), token=token)
        except HTTPError as e:
            logger.info(f"Doctor creation rejected ({e.status_code})")
            return MutationResult(success=False, message=e.message)
        return MutationResult(success=True, message=body.get("message", ""))

    async def delete_doctor(self, doctor_id: str, token: Optional[str]) -> MutationResult:
        """Delete a doctor. Rejections are returned, transport failures raise."""
        try:
            body = await self._call("delete_doctor", id=doctor_id, token=token)
        except HTTPError as e:
            logger.info(f"Delete of doctor {doctor_id} rejected ({e.status_code})")
            return MutationResult(success=False, message=e.message)
        return MutationResult(success=True, message=body.get("message", ""))

    # =========================================================================
    # PATIENTS
    # =========================================================================

    async def get_patient_profile(self, token: Optional[str]) -> Patient:
        """Fetch the profile of the patient owning the token."""
        body = await self._call("patient_profile", token=token)
        return normalize_patient(body)

    async def get_patient_appointments(
        self,
        patient_id: str,
        user: str,
        token: Optional[str],
    ) -> List[Appointment]:
        """List a patient's appointments as seen by ``user`` ("patient" or "doctor")."""
        body = await self._call("patient_appointments", id=patient_id, user=user, token=token)
        return normalize_appointments(_records(body, "appointments"))

    async def filter_patient_appointments(
        self,
        condition: Optional[str],
        name: Optional[str],
        token: Optional[str],
    ) -> List[Appointment]:
        """Filter the patient's appointments by condition ("past"/"future") and doctor name."""
        if condition and condition not in APPOINTMENT_CONDITIONS:
            raise ValueError(f"Unknown appointment condition: {condition}")
        body = await self._call(
            "filter_patient_appointments",
            condition=condition or None,
            name=name.strip() if name and name.strip() else None,
            token=token,
        )
        return normalize_appointments(_records(body, "appointments"))

    # =========================================================================
    # APPOINTMENTS
    # =========================================================================

    async def get_all_appointments(self, query: AppointmentQuery, token: Optional[str]) -> List[Appointment]:
        """Fetch the doctor's roster for one date, optionally filtered by patient name."""
        body = await self._call(
            "doctor_appointments",
            date=query.date.isoformat(),
            name=query.name_filter,
            token=token,
        )
        return normalize_appointments(_records(body, "appointments"))


def create_clinic_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> ClinicApiClient:
    """Build a client from application settings."""
    return ClinicApiClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )

