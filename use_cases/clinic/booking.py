"""
Booking Handoff.

Takes a logged-in patient from a doctor card to the external booking
overlay: fetch the patient's profile, then open the overlay with the
doctor and patient. The overlay itself (form, submission) lives outside
this package and reports back through ``overlay_closed()``.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

from core.data import GatewayError
from core.presentation import NoticeLevel, Notifier

from .domain.models import Doctor, Patient
from .session import ClinicSession

logger = logging.getLogger(__name__)


class BookingState(Enum):
    """Steps in the booking handoff."""
    IDLE = "idle"
    FETCHING_PROFILE = "fetching_profile"
    OVERLAY_OPEN = "overlay_open"


class BookingOverlay(ABC):
    """The external booking form."""

    @abstractmethod
    def open(self, doctor: Doctor, patient: Patient):
        """Show the overlay prefilled with the doctor and patient."""
        pass


class PendingOverlay(BookingOverlay):
    """
    Overlay that records the open request for a front end to pick up.

    Used by the web host, which returns ``request`` in its response.
    """

    def __init__(self):
        self.request: Optional[Dict[str, Any]] = None

    def open(self, doctor: Doctor, patient: Patient):
        self.request = {
            "doctor": {"id": doctor.id, "name": doctor.name, "specialty": doctor.specialty,
                       "available_times": list(doctor.available_times)},
            "patient": {"id": patient.id, "name": patient.name, "email": patient.email},
        }

    def take(self) -> Optional[Dict[str, Any]]:
        request, self.request = self.request, None
        return request


class BookingHandoff:
    """
    State machine for starting a booking.

    IDLE -> FETCHING_PROFILE -> OVERLAY_OPEN on success, back to IDLE on a
    start that never reaches the overlay and when the overlay closes.
    Starts while not IDLE are refused with a notice.
    """

    def __init__(self, api_client, overlay: BookingOverlay, notifier: Notifier):
        self.api_client = api_client
        self.overlay = overlay
        self.notifier = notifier
        self._state = BookingState.IDLE

    @property
    def state(self) -> BookingState:
        return self._state

    async def start(self, doctor: Doctor, session: ClinicSession) -> bool:
        """
        Start booking with a doctor.

        Returns:
            True if the overlay was opened
        """
        if self._state is not BookingState.IDLE:
            logger.info(f"Ignoring booking start for doctor {doctor.id} while {self._state.value}")
            self.notifier.alert("A booking is already in progress.", NoticeLevel.INFO)
            return False

        if not session.has_token:
            self.notifier.alert("Session expired. Please log in again.", NoticeLevel.ERROR)
            return False

        self._state = BookingState.FETCHING_PROFILE
        try:
            try:
                patient = await self.api_client.get_patient_profile(session.token)
            except GatewayError as e:
                logger.error(f"Patient profile fetch failed: {e}")
                self.notifier.alert("Unable to fetch patient data.", NoticeLevel.ERROR)
                return False

            self.overlay.open(doctor, patient)
            self._state = BookingState.OVERLAY_OPEN
            logger.info(f"Booking overlay opened for doctor {doctor.id}")
            return True
        finally:
            # Cancellation or any error before the overlay opened
            if self._state is BookingState.FETCHING_PROFILE:
                self._state = BookingState.IDLE

    def overlay_closed(self):
        """The overlay was closed or submitted."""
        if self._state is BookingState.OVERLAY_OPEN:
            self._state = BookingState.IDLE
