"""
Appointment Table Controller.

Owns the doctor's roster table and its two filter inputs, the selected
date and an optional patient name. Each trigger changes one input and
reloads the whole table; reloads are never merged, and only the latest
one may render.
"""

import logging
from datetime import date
from typing import Callable, Optional, Tuple, Union

from core.data import GatewayError
from core.domain import blank_to_none, parse_calendar_date
from core.orchestration import RequestSequencer
from core.presentation import NoticeLevel, Notifier, ViewRegion

from .domain.models import AppointmentQuery
from .domain.normalizer import patient_of
from .presentation.composer import AppointmentRowComposer
from .session import SessionReader

logger = logging.getLogger(__name__)


class AppointmentTableController:
    """Controller for the doctor's appointment roster."""

    COLUMNS: Tuple[str, ...] = ("Patient ID", "Name", "Phone No.", "Email", "Prescription")

    EMPTY_MESSAGE = "No Appointments found for today."
    ERROR_MESSAGE = "Error loading appointments. Try again later."

    def __init__(
        self,
        api_client,
        session_reader: SessionReader,
        row_composer: AppointmentRowComposer,
        notifier: Notifier,
        today: Callable[[], date] = date.today,
    ):
        self.api_client = api_client
        self.session_reader = session_reader
        self.row_composer = row_composer
        self.notifier = notifier
        self.table = ViewRegion("patientTableBody")

        self._today = today
        self._selected_date = today()
        self._name_filter: Optional[str] = None
        self._sequencer = RequestSequencer("appointments")

    @property
    def selected_date(self) -> date:
        return self._selected_date

    @property
    def name_filter(self) -> Optional[str]:
        return self._name_filter

    @property
    def query(self) -> AppointmentQuery:
        return AppointmentQuery(date=self._selected_date, name_filter=self._name_filter)

    # =========================================================================
    # TRIGGERS
    # =========================================================================

    async def on_name_input(self, text: Optional[str]) -> bool:
        self._name_filter = blank_to_none(text)
        return await self.reload()

    async def on_today_clicked(self) -> bool:
        self._selected_date = self._today()
        return await self.reload()

    async def on_date_changed(self, value: Union[str, date]) -> bool:
        """
        Raises:
            ValueError: if value is not a calendar date
        """
        self._selected_date = parse_calendar_date(value)
        return await self.reload()

    # =========================================================================
    # RELOAD
    # =========================================================================

    async def reload(self) -> bool:
        """
        Fetch and render the roster for the current date and name filter.

        Returns:
            True if appointments (or the empty message) were rendered
        """
        token = self.session_reader.read_token()
        if not token:
            logger.warning("Appointment reload without a token")
            self.notifier.alert("Session expired. Please log in again.", NoticeLevel.ERROR)
            return False

        query = self.query
        ticket = self._sequencer.next()
        try:
            appointments = await self.api_client.get_all_appointments(query, token)
        except GatewayError as e:
            if not self._sequencer.is_current(ticket):
                logger.debug(f"Discarding stale appointment failure: {e}")
                return False
            logger.error(f"Error loading appointments for {query.date}: {e}")
            self.table.replace([self.row_composer.compose_message_row("appointments-error", self.ERROR_MESSAGE)])
            return False

        if not self._sequencer.is_current(ticket):
            logger.debug(f"Discarding stale appointments for {query.date} (ticket {ticket})")
            return False

        if not appointments:
            self.table.replace([self.row_composer.compose_message_row("appointments-empty", self.EMPTY_MESSAGE)])
            return True

        self.table.replace([
            self.row_composer.compose_patient_row(patient_of(a), a.appointment_id, a.doctor_id)
            for a in appointments
        ])
        logger.info(f"Rendered {len(appointments)} appointments for {query.date}")
        return True
