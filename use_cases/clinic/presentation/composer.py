"""
Clinic Widget Composer.

Builds ChatKit widgets for the doctor directory and the doctor's
appointment roster. Extends the core WidgetComposer base class.

Doctor cards are role-conditioned: the session role picks the card's
action from a closed table keyed by Role, and the action is returned
bound to a coroutine so the controller can route widget clicks back to it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from chatkit.widgets import Box, Card, Divider, Row, Text, Title

from core.data import GatewayError
from core.presentation import (
    NoticeLevel,
    Notifier,
    TextFormatter,
    WidgetAction,
    WidgetComposer,
    WidgetTheme,
    message_text,
)

from ..domain.models import Doctor, Patient
from ..session import ClinicSession, Role

logger = logging.getLogger(__name__)


# Action types carried by widget buttons
DELETE_DOCTOR_ACTION = "delete_doctor"
BOOK_NOW_ACTION = "book_now"
LOGIN_PROMPT_ACTION = "login_prompt"
ADD_PRESCRIPTION_ACTION = "add_prescription"


@dataclass
class RenderedCard:
    """A doctor card together with the coroutine its button triggers."""
    doctor_id: str
    widget: Card
    action_type: str
    action: Callable[[], Awaitable[Any]]


@dataclass
class _CardAction:
    label: str
    kind: str
    action_type: str
    handler: Callable[[], Awaitable[Any]]


class DoctorCardComposer(WidgetComposer):
    """
    Composes one interactive card per doctor.

    Provides:
    - Delete for administrators
    - A login prompt for public visitors
    - The booking handoff for logged-in patients
    """

    def __init__(
        self,
        api_client,
        notifier: Notifier,
        booking,
        theme: Optional[WidgetTheme] = None,
    ):
        super().__init__(theme)
        self.api_client = api_client
        self.notifier = notifier
        self.booking = booking
        self._role_actions: Dict[Role, Callable[..., _CardAction]] = {
            Role.ADMIN: self._delete_action,
            Role.ANONYMOUS_PATIENT: self._login_prompt_action,
            Role.AUTHENTICATED_PATIENT: self._book_action,
        }

    def get_widget_builders(self) -> Dict[str, Callable]:
        return {
            "doctor_card": self.compose_doctor_card,
        }

    def compose_doctor_card(
        self,
        doctor: Doctor,
        session: ClinicSession,
        on_deleted: Optional[Callable[[str], Any]] = None,
    ) -> RenderedCard:
        """
        Build a doctor card for the session's role.

        Args:
            doctor: The doctor to show
            session: Current token and role
            on_deleted: Called with the doctor id after a successful delete

        Returns:
            RenderedCard with the widget and its bound action
        """
        card_action = self._role_actions[session.role](doctor, session, on_deleted)
        prefix = f"doctor-{doctor.id}"

        widget = Card(
            id=f"doctor-card-{doctor.id}",
            children=[
                Box(
                    id=f"{prefix}-info",
                    children=[
                        Title(id=f"{prefix}-name", value=doctor.name, size="lg"),
                        Text(id=f"{prefix}-specialty", value=f"Specialty: {doctor.specialty}"),
                        Text(id=f"{prefix}-email", value=f"Email: {doctor.email}"),
                        Text(
                            id=f"{prefix}-times",
                            value=f"Available Times: {TextFormatter.join(doctor.available_times)}",
                        ),
                    ],
                ),
                Divider(id=f"{prefix}-divider"),
                self._create_button(
                    label=card_action.label,
                    action=WidgetAction(
                        action_type=card_action.action_type,
                        payload={"doctor_id": doctor.id},
                    ),
                    color=self.theme.get_action_color(card_action.kind),
                    button_id=f"{prefix}-{card_action.action_type.replace('_', '-')}",
                ),
            ],
        )

        return RenderedCard(
            doctor_id=doctor.id,
            widget=widget,
            action_type=card_action.action_type,
            action=card_action.handler,
        )

    # =========================================================================
    # ROLE ACTIONS
    # =========================================================================

    def _delete_action(self, doctor: Doctor, session: ClinicSession, on_deleted) -> _CardAction:
        async def delete():
            if not self.notifier.confirm(f"Are you sure you want to delete Dr. {doctor.name}?"):
                return
            if not session.has_token:
                self.notifier.alert("Unauthorized action.", NoticeLevel.ERROR)
                return

            try:
                result = await self.api_client.delete_doctor(doctor.id, session.token)
            except GatewayError as e:
                logger.error(f"Delete of doctor {doctor.id} failed: {e}")
                self.notifier.alert("Failed to delete doctor.", NoticeLevel.ERROR)
                return

            if not result.success:
                logger.error(f"Delete of doctor {doctor.id} rejected: {result.message}")
                self.notifier.alert("Failed to delete doctor.", NoticeLevel.ERROR)
                return

            if on_deleted is not None:
                on_deleted(doctor.id)
            self.notifier.alert(result.message or "Doctor deleted.", NoticeLevel.SUCCESS)

        return _CardAction(label="Delete", kind="delete", action_type=DELETE_DOCTOR_ACTION, handler=delete)

    def _login_prompt_action(self, doctor: Doctor, session: ClinicSession, on_deleted) -> _CardAction:
        async def prompt():
            self.notifier.alert("Please log in as a patient to book an appointment.")

        return _CardAction(label="Book Now", kind="book", action_type=LOGIN_PROMPT_ACTION, handler=prompt)

    def _book_action(self, doctor: Doctor, session: ClinicSession, on_deleted) -> _CardAction:
        async def book():
            await self.booking.start(doctor, session)

        return _CardAction(label="Book Now", kind="book", action_type=BOOK_NOW_ACTION, handler=book)


class AppointmentRowComposer(WidgetComposer):
    """Composes roster rows for the doctor's appointment table."""

    def get_widget_builders(self) -> Dict[str, Callable]:
        return {
            "patient_row": self.compose_patient_row,
            "message_row": self.compose_message_row,
        }

    def compose_patient_row(self, patient: Patient, appointment_id: Optional[str], doctor_id: Optional[str]) -> Row:
        """
        Build one row: Patient ID, Name, Phone No., Email, Add Prescription.

        The prescription button is handled by the front end, which opens
        its prescription form with the payload.
        """
        prefix = f"appointment-{appointment_id}"
        return Row(
            id=f"appointment-row-{appointment_id}",
            children=[
                Text(id=f"{prefix}-patient-id", value=TextFormatter.or_default(patient.id)),
                Text(id=f"{prefix}-name", value=patient.name),
                Text(id=f"{prefix}-phone", value=patient.phone),
                Text(id=f"{prefix}-email", value=patient.email),
                self._create_button(
                    label="Add Prescription",
                    action=WidgetAction(
                        action_type=ADD_PRESCRIPTION_ACTION,
                        handler="client",
                        payload={
                            "appointment_id": appointment_id,
                            "patient_name": patient.name,
                            "doctor_id": doctor_id,
                        },
                    ),
                    color=self.theme.get_action_color("prescription"),
                    button_id=f"{prefix}-prescription",
                ),
            ],
        )

    def compose_message_row(self, row_id: str, message: str) -> Row:
        """A row holding a single message across every column."""
        return Row(id=row_id, children=[message_text(f"{row_id}-text", message)])
