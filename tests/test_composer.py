from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest

from core.data import MutationResult, NetworkFailure
from use_cases.clinic.domain.models import Patient
from use_cases.clinic.presentation.composer import (
    AppointmentRowComposer,
    DoctorCardComposer,
    BOOK_NOW_ACTION,
    DELETE_DOCTOR_ACTION,
    LOGIN_PROMPT_ACTION,
)
from use_cases.clinic.session import ClinicSession, Role


def widget_nodes(widget) -> List[Dict[str, Any]]:
    """Flatten a widget tree into its dumped nodes."""
    nodes = []

    def walk(node):
        if isinstance(node, dict):
            if "type" in node:
                nodes.append(node)
            for value in node.values():
                walk(value)
        elif isinstance(node, list):
            for item in node:
                walk(item)

    walk(widget.model_dump(mode="json", exclude_none=True))
    return nodes


def text_values(widget) -> List[str]:
    return [n["value"] for n in widget_nodes(widget) if n["type"] in ("Text", "Title")]


def buttons(widget) -> List[Dict[str, Any]]:
    return [n for n in widget_nodes(widget) if n["type"] == "Button"]


@pytest.fixture
def booking():
    booking = AsyncMock()
    booking.start.return_value = True
    return booking


@pytest.fixture
def composer(api_client, notifier, booking):
    return DoctorCardComposer(api_client, notifier, booking)


class TestDoctorCardContent:

    def test_card_shows_doctor_details(self, composer, doctors, anonymous_session):
        rendered = composer.compose_doctor_card(doctors[0], anonymous_session)

        assert rendered.doctor_id == "5"
        assert rendered.widget.id == "doctor-card-5"
        assert text_values(rendered.widget) == [
            "John Smith",
            "Specialty: Cardiology",
            "Email: smith@clinic.com",
            "Available Times: 09:00-10:00, 10:00-11:00",
        ]

    def test_compose_by_builder_name(self, composer, doctors, anonymous_session):
        rendered = composer.compose("doctor_card", doctors[1], anonymous_session)
        assert rendered.widget.id == "doctor-card-6"

    def test_unknown_builder(self, composer):
        with pytest.raises(KeyError):
            composer.compose("nope")


class TestRoleDispatch:

    def test_admin_gets_delete_only(self, composer, doctors, admin_session):
        for doctor in doctors:
            rendered = composer.compose_doctor_card(doctor, admin_session)
            [button] = buttons(rendered.widget)
            assert button["label"] == "Delete"
            assert button["onClickAction"]["type"] == DELETE_DOCTOR_ACTION
            assert button["onClickAction"]["payload"] == {"doctor_id": doctor.id}
            assert rendered.action_type == DELETE_DOCTOR_ACTION

    def test_anonymous_gets_login_prompt(self, composer, doctors, anonymous_session):
        rendered = composer.compose_doctor_card(doctors[0], anonymous_session)
        [button] = buttons(rendered.widget)
        assert button["label"] == "Book Now"
        assert rendered.action_type == LOGIN_PROMPT_ACTION

    def test_logged_patient_gets_booking(self, composer, doctors, patient_session):
        rendered = composer.compose_doctor_card(doctors[0], patient_session)
        [button] = buttons(rendered.widget)
        assert button["label"] == "Book Now"
        assert rendered.action_type == BOOK_NOW_ACTION

    def test_every_role_has_an_action(self, composer):
        assert set(composer._role_actions) == set(Role)


class TestDeleteAction:

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, composer, api_client, notifier, doctors, admin_session):
        deleted = []
        rendered = composer.compose_doctor_card(doctors[0], admin_session, on_deleted=deleted.append)

        await rendered.action()

        assert notifier.confirmations == ["Are you sure you want to delete Dr. John Smith?"]
        api_client.delete_doctor.assert_awaited_once_with("5", "admin-token")
        assert deleted == ["5"]
        assert notifier.messages == ["Doctor deleted successfully"]

    @pytest.mark.asyncio
    async def test_fallback_success_message(self, composer, api_client, notifier, doctors, admin_session):
        api_client.delete_doctor.return_value = MutationResult(success=True)
        await composer.compose_doctor_card(doctors[0], admin_session).action()
        assert notifier.messages == ["Doctor deleted."]

    @pytest.mark.asyncio
    async def test_declined_confirmation(self, composer, api_client, notifier, doctors, admin_session):
        notifier.confirm_answer = False
        deleted = []

        await composer.compose_doctor_card(doctors[0], admin_session, on_deleted=deleted.append).action()

        api_client.delete_doctor.assert_not_awaited()
        assert deleted == []
        assert notifier.messages == []

    @pytest.mark.asyncio
    async def test_missing_token(self, composer, api_client, notifier, doctors):
        session = ClinicSession(token=None, role=Role.ADMIN)

        await composer.compose_doctor_card(doctors[0], session).action()

        api_client.delete_doctor.assert_not_awaited()
        assert notifier.messages == ["Unauthorized action."]

    @pytest.mark.asyncio
    async def test_rejected_delete_keeps_card(self, composer, api_client, notifier, doctors, admin_session):
        api_client.delete_doctor.return_value = MutationResult(success=False, message="Invalid token")
        deleted = []

        await composer.compose_doctor_card(doctors[0], admin_session, on_deleted=deleted.append).action()

        assert deleted == []
        assert notifier.messages == ["Failed to delete doctor."]

    @pytest.mark.asyncio
    async def test_network_failure(self, composer, api_client, notifier, doctors, admin_session):
        api_client.delete_doctor.side_effect = NetworkFailure("down")
        deleted = []

        await composer.compose_doctor_card(doctors[0], admin_session, on_deleted=deleted.append).action()

        assert deleted == []
        assert notifier.messages == ["Failed to delete doctor."]


class TestBookingActions:

    @pytest.mark.asyncio
    async def test_login_prompt_makes_no_calls(self, composer, api_client, booking, notifier, doctors, anonymous_session):
        await composer.compose_doctor_card(doctors[0], anonymous_session).action()

        assert notifier.messages == ["Please log in as a patient to book an appointment."]
        assert api_client.mock_calls == []
        booking.start.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_book_starts_handoff(self, composer, booking, doctors, patient_session):
        await composer.compose_doctor_card(doctors[1], patient_session).action()
        booking.start.assert_awaited_once_with(doctors[1], patient_session)


class TestAppointmentRows:

    def test_patient_row(self):
        row = AppointmentRowComposer().compose_patient_row(
            Patient(id="7", name="Jane", phone="555", email="jane@example.com"), "11", "5"
        )

        assert row.id == "appointment-row-11"
        assert text_values(row) == ["7", "Jane", "555", "jane@example.com"]
        [button] = buttons(row)
        assert button["label"] == "Add Prescription"
        assert button["onClickAction"]["handler"] == "client"
        assert button["onClickAction"]["payload"] == {
            "appointment_id": "11",
            "patient_name": "Jane",
            "doctor_id": "5",
        }

    def test_missing_patient_id_renders_blank(self):
        row = AppointmentRowComposer().compose_patient_row(Patient(id=None), "11", None)
        assert text_values(row)[0] == ""

    def test_message_row_has_single_cell(self):
        row = AppointmentRowComposer().compose_message_row("appointments-empty", "No Appointments found for today.")
        assert row.id == "appointments-empty"
        assert text_values(row) == ["No Appointments found for today."]
        assert buttons(row) == []
