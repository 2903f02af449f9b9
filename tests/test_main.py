from datetime import date

import pytest
from fastapi.testclient import TestClient

import main
from core.data import MutationResult
from use_cases.clinic import ClinicPortalServer
from use_cases.clinic.domain.models import Appointment, DoctorFilter


@pytest.fixture
def portal(api_client, store):
    return ClinicPortalServer(api_client, store, today=lambda: date(2024, 1, 1))


@pytest.fixture
def client(portal):
    main.app.dependency_overrides[main.get_server] = lambda: portal
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


class TestGeneral:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_branding(self, client):
        body = client.get("/api/branding").json()
        assert body["tableColumns"] == ["Patient ID", "Name", "Phone No.", "Email", "Prescription"]


class TestDirectoryEndpoints:

    def test_load(self, client, api_client, store, doctors):
        store.set("token", "admin-token")
        store.set("userRole", "admin")
        api_client.get_doctors.return_value = doctors

        body = client.get("/api/directory").json()

        assert body["region"] == "content"
        assert body["rendered"] is True
        assert [node["id"] for node in body["nodes"]] == ["doctor-card-5", "doctor-card-6", "doctor-card-8"]
        assert body["notices"] == []

    def test_empty_load(self, client):
        body = client.get("/api/directory").json()
        assert [node["value"] for node in body["nodes"]] == ["No doctors found."]

    def test_filter(self, client, api_client):
        body = client.post("/api/directory/filter", json={"name": "Smith", "time": ""}).json()

        api_client.filter_doctors.assert_awaited_once_with(DoctorFilter(name="Smith"))
        assert [node["value"] for node in body["nodes"]] == ["No doctors found with the given filters."]

    def test_delete_action(self, client, api_client, store, doctors):
        store.set("token", "admin-token")
        store.set("userRole", "admin")
        api_client.get_doctors.return_value = doctors
        client.get("/api/directory")

        body = client.post("/api/directory/actions", json={
            "action_type": "delete_doctor",
            "payload": {"doctor_id": "5"},
        }).json()

        assert [node["id"] for node in body["nodes"]] == ["doctor-card-6", "doctor-card-8"]
        assert body["notices"] == [{"message": "Doctor deleted successfully", "level": "success"}]

    def test_declined_delete(self, client, api_client, store, doctors):
        store.set("token", "admin-token")
        store.set("userRole", "admin")
        api_client.get_doctors.return_value = doctors
        client.get("/api/directory")

        body = client.post("/api/directory/actions", json={
            "action_type": "delete_doctor",
            "payload": {"doctor_id": "5"},
            "confirmed": False,
        }).json()

        api_client.delete_doctor.assert_not_awaited()
        assert len(body["nodes"]) == 3

    def test_unknown_action(self, client):
        response = client.post("/api/directory/actions", json={"action_type": "delete_doctor", "payload": {"doctor_id": "1"}})
        assert response.status_code == 404

    def test_add_doctor(self, client, api_client, store):
        store.set("token", "admin-token")
        store.set("userRole", "admin")
        api_client.save_doctor.return_value = MutationResult(success=False, message="Doctor already exists")

        body = client.post("/api/directory/doctors", json={
            "name": "Dr. New",
            "email": "new@clinic.com",
            "password": "secret",
            "specialty": "Pediatrics",
        }).json()

        assert body["created"] is False
        assert body["notices"][0]["message"] == "Failed to add doctor: Doctor already exists"

    def test_bad_role(self, client, api_client, store, doctors):
        store.set("userRole", "superuser")
        api_client.get_doctors.return_value = doctors

        response = client.get("/api/directory")

        assert response.status_code == 400


class TestAppointmentEndpoints:

    def test_date_change(self, client, api_client, store):
        store.set("token", "doctor-token")
        api_client.get_all_appointments.return_value = [
            Appointment(appointment_id="11", doctor_id="5", patient_id="7", patient_name="Jane"),
        ]

        body = client.post("/api/appointments/date", json={"date": "2024-01-02"}).json()

        assert body["selected_date"] == "2024-01-02"
        assert [node["id"] for node in body["nodes"]] == ["appointment-row-11"]

    def test_invalid_date(self, client, store):
        store.set("token", "doctor-token")
        response = client.post("/api/appointments/date", json={"date": "yesterday"})
        assert response.status_code == 400

    def test_name_filter(self, client, api_client, store):
        store.set("token", "doctor-token")

        body = client.post("/api/appointments/name", json={"name": " Jane "}).json()

        assert body["name_filter"] == "Jane"
        assert body["nodes"][0]["id"] == "appointments-empty"

    def test_reload_without_token(self, client):
        body = client.get("/api/appointments").json()
        assert body["rendered"] is False
        assert body["notices"][0]["message"] == "Session expired. Please log in again."

    def test_today(self, client, store):
        store.set("token", "doctor-token")
        body = client.post("/api/appointments/today").json()
        assert body["selected_date"] == "2024-01-01"


class TestBookingEndpoints:

    def test_book_then_close(self, client, store, doctors, api_client):
        store.set("token", "patient-token")
        store.set("userRole", "loggedPatient")
        api_client.get_doctors.return_value = doctors
        client.get("/api/directory")

        body = client.post("/api/directory/actions", json={
            "action_type": "book_now",
            "payload": {"doctor_id": "6"},
        }).json()

        assert body["booking"]["state"] == "overlay_open"
        assert body["booking"]["overlay"]["doctor"]["id"] == "6"
        assert body["booking"]["overlay"]["patient"]["name"] == "Jane Doe"

        assert client.post("/api/booking/close").json() == {"state": "idle"}
