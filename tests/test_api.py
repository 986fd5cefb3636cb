"""HTTP tests: request validation and error kind to status code mapping"""

from datetime import date, timedelta

import pytest


@pytest.fixture
def future_day() -> str:
    return (date.today() + timedelta(days=30)).isoformat()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


class TestDirectoryEndpoints:
    def test_register_patient(self, client):
        payload = {
            "name": "Sofia",
            "surname": "Lopez",
            "national_id": "31222333",
            "coverage_name": "OSDE",
        }

        response = client.post("/patients", json=payload)
        duplicate = client.post("/patients", json=payload)

        assert response.status_code == 201
        assert response.json()["appointment_ids"] == []
        assert duplicate.status_code == 422
        assert duplicate.json()["error"] == "DuplicateKey"

    def test_register_doctor(self, client):
        response = client.post(
            "/doctors",
            json={
                "name": "Julian",
                "surname": "Diaz",
                "specialty": "Traumatology",
                "license_number": "MN-7788",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["active"] is True
        assert body["max_daily_appointments"] == 20

    def test_deactivate_doctor_with_upcoming_appointments(
        self, client, make_patient, make_doctor, make_appointment
    ):
        doctor = make_doctor()
        make_appointment(make_patient(), doctor, date.today() + timedelta(days=3), "09:00")

        response = client.patch(f"/doctors/{doctor.id}/status", json={"active": False})

        assert response.status_code == 422
        assert response.json()["error"] == "DoctorHasUpcomingAppointments"

    def test_update_patient(self, client, make_patient):
        patient, other = make_patient(), make_patient()

        response = client.put(f"/patients/{patient.id}", json={"coverage_name": "Galeno"})
        duplicate = client.put(f"/patients/{patient.id}", json={"national_id": other.national_id})

        assert response.status_code == 200
        assert response.json()["coverage_name"] == "Galeno"
        assert duplicate.status_code == 422
        assert duplicate.json()["error"] == "DuplicateKey"

    def test_update_doctor(self, client, make_doctor):
        doctor = make_doctor()

        response = client.put(f"/doctors/{doctor.id}", json={"max_daily_appointments": 4})
        missing = client.put("/doctors/9999", json={"notes": "x"})

        assert response.status_code == 200
        assert response.json()["max_daily_appointments"] == 4
        assert missing.status_code == 404


class TestAppointmentEndpoints:
    def test_create_appointment(self, client, make_patient, make_doctor, future_day):
        patient, doctor = make_patient(), make_doctor(specialty="Neurology")

        response = client.post(
            "/appointments",
            json={"patient": patient.id, "doctor": doctor.id, "date": future_day, "time": "9:45"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["state"] == "confirmed"
        assert body["time"] == "09:45"
        assert body["specialty"] == "Neurology"
        assert body["patient"]["id"] == patient.id

    def test_create_with_spanish_state_key(self, client, make_patient, make_doctor, future_day):
        response = client.post(
            "/appointments",
            json={
                "patient": make_patient().id,
                "doctor": make_doctor().id,
                "date": future_day,
                "time": "10:00",
                "estado": "pending",
            },
        )

        assert response.status_code == 201
        assert response.json()["state"] == "pending"

    @pytest.mark.parametrize(
        "day, time_of_day",
        [("2020-01-01", "10:00"), (None, "24:00"), (None, "10:5")],
    )
    def test_create_rejects_bad_slot(
        self, client, make_patient, make_doctor, future_day, day, time_of_day
    ):
        response = client.post(
            "/appointments",
            json={
                "patient": make_patient().id,
                "doctor": make_doctor().id,
                "date": day or future_day,
                "time": time_of_day,
            },
        )

        assert response.status_code == 422

    def test_create_unknown_doctor(self, client, make_patient, future_day):
        response = client.post(
            "/appointments",
            json={"patient": make_patient().id, "doctor": 9999, "date": future_day, "time": "10:00"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_create_slot_conflict(
        self, client, make_patient, make_doctor, make_appointment, future_day
    ):
        doctor = make_doctor()
        make_appointment(make_patient(), doctor, date.fromisoformat(future_day), "10:00")

        response = client.post(
            "/appointments",
            json={"patient": make_patient().id, "doctor": doctor.id, "date": future_day, "time": "10:00"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "SlotConflict"

    def test_edit_appointment(self, client, make_patient, make_doctor, make_appointment):
        appointment = make_appointment(make_patient(), make_doctor(), date(2025, 6, 2), "10:00")

        response = client.patch(f"/appointments/{appointment.id}", json={"estado": "cancelled"})

        assert response.status_code == 200
        assert response.json()["state"] == "cancelled"

    def test_edit_unknown_field(self, client, make_patient, make_doctor, make_appointment):
        appointment = make_appointment(make_patient(), make_doctor(), date(2025, 6, 2), "10:00")

        response = client.patch(f"/appointments/{appointment.id}", json={"specialty": "Surgery"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidUpdate"

    def test_edit_into_taken_slot(self, client, make_patient, make_doctor, make_appointment):
        patient, doctor = make_patient(), make_doctor()
        make_appointment(patient, doctor, date(2025, 6, 2), "10:00")
        other = make_appointment(patient, doctor, date(2025, 6, 2), "11:00")

        response = client.patch(
            f"/appointments/{other.id}", json={"date": "2025-06-02", "time": "10:00"}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "SlotConflict"

    def test_edit_to_inactive_doctor(self, client, make_patient, make_doctor, make_appointment):
        appointment = make_appointment(make_patient(), make_doctor(), date(2025, 6, 2), "10:00")
        inactive = make_doctor(active=False)

        response = client.patch(f"/appointments/{appointment.id}", json={"doctor": inactive.id})

        assert response.status_code == 400
        assert response.json()["error"] == "DoctorInactive"

    def test_get_missing_appointment(self, client):
        response = client.get("/appointments/9999")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_list_appointments(self, client, make_patient, make_doctor, make_appointment):
        doctor = make_doctor()
        patient = make_patient()
        make_appointment(patient, doctor, date(2025, 6, 3), "10:00")
        make_appointment(patient, doctor, date(2025, 6, 2), "10:00")

        response = client.get(
            "/appointments", params={"doctor": doctor.id, "date": "2025-06-02", "limit": "5"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["total_pages"] == 1
        assert body["items"][0]["date"] == "2025-06-02"

    @pytest.mark.parametrize("params", [{"page": "0"}, {"page": "abc"}, {"limit": "-1"}, {"date": "06/02/2025"}])
    def test_list_rejects_bad_parameters(self, client, params):
        response = client.get("/appointments", params=params)

        assert response.status_code == 400

    def test_list_bad_date_carries_error_kind(self, client):
        response = client.get("/appointments", params={"date": "2025-13-01"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidFilter"
