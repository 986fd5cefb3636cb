"""Tests for the slot and daily-load checks"""

from datetime import date, datetime

from clinic_scheduling.domain.appointments.availability import AvailabilityChecker, day_window

DAY = date(2025, 3, 10)


def test_day_window_spans_whole_calendar_day():
    start, end = day_window(DAY)

    assert start == datetime(2025, 3, 10, 0, 0, 0)
    assert end == datetime(2025, 3, 10, 23, 59, 59, 999000)


def test_day_window_accepts_datetime():
    assert day_window(datetime(2025, 3, 10, 15, 30)) == day_window(DAY)


class TestIsSlotFree:
    def test_free_when_doctor_has_no_appointments(self, db_session, make_doctor):
        doctor = make_doctor()

        assert AvailabilityChecker(db_session).is_slot_free(doctor.id, DAY, "09:00")

    def test_booked_slot_is_not_free(self, db_session, make_doctor, make_patient, make_appointment):
        doctor = make_doctor()
        make_appointment(make_patient(), doctor, DAY, "09:00")

        checker = AvailabilityChecker(db_session)
        assert not checker.is_slot_free(doctor.id, DAY, "09:00")
        assert not checker.is_slot_free(doctor.id, DAY, "9:00")
        assert checker.is_slot_free(doctor.id, DAY, "09:30")

    def test_other_doctor_slot_does_not_count(
        self, db_session, make_doctor, make_patient, make_appointment
    ):
        booked, other = make_doctor(), make_doctor()
        make_appointment(make_patient(), booked, DAY, "09:00")

        assert AvailabilityChecker(db_session).is_slot_free(other.id, DAY, "09:00")

    def test_cancelled_appointment_releases_slot(
        self, db_session, make_doctor, make_patient, make_appointment
    ):
        doctor = make_doctor()
        make_appointment(make_patient(), doctor, DAY, "09:00", state="cancelled")

        checker = AvailabilityChecker(db_session)
        assert checker.is_slot_free(doctor.id, DAY, "09:00")

    def test_excluded_appointment_does_not_block_itself(
        self, db_session, make_doctor, make_patient, make_appointment
    ):
        doctor = make_doctor()
        appointment = make_appointment(make_patient(), doctor, DAY, "09:00")

        assert AvailabilityChecker(db_session).is_slot_free(
            doctor.id, DAY, "09:00", exclude_appointment_id=appointment.id
        )


class TestDailyLoad:
    def test_counts_only_the_calendar_day(
        self, db_session, make_doctor, make_patient, make_appointment
    ):
        doctor = make_doctor()
        patient = make_patient()
        make_appointment(patient, doctor, DAY, "00:00")
        make_appointment(patient, doctor, DAY, "23:59")
        make_appointment(patient, doctor, date(2025, 3, 11), "00:00")
        make_appointment(patient, doctor, date(2025, 3, 9), "23:59")

        assert AvailabilityChecker(db_session).daily_load(doctor.id, DAY) == 2

    def test_state_filter_and_exclusion(
        self, db_session, make_doctor, make_patient, make_appointment
    ):
        doctor = make_doctor()
        patient = make_patient()
        confirmed = make_appointment(patient, doctor, DAY, "09:00")
        make_appointment(patient, doctor, DAY, "10:00", state="pending")
        make_appointment(patient, doctor, DAY, "11:00", state="cancelled")

        checker = AvailabilityChecker(db_session)
        assert checker.daily_load(doctor.id, DAY) == 3
        assert checker.daily_load(doctor.id, DAY, states=["confirmed"]) == 1
        assert checker.daily_load(doctor.id, DAY, exclude_appointment_id=confirmed.id) == 2
