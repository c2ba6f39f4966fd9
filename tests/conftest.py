import sys
import os

# Add the current directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from datetime import date

from insights.models.appointment import AppointmentStatus
from insights.schemas.analytics import DateRange
from insights.schemas.appointments import Appointment
from insights.schemas.availability import WorkingHours
from insights.schemas.catalog import Service, Staff
from insights.services.availability import availability_from_rules


def make_appt(id, day, slot="10:00", staff="s1", service="svc1", status=AppointmentStatus.COMPLETED, **client):
    """Build an appointment with snake_case client fields (name, email, phone)."""
    return Appointment(
        id=id,
        date=day,
        time_slot=slot,
        staff_id=staff,
        service_id=service,
        client_name=client.get("name", ""),
        client_email=client.get("email"),
        client_phone=client.get("phone"),
        status=status,
        notes=client.get("notes"),
    )


@pytest.fixture
def services():
    return [
        Service(id="svc1", name="Haircut", price=50, duration_minutes=60),
        Service(id="svc2", name="Beard Trim", price=25, duration_minutes=30),
        Service(id="svc3", name="Color", price=120, duration_minutes=90),
    ]


@pytest.fixture
def staff():
    return [
        Staff(id="s1", name="Alice", role="Senior Stylist", specialties=["svc1", "svc3"]),
        Staff(id="s2", name="Bruno", specialties=["svc2"]),
    ]


@pytest.fixture
def working_hours():
    """Alice works Mon-Fri 09-17, Bruno works Tue-Sat 10-18 (480 min/day each)."""
    rules = [
        WorkingHours(staff_id="s1", day_of_week=d, start_time="09:00", end_time="17:00")
        for d in range(0, 5)
    ]
    rules += [
        WorkingHours(staff_id="s2", day_of_week=d, start_time="10:00", end_time="18:00")
        for d in range(1, 6)
    ]
    rules.append(WorkingHours(staff_id="s1", day_of_week=5, is_working=False))
    return rules


@pytest.fixture
def availability(working_hours):
    return availability_from_rules(working_hours)


@pytest.fixture
def current_range():
    # Monday → Sunday
    return DateRange(start=date(2024, 1, 1), end=date(2024, 1, 7))


@pytest.fixture
def previous_range():
    return DateRange(start=date(2023, 12, 25), end=date(2023, 12, 31))


@pytest.fixture
def week_appointments():
    """
    A week of bookings:
    - Ana (phone, two visits with Alice, email only on the second one)
    - Bob (email, a color with Bruno, still CONFIRMED)
    - Carl (walk-in, no contact)
    - one cancellation, one no-show, one calendar block
    - one visit in the previous week, one confirmed booking later in January
    """
    return [
        make_appt("a1", "2024-01-01", "10:00", "s1", "svc1", name="Ana", phone="555-123-4567"),
        make_appt(
            "a2", "2024-01-03", "10:00", "s1", "svc1",
            name="Ana", phone="(555) 123-4567", email="ana@example.com",
        ),
        make_appt(
            "a3", "2024-01-03", "14:00", "s2", "svc3",
            status=AppointmentStatus.CONFIRMED, name="Bob", email="bob@example.com",
        ),
        make_appt("a4", "2024-01-04", "14:30", "s2", "svc2", name="Carl"),
        make_appt(
            "a5", "2024-01-05", "11:00", "s1", "svc2",
            status=AppointmentStatus.CANCELLED, name="Dee", email="dee@example.com",
        ),
        make_appt(
            "a6", "2024-01-05", "15:00", "s2", "svc1",
            status=AppointmentStatus.NO_SHOW, name="Eve", email="eve@example.com",
        ),
        make_appt(
            "a7", "2024-01-06", "10:00", "s2", "svc2",
            status=AppointmentStatus.BLOCKED, name="Blocked Time", email="blocked@internal.system",
        ),
        make_appt("p1", "2023-12-27", "10:00", "s1", "svc1", name="Ana", phone="5551234567"),
        make_appt(
            "f1", "2024-01-20", "09:00", "s1", "svc1",
            status=AppointmentStatus.CONFIRMED, name="Fay", email="fay@example.com",
        ),
    ]


@pytest.fixture
def client():
    """Create a test client for API tests."""
    from fastapi.testclient import TestClient
    from insights.main import app

    with TestClient(app) as client:
        yield client
