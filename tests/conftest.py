"""
Pytest configuration and shared fixtures.
"""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session

from salonbook.config import Settings, get_settings
from salonbook.db import build_engine, create_db_and_tables, get_session
from salonbook.deps import get_now
from salonbook.main import app
from salonbook.models import Salon, Service, Staff, StaffServiceLink, User
from salonbook.services import AvailabilityService, BookingService

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
WORKWEEK = WEEKDAYS[:5]

# 2030-01-07 is a Monday. "Now" sits the Tuesday before, at noon.
MONDAY = date(2030, 1, 7)
SATURDAY = date(2030, 1, 5)
SUNDAY = date(2030, 1, 6)
NOW = datetime(2030, 1, 1, 12, 0)


def staff_hours(start="09:00", end="17:00", days=WORKWEEK):
    return {d: {"start": start, "end": end, "is_working": d in days} for d in WEEKDAYS}


def salon_hours(open_="08:00", close="20:00", days=WEEKDAYS[:6]):
    return {d: {"open": open_, "close": close, "is_open": d in days} for d in WEEKDAYS}


@pytest.fixture
def settings():
    return Settings(slot_interval_minutes=30, availability_days_ahead=30, default_search_duration=60)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def seed(session):
    """One salon with an owner, one stylist working Mon-Fri 09:00-17:00 and two services."""
    owner = User(email="owner@example.com", name="Owner", role="salon")
    staff_user = User(email="ana@example.com", name="Ana", role="staff")
    client_user = User(email="client@example.com", name="Client", phone="061111222", role="client")
    other_client = User(email="other@example.com", name="Other", role="client")
    session.add_all([owner, staff_user, client_user, other_client])
    session.commit()

    salon = Salon(name="Studio", city="Sarajevo", owner_id=owner.id, working_hours=salon_hours())
    session.add(salon)
    session.commit()

    staff = Staff(salon_id=salon.id, user_id=staff_user.id, name="Ana", working_hours=staff_hours())
    haircut = Service(salon_id=salon.id, name="Haircut", duration=30, price=20.0)
    colour = Service(salon_id=salon.id, name="Colour", duration=60, price=50.0, discount_price=40.0)
    session.add_all([staff, haircut, colour])
    session.commit()

    session.add_all([
        StaffServiceLink(staff_id=staff.id, service_id=haircut.id),
        StaffServiceLink(staff_id=staff.id, service_id=colour.id),
    ])
    session.commit()

    for obj in (owner, staff_user, client_user, other_client, salon, staff, haircut, colour):
        session.refresh(obj)

    return SimpleNamespace(
        owner=owner,
        staff_user=staff_user,
        client_user=client_user,
        other_client=other_client,
        salon=salon,
        staff=staff,
        haircut=haircut,
        colour=colour,
    )


@pytest.fixture
def availability(session, settings):
    return AvailabilityService(session, settings)


@pytest.fixture
def booking(session, settings):
    return BookingService(session, settings)


@pytest.fixture
def client(engine, settings):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_header(settings):
    def make(user):
        claims = {"sub": user.email, "exp": datetime.now(timezone.utc) + timedelta(minutes=30)}
        token = jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)
        return {"Authorization": f"Bearer {token}"}
    return make
