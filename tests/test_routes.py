"""
HTTP-level tests for the public, salon, staff and appointment routes.
"""

from datetime import date, time

from sqlmodel import select

from salonbook.models import Appointment, Salon, Staff

GUEST_BOOKING = {
    "guest_name": "Guest Person",
    "guest_phone": "062333444",
    "guest_address": "Main St 1",
    "date": "07.01.2030",
    "time": "10:00",
}


def guest_booking(seed, **overrides):
    payload = dict(GUEST_BOOKING, staff_id=seed.staff.id, service_id=seed.haircut.id)
    payload.update(overrides)
    return payload


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Public availability and guest booking
# ---------------------------------------------------------------------------

def test_available_slots(client, seed):
    resp = client.get("/public/available-slots", params={
        "staff_id": seed.staff.id, "service_id": seed.haircut.id, "date": "07.01.2030",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["date"] == "2030-01-07"
    assert len(data["slots"]) == 16
    assert data["slots"][0] == "09:00"
    assert data["slots"][-1] == "16:30"


def test_available_slots_accepts_iso_dates(client, seed):
    resp = client.get("/public/available-slots", params={
        "staff_id": seed.staff.id, "service_id": seed.colour.id, "date": "2030-01-05",
    })
    assert resp.status_code == 200
    assert resp.json()["slots"] == []


def test_available_slots_bad_input(client, seed):
    resp = client.get("/public/available-slots", params={
        "staff_id": seed.staff.id, "service_id": seed.haircut.id, "date": "Jan 7th",
    })
    assert resp.status_code == 422

    resp = client.get("/public/available-slots", params={
        "staff_id": 999, "service_id": seed.haircut.id, "date": "07.01.2030",
    })
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Staff member not found"


def test_available_dates(client, seed):
    resp = client.get("/public/available-dates", params={
        "staff_id": seed.staff.id, "service_id": seed.haircut.id, "days": 7,
    })
    assert resp.status_code == 200
    assert resp.json()["dates"] == ["2030-01-01", "2030-01-02", "2030-01-03", "2030-01-04", "2030-01-07"]


def test_guest_booking_then_same_slot_again(client, seed, session):
    resp = client.post("/public/book", json=guest_booking(seed))
    assert resp.status_code == 201
    data = resp.json()
    assert data["status"] == "pending"
    assert data["is_guest"] is True
    assert data["time"] == "10:00:00"
    assert data["end_time"] == "10:30:00"
    assert data["created_at"]

    resp = client.post("/public/book", json=guest_booking(seed))
    assert resp.status_code == 422
    assert resp.json()["reason"] == "booked"

    rows = session.exec(select(Appointment).where(Appointment.staff_id == seed.staff.id)).all()
    assert len(rows) == 1


def test_booked_slot_disappears_from_availability(client, seed):
    client.post("/public/book", json=guest_booking(seed))
    slots = client.get("/public/available-slots", params={
        "staff_id": seed.staff.id, "service_id": seed.haircut.id, "date": "2030-01-07",
    }).json()["slots"]
    assert "10:00" not in slots
    assert len(slots) == 15


def test_guest_booking_requires_contact_details(client, seed):
    resp = client.post("/public/book", json=guest_booking(seed, guest_phone=""))
    assert resp.status_code == 422


def test_guest_booking_on_a_closed_day(client, seed):
    resp = client.post("/public/book", json=guest_booking(seed, date="05.01.2030"))
    assert resp.status_code == 422
    assert resp.json()["reason"] == "closed"


# ---------------------------------------------------------------------------
# Salons and staff
# ---------------------------------------------------------------------------

def test_salon_available(client, seed):
    resp = client.get(f"/salons/{seed.salon.id}/available", params={"date": "2030-01-07"})
    assert resp.status_code == 200
    assert resp.json()["available"] is True

    resp = client.get(f"/salons/{seed.salon.id}/available", params={"date": "2030-01-06"})
    assert resp.json()["available"] is False

    resp = client.get(f"/salons/{seed.salon.id}/available", params={"date": "2030-01-07", "time": "16:30"})
    assert resp.json()["available"] is False

    resp = client.get("/salons/999/available", params={"date": "2030-01-07"})
    assert resp.status_code == 404


def test_available_salon_ids(client, seed, session):
    other = Salon(name="Weekend Cuts")
    session.add(other)
    session.commit()
    session.add(Staff(salon_id=other.id, name="Sam", working_hours={
        "saturday": {"start": "10:00", "end": "14:00", "is_working": True},
    }))
    session.commit()

    resp = client.get("/salons/available-ids", params={"date": "2030-01-07"})
    assert resp.json()["salon_ids"] == [seed.salon.id]

    resp = client.get("/salons/available-ids", params={"date": "05.01.2030"})
    assert resp.json()["salon_ids"] == [other.id]


def test_staff_availability(client, seed):
    resp = client.get(f"/staff/{seed.staff.id}/availability", params={
        "start_date": "2030-01-05", "end_date": "2030-01-07",
    })
    assert resp.status_code == 200
    days = resp.json()["days"]
    assert list(days) == ["2030-01-05", "2030-01-06", "2030-01-07"]
    assert days["2030-01-05"]["is_working"] is False
    assert days["2030-01-06"]["is_salon_closed"] is True
    assert days["2030-01-07"] == {
        "is_working": True,
        "is_on_vacation": False,
        "is_salon_closed": False,
        "is_available": True,
    }


def test_staff_availability_rejects_reversed_range(client, seed):
    resp = client.get(f"/staff/{seed.staff.id}/availability", params={
        "start_date": "2030-01-07", "end_date": "2030-01-05",
    })
    assert resp.status_code == 422


def test_salon_search_survives_a_broken_staff_record(client, seed, session):
    broken = Salon(name="Broken")
    session.add(broken)
    session.commit()
    session.add(Staff(salon_id=broken.id, name="Bo", working_hours={"mon": {"start": "09:00", "end": "17:00", "is_working": True}}))
    session.commit()

    resp = client.get("/salons/available-ids", params={"date": "07.01.2030"})
    assert resp.status_code == 200
    assert resp.json()["salon_ids"] == [seed.salon.id]


def test_inactive_salon_is_neither_available_nor_bookable(client, seed, session):
    seed.salon.is_active = False
    session.add(seed.salon)
    session.commit()

    resp = client.get(f"/salons/{seed.salon.id}/available", params={"date": "2030-01-07"})
    assert resp.json()["available"] is False

    resp = client.post("/public/book", json=guest_booking(seed))
    assert resp.status_code == 422
    assert resp.json()["reason"] == "closed"


# ---------------------------------------------------------------------------
# Authenticated appointments
# ---------------------------------------------------------------------------

def book_body(seed, **overrides):
    body = {"staff_id": seed.staff.id, "service_id": seed.haircut.id, "date": "2030-01-07", "time": "10:00"}
    body.update(overrides)
    return body


def test_booking_requires_a_token(client, seed):
    resp = client.post("/appointments", json=book_body(seed))
    assert resp.status_code == 401


def test_client_books_for_themselves(client, seed, auth_header):
    resp = client.post("/appointments", json=book_body(seed), headers=auth_header(seed.client_user))
    assert resp.status_code == 201
    data = resp.json()
    assert data["client_id"] == seed.client_user.id
    assert data["client_phone"] == "061111222"
    assert data["status"] == "pending"
    assert data["is_guest"] is False


def test_staff_enters_a_manual_booking(client, seed, auth_header):
    headers = auth_header(seed.staff_user)

    resp = client.post("/appointments", json=book_body(seed), headers=headers)
    assert resp.status_code == 422

    resp = client.post("/appointments", json=book_body(seed, client_name="Walk In"), headers=headers)
    assert resp.status_code == 201
    assert resp.json()["status"] == "confirmed"


def test_manual_booking_for_another_salon_is_forbidden(client, seed, session, auth_header):
    stranger = Salon(name="Elsewhere")
    session.add(stranger)
    session.commit()
    outsider = Staff(salon_id=stranger.id, name="Outsider", working_hours={})
    session.add(outsider)
    session.commit()

    resp = client.post(
        "/appointments",
        json=book_body(seed, staff_id=outsider.id, client_name="Walk In"),
        headers=auth_header(seed.owner),
    )
    assert resp.status_code == 403


def test_owner_reschedules(client, seed, auth_header):
    created = client.post("/public/book", json=guest_booking(seed)).json()

    resp = client.patch(
        f"/appointments/{created['id']}",
        json={"time": "14:00"},
        headers=auth_header(seed.owner),
    )
    assert resp.status_code == 200
    assert resp.json()["time"] == "14:00:00"

    resp = client.patch(
        f"/appointments/{created['id']}",
        json={"time": "14:00"},
        headers=auth_header(seed.client_user),
    )
    assert resp.status_code == 403


def test_client_cancels_own_appointment(client, seed, session, auth_header):
    created = client.post("/appointments", json=book_body(seed), headers=auth_header(seed.client_user)).json()

    resp = client.post(
        f"/appointments/{created['id']}/status",
        json={"status": "confirmed"},
        headers=auth_header(seed.client_user),
    )
    assert resp.status_code == 403

    resp = client.post(
        f"/appointments/{created['id']}/status",
        json={"status": "cancelled"},
        headers=auth_header(seed.other_client),
    )
    assert resp.status_code == 403

    resp = client.post(
        f"/appointments/{created['id']}/status",
        json={"status": "cancelled"},
        headers=auth_header(seed.client_user),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"

    stored = session.exec(select(Appointment).where(Appointment.id == created["id"])).one()
    assert stored.date == date(2030, 1, 7)
    assert stored.time == time(10, 0)


def test_illegal_status_change(client, seed, auth_header):
    created = client.post("/public/book", json=guest_booking(seed)).json()
    headers = auth_header(seed.owner)

    resp = client.post(f"/appointments/{created['id']}/status", json={"status": "completed"}, headers=headers)
    assert resp.status_code == 422

    resp = client.post(f"/appointments/{created['id']}/status", json={"status": "no_show"}, headers=headers)
    assert resp.status_code == 422

    resp = client.post(f"/appointments/{created['id']}/status", json={"status": "finished"}, headers=headers)
    assert resp.status_code == 422


def test_get_appointment(client, seed, auth_header):
    created = client.post("/appointments", json=book_body(seed), headers=auth_header(seed.client_user)).json()

    assert client.get(f"/appointments/{created['id']}", headers=auth_header(seed.client_user)).status_code == 200
    assert client.get(f"/appointments/{created['id']}", headers=auth_header(seed.staff_user)).status_code == 200
    assert client.get(f"/appointments/{created['id']}", headers=auth_header(seed.other_client)).status_code == 403
    assert client.get("/appointments/999", headers=auth_header(seed.owner)).status_code == 404
