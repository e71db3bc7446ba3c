from datetime import date, datetime

import pytest

from models.audit_log import AuditLog
from models.booking import Booking

MONDAY = date(2030, 1, 7)


@pytest.fixture
def frozen_now(monkeypatch):
    def _freeze(value):
        monkeypatch.setattr("utils.clock.now", lambda: value)
    _freeze(datetime(2030, 1, 1, 8, 0))
    return _freeze


def booking_payload(room, **overrides):
    data = {
        "room_id": room.id,
        "full_name": "Ana Perez",
        "area": "Finance",
        "email": "Ana@Example.com",
        "phone": "555-0100",
        "reason": "Quarterly review",
        "date": "2030-01-08",
        "start_time": "10:00",
        "end_time": "11:00",
    }
    data.update(overrides)
    return data


def test__create_booking(client, room):
    resp = client.post("/api/bookings", json=booking_payload(room))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    assert body["email"] == "ana@example.com"
    assert body["room"]["id"] == room.id
    assert body["cancellation_token"]

    log = AuditLog.query.filter_by(action="BOOKING_CREATE").one()
    assert log.performed_by == "Ana Perez"
    assert log.entity_id == str(body["id"])


@pytest.mark.parametrize(
    "overrides",
    [
        {"full_name": "  "},
        {"email": "not-an-email"},
        {"date": "08/01/2030"},
        {"start_time": "10am"},
        {"start_time": "11:00", "end_time": "10:30"},
        {"room_id": "abc"},
        {"full_name": 123},
        {"email": ["ana@example.com"]},
        {"date": 20300108},
    ],
)
def test__create_booking_validation(client, room, overrides):
    resp = client.post("/api/bookings", json=booking_payload(room, **overrides))
    assert resp.status_code == 400


def test__create_booking_unknown_room(client, room):
    resp = client.post("/api/bookings", json=booking_payload(room, room_id=999))
    assert resp.status_code == 404


def test__create_booking_allows_overlap(client, room, make_booking):
    # overlapping requests are accepted; the admin resolves them on review
    make_booking(room, date(2030, 1, 8), "10:00", "11:00", status="approved")
    resp = client.post("/api/bookings", json=booking_payload(room))
    assert resp.status_code == 201


def test__token_is_not_listed(client, room, make_booking):
    make_booking(room, MONDAY, "10:00", "11:00")
    rows = client.get("/api/bookings").get_json()
    assert len(rows) == 1
    assert "cancellation_token" not in rows[0]


def test__list_bookings_filters(client, room, make_booking):
    make_booking(room, MONDAY, "10:00", "11:00", status="approved")
    make_booking(room, date(2030, 1, 9), "10:00", "11:00")
    make_booking(room, date(2030, 2, 1), "10:00", "11:00")

    assert len(client.get("/api/bookings?status=approved").get_json()) == 1
    assert len(client.get(f"/api/bookings?roomId={room.id}").get_json()) == 3
    resp = client.get("/api/bookings?startDate=2030-01-08&endDate=2030-01-31")
    assert [b["date"] for b in resp.get_json()] == ["2030-01-09"]
    assert client.get("/api/bookings?status=bogus").status_code == 400


def test__get_booking_with_audit(client, room):
    created = client.post("/api/bookings", json=booking_payload(room)).get_json()
    resp = client.get(f"/api/bookings/{created['id']}")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [log["action"] for log in body["audit_logs"]] == ["BOOKING_CREATE"]
    assert client.get("/api/bookings/999").status_code == 404


def test__approve_reject_cancel(client, auth_headers, room, make_booking):
    first = make_booking(room, MONDAY, "10:00", "11:00")
    second = make_booking(room, MONDAY, "12:00", "13:00")
    first_id, second_id = first.id, second.id

    resp = client.put(f"/api/bookings/{first_id}/approve", headers=auth_headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "approved"
    assert body["approved_by"] == "admin"
    assert body["approved_at"]

    # approving twice is not a valid transition
    assert client.put(f"/api/bookings/{first_id}/approve", headers=auth_headers).status_code == 400

    resp = client.put(
        f"/api/bookings/{second_id}/reject",
        json={"rejection_reason": "Room needed for training"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "rejected"
    assert resp.get_json()["rejection_reason"] == "Room needed for training"

    resp = client.put(f"/api/bookings/{first_id}/cancel", json={"reason": "Holiday"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "cancelled"
    assert resp.get_json()["cancelled_by"] == "admin"

    assert client.put(f"/api/bookings/{second_id}/cancel", headers=auth_headers).status_code == 400

    actions = {row.action for row in AuditLog.query.all()}
    assert {"BOOKING_APPROVE", "BOOKING_REJECT", "BOOKING_CANCEL"} <= actions


def test__review_requires_admin(client, room, make_booking):
    booking = make_booking(room, MONDAY, "10:00", "11:00")
    assert client.put(f"/api/bookings/{booking.id}/approve").status_code == 401


def test__user_cancel_with_token(client, room):
    created = client.post("/api/bookings", json=booking_payload(room)).get_json()
    url = f"/api/bookings/{created['id']}/cancel-user"

    assert client.post(url, json={"cancellation_token": "wrong"}).status_code == 404
    assert client.post(url, json={}).status_code == 404

    resp = client.post(url, json={"cancellation_token": created["cancellation_token"]})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "cancelled"
    assert resp.get_json()["cancelled_by"] == "Ana Perez"

    resp = client.post(url, json={"cancellation_token": created["cancellation_token"]})
    assert resp.status_code == 400


def test__verify_cancellation_token(client, room):
    created = client.post("/api/bookings", json=booking_payload(room)).get_json()
    resp = client.get(f"/api/bookings/cancel/{created['cancellation_token']}")
    assert resp.status_code == 200
    assert resp.get_json()["valid"] is True
    assert resp.get_json()["booking"]["id"] == created["id"]
    assert client.get("/api/bookings/cancel/unknown").status_code == 404


def test__calendar_requires_params(client, room):
    assert client.get("/api/bookings/calendar").status_code == 400
    assert client.get(f"/api/bookings/calendar?roomId={room.id}").status_code == 400
    assert client.get(f"/api/bookings/calendar?roomId={room.id}&weekStart=soon").status_code == 400
    assert client.get("/api/bookings/calendar?roomId=999&weekStart=2030-01-07").status_code == 404


def test__calendar_week(client, room, make_booking, frozen_now):
    approved = make_booking(room, MONDAY, "10:00", "11:00", status="approved")
    pending = make_booking(room, MONDAY, "14:00", "14:30")
    make_booking(room, MONDAY, "16:00", "17:00", status="rejected")
    make_booking(room, date(2030, 1, 14), "10:00", "11:00", status="approved")  # next week
    approved_id, pending_id = approved.id, pending.id

    resp = client.get(f"/api/bookings/calendar?roomId={room.id}&weekStart=2030-01-07")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["roomId"] == room.id
    assert body["weekStart"] == "2030-01-07"
    assert [d["date"] for d in body["days"]] == [f"2030-01-{d:02d}" for d in range(7, 14)]

    monday = {s["time"]: s for s in body["days"][0]["slots"]}
    assert monday["10:00"] == {"time": "10:00", "status": "occupied", "bookingId": approved_id, "duration": 60}
    assert monday["10:30"]["bookingId"] == approved_id
    assert monday["14:00"] == {"time": "14:00", "status": "pending", "bookingId": pending_id}
    assert monday["16:00"]["status"] == "available"
    assert monday["20:00"]["status"] == "blocked"

    # Saturday and Sunday are closed
    assert all(s["status"] == "blocked" for d in body["days"][5:] for s in d["slots"])


def test__calendar_blocks_past_slots(client, room, frozen_now):
    frozen_now(datetime(2030, 1, 8, 9, 45))
    body = client.get(f"/api/bookings/calendar?roomId={room.id}&weekStart=2030-01-07").get_json()
    assert all(s["status"] == "blocked" for s in body["days"][0]["slots"])
    tuesday = {s["time"]: s["status"] for s in body["days"][1]["slots"]}
    assert tuesday["09:30"] == "blocked"
    assert tuesday["10:00"] == "available"
    assert all(s["status"] != "blocked" or s["time"] == "20:00" for s in body["days"][2]["slots"])


def test__calendar_blocked_room(client, auth_headers, room, frozen_now):
    client.put(f"/api/rooms/{room.id}/block", json={"reason": "Maintenance"}, headers=auth_headers)
    body = client.get(f"/api/bookings/calendar?roomId={room.id}&weekStart=2030-01-07").get_json()
    assert all(s["status"] == "blocked" for d in body["days"] for s in d["slots"])


def test__calendar_reflects_review(client, auth_headers, room, frozen_now):
    created = client.post("/api/bookings", json=booking_payload(room)).get_json()
    url = f"/api/bookings/calendar?roomId={room.id}&weekStart=2030-01-07"

    tuesday = {s["time"]: s for s in client.get(url).get_json()["days"][1]["slots"]}
    assert tuesday["10:00"]["status"] == "pending"

    client.put(f"/api/bookings/{created['id']}/approve", headers=auth_headers)
    tuesday = {s["time"]: s for s in client.get(url).get_json()["days"][1]["slots"]}
    assert tuesday["10:00"]["status"] == "occupied"

    client.put(f"/api/bookings/{created['id']}/cancel", headers=auth_headers)
    tuesday = {s["time"]: s for s in client.get(url).get_json()["days"][1]["slots"]}
    assert tuesday["10:00"]["status"] == "available"
    assert Booking.query.count() == 1


def test__create_booking_rejects_non_object_body(client, room):
    resp = client.post("/api/bookings", json=[booking_payload(room)])
    assert resp.status_code == 400
    assert Booking.query.count() == 0


def test__user_cancel_rejects_non_string_token(client, room):
    created = client.post("/api/bookings", json=booking_payload(room)).get_json()
    resp = client.post(f"/api/bookings/{created['id']}/cancel-user", json={"cancellation_token": {"$ne": ""}})
    assert resp.status_code == 404
