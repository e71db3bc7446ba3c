from datetime import date

from models import db
from models.audit_log import AuditLog
from models.booking import Booking
from models.room import Room


ROOM_PAYLOAD = {
    "name": "Focus Room",
    "capacity": 4,
    "location": "Floor 2",
    "equipment": ["Screen", "Whiteboard"],
    "available_days": [1, 2, 3],
    "available_start": "08:00",
    "available_end": "17:00",
}


def test__list_rooms_includes_blocked(client, room):
    blocked = Room(name="Annex", capacity=2, is_blocked=True, available_days=[1])
    db.session.add(blocked)
    db.session.commit()

    resp = client.get("/api/rooms")
    assert resp.status_code == 200
    names = [r["name"] for r in resp.get_json()]
    assert names == ["Annex", "Board Room"]


def test__get_room(client, room):
    resp = client.get(f"/api/rooms/{room.id}")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["available_days"] == [1, 2, 3, 4, 5]
    assert body["equipment"] == ["Projector"]
    assert client.get("/api/rooms/999").status_code == 404


def test__create_room(client, auth_headers):
    resp = client.post("/api/rooms", json=ROOM_PAYLOAD, headers=auth_headers)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["name"] == "Focus Room"
    assert body["available_days"] == [1, 2, 3]
    assert body["is_blocked"] is False
    assert AuditLog.query.filter_by(action="ROOM_CREATE", entity_id=str(body["id"])).count() == 1


def test__create_room_defaults(client, auth_headers):
    resp = client.post("/api/rooms", json={"name": "Plain"}, headers=auth_headers)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["available_days"] == [1, 2, 3, 4, 5]
    assert body["available_start"] == "07:00"
    assert body["available_end"] == "20:00"


def test__create_room_validation(client, auth_headers):
    bad_payloads = [
        {},
        {"name": "X", "available_days": [7]},
        {"name": "X", "available_start": "8:00"},
        {"name": "X", "available_start": "18:00", "available_end": "08:00"},
        {"name": "X", "capacity": -1},
        {"name": "X", "equipment": "Projector"},
    ]
    for payload in bad_payloads:
        resp = client.post("/api/rooms", json=payload, headers=auth_headers)
        assert resp.status_code == 400, payload


def test__update_room(client, auth_headers, room):
    resp = client.put(
        f"/api/rooms/{room.id}",
        json={"capacity": 12, "available_end": "18:30"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["capacity"] == 12
    assert body["available_end"] == "18:30"
    assert body["name"] == "Board Room"


def test__update_room_rejects_inverted_hours(client, auth_headers, room):
    resp = client.put(f"/api/rooms/{room.id}", json={"available_end": "06:00"}, headers=auth_headers)
    assert resp.status_code == 400
    assert client.get(f"/api/rooms/{room.id}").get_json()["available_end"] == "20:00"


def test__block_and_unblock(client, auth_headers, room):
    resp = client.put(f"/api/rooms/{room.id}/block", json={"reason": "Renovation"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["is_blocked"] is True
    assert resp.get_json()["block_reason"] == "Renovation"

    resp = client.put(f"/api/rooms/{room.id}/unblock", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["is_blocked"] is False
    assert resp.get_json()["block_reason"] is None


def test__delete_room_removes_bookings(client, auth_headers, room, make_booking):
    make_booking(room, date(2030, 1, 7), "10:00", "11:00")
    room_id = room.id

    resp = client.delete(f"/api/rooms/{room_id}", headers=auth_headers)
    assert resp.status_code == 200
    assert Room.query.filter_by(id=room_id).first() is None
    assert Booking.query.filter_by(room_id=room_id).count() == 0
    assert client.delete(f"/api/rooms/{room_id}", headers=auth_headers).status_code == 404
