from datetime import date, datetime

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.booking import Booking
from models.room import Room
from utils.seed import upsert_admin

ADMIN_PASSWORD = "s3cret-pass"


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    admin, _ = upsert_admin("admin", "admin@example.com", ADMIN_PASSWORD)
    return admin


@pytest.fixture
def auth_headers(client, admin):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def room(app):
    room = Room(
        name="Board Room",
        capacity=10,
        location="Floor 1",
        equipment=["Projector"],
        available_days=[1, 2, 3, 4, 5],
        available_start="07:00",
        available_end="20:00",
    )
    db.session.add(room)
    db.session.commit()
    return room


@pytest.fixture
def make_booking(app):
    counter = {"n": 0}

    def _make(room, day: date, start: str, end: str, status="pending", created_at=None):
        counter["n"] += 1
        booking = Booking(
            room_id=room.id,
            full_name=f"Requester {counter['n']}",
            email=f"user{counter['n']}@example.com",
            date=day,
            start_time=start,
            end_time=end,
            status=status,
            cancellation_token=f"token-{counter['n']}",
            created_at=created_at or datetime.utcnow(),
        )
        db.session.add(booking)
        db.session.commit()
        return booking

    return _make
