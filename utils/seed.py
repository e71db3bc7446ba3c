from flask import current_app

from models import db
from models.admin import Admin
from models.room import Room
from security.password import hash_password

DEFAULT_ROOMS = [
    {
        "name": "Main Conference Room",
        "capacity": 20,
        "location": "Floor 1, Tower A",
        "equipment": ["Projector", "Screen", "Video Conference", "Whiteboard"],
        "observations": "Large room for general meetings",
        "available_days": [1, 2, 3, 4, 5],
        "available_start": "07:00",
        "available_end": "20:00",
    },
    {
        "name": "Small Meeting Room",
        "capacity": 6,
        "location": "Floor 1, Tower A",
        "equipment": ["Projector", "Whiteboard"],
        "observations": "Good for quick meetings",
        "available_days": [1, 2, 3, 4, 5],
        "available_start": "07:00",
        "available_end": "20:00",
    },
    {
        "name": "Training Room",
        "capacity": 30,
        "location": "Floor 2, Tower A",
        "equipment": ["Projector", "Screen", "Computers", "Air Conditioning"],
        "observations": "Fully equipped for training sessions",
        "available_days": [1, 2, 3, 4, 5],
        "available_start": "08:00",
        "available_end": "18:00",
    },
    {
        "name": "Executive Room",
        "capacity": 8,
        "location": "Floor 3, Tower A",
        "equipment": ["Projector", "Video Conference", "Minibar"],
        "observations": "Executive room with premium services",
        "available_days": [1, 2, 3, 4, 5],
        "available_start": "07:00",
        "available_end": "21:00",
    },
]


def upsert_admin(username: str, email: str, password: str):
    """Creates the admin, or resets the password of an existing one. Returns (admin, created)."""
    admin = Admin.query.filter_by(username=username).first()
    created = admin is None
    if created:
        admin = Admin(username=username, email=email.strip().lower(), is_active=True)
        db.session.add(admin)
    admin.password_hash = hash_password(password)
    db.session.commit()
    return admin, created


def seed_admin():
    cfg = current_app.config
    if Admin.query.filter_by(username=cfg["ADMIN_USERNAME"]).first():
        return None
    admin, _ = upsert_admin(cfg["ADMIN_USERNAME"], cfg["ADMIN_EMAIL"], cfg["ADMIN_PASSWORD"])
    return admin


def seed_rooms():
    existing = {r.name for r in Room.query.all()}
    created = []
    for fields in DEFAULT_ROOMS:
        if fields["name"] not in existing:
            room = Room(**fields)
            db.session.add(room)
            created.append(room)
    db.session.commit()
    return created
