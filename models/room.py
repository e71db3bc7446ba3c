import json
from datetime import datetime
from models.db import db

class Room(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    capacity = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(160), nullable=True)
    equipment_json = db.Column(db.Text, nullable=True)       # JSON list of strings
    image_url = db.Column(db.String(500), nullable=True)
    observations = db.Column(db.Text, nullable=True)

    # weekday indices, 0=Sunday..6=Saturday, stored as a JSON list
    available_days_json = db.Column(db.Text, nullable=False, default="[1, 2, 3, 4, 5]")
    available_start = db.Column(db.String(5), nullable=False, default="07:00")
    available_end = db.Column(db.String(5), nullable=False, default="20:00")

    is_blocked = db.Column(db.Boolean, default=False, nullable=False)
    block_reason = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    bookings = db.relationship("Booking", back_populates="room", cascade="all, delete-orphan")

    @property
    def equipment(self):
        return _load_list(self.equipment_json)

    @equipment.setter
    def equipment(self, value):
        self.equipment_json = json.dumps(list(value or []))

    @property
    def available_days(self):
        # unreadable JSON reads as "no days", which blocks the whole week
        return _load_list(self.available_days_json)

    @available_days.setter
    def available_days(self, value):
        self.available_days_json = json.dumps(sorted(set(value or [])))

    @property
    def serialize(self):
        return {
            "id": self.id,
            "name": self.name,
            "capacity": self.capacity,
            "location": self.location,
            "equipment": self.equipment,
            "image_url": self.image_url,
            "observations": self.observations,
            "available_days": self.available_days,
            "available_start": self.available_start,
            "available_end": self.available_end,
            "is_blocked": self.is_blocked,
            "block_reason": self.block_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def _load_list(raw):
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return value if isinstance(value, list) else []
