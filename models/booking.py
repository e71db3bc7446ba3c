from datetime import datetime
from models.db import db


class BookingStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    ALL = (PENDING, APPROVED, REJECTED, CANCELLED)
    # statuses that show up on the weekly calendar
    VISIBLE = (PENDING, APPROVED)


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False, index=True)

    # requester (unauthenticated)
    full_name = db.Column(db.String(120), nullable=False)
    area = db.Column(db.String(120), nullable=True)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30), nullable=True)
    reason = db.Column(db.String(255), nullable=True)
    observations = db.Column(db.Text, nullable=True)

    date = db.Column(db.Date, nullable=False, index=True)
    start_time = db.Column(db.String(5), nullable=False)  # HH:MM
    end_time = db.Column(db.String(5), nullable=False)    # HH:MM, exclusive

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.PENDING, index=True)
    cancellation_token = db.Column(db.String(36), unique=True, nullable=False, index=True)

    approved_by = db.Column(db.String(120), nullable=True)
    approved_at = db.Column(db.DateTime, nullable=True)
    rejected_by = db.Column(db.String(120), nullable=True)
    rejected_at = db.Column(db.DateTime, nullable=True)
    rejection_reason = db.Column(db.String(255), nullable=True)
    cancelled_by = db.Column(db.String(120), nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)
    cancellation_reason = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    room = db.relationship("Room", back_populates="bookings")

    @property
    def serialize(self):
        return {
            "id": self.id,
            "room_id": self.room_id,
            "full_name": self.full_name,
            "area": self.area,
            "email": self.email,
            "phone": self.phone,
            "reason": self.reason,
            "observations": self.observations,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
            "approved_by": self.approved_by,
            "approved_at": _iso(self.approved_at),
            "rejected_by": self.rejected_by,
            "rejected_at": _iso(self.rejected_at),
            "rejection_reason": self.rejection_reason,
            "cancelled_by": self.cancelled_by,
            "cancelled_at": _iso(self.cancelled_at),
            "cancellation_reason": self.cancellation_reason,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


def _iso(value):
    return value.isoformat() if value else None
