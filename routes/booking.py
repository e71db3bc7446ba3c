import logging
import uuid
from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, g

from models import db
from models.booking import Booking, BookingStatus
from models.room import Room
from utils import clock
from utils.audit import log_event, entity_logs
from utils.auth_context import admin_required
from utils.availability import build_week
from utils.repository import get_repository
from utils.validation import clean_text, is_hhmm, is_valid_email, json_body, parse_date

logger = logging.getLogger(__name__)

booking_bp = Blueprint("booking", __name__, url_prefix="/api/bookings")

REQUIRED_FIELDS = ("room_id", "full_name", "email", "date", "start_time", "end_time")


def booking_out(booking: Booking, with_room=True, with_logs=False):
    out = booking.serialize
    if with_room:
        out["room"] = booking.room.serialize if booking.room else None
    if with_logs:
        out["audit_logs"] = [row.serialize for row in entity_logs("booking", booking.id)]
    return out


# ---------- PUBLIC: list bookings ----------
@booking_bp.get("")
def list_bookings():
    room_id = request.args.get("roomId", type=int)
    status = request.args.get("status")
    start_date = request.args.get("startDate")
    end_date = request.args.get("endDate")

    q = Booking.query
    if room_id:
        q = q.filter(Booking.room_id == room_id)
    if status:
        if status not in BookingStatus.ALL:
            return jsonify(error="Invalid status"), 400
        q = q.filter(Booking.status == status)
    if start_date:
        start = parse_date(start_date)
        if not start:
            return jsonify(error="Invalid startDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.date >= start)
    if end_date:
        end = parse_date(end_date)
        if not end:
            return jsonify(error="Invalid endDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.date <= end)

    rows = q.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify([booking_out(b) for b in rows]), 200


# ---------- PUBLIC: weekly calendar for one room ----------
@booking_bp.get("/calendar")
def calendar():
    room_arg = request.args.get("roomId")
    week_arg = request.args.get("weekStart")
    if not room_arg or not week_arg:
        return jsonify(error="roomId and weekStart are required"), 400

    room_id = request.args.get("roomId", type=int)
    if room_id is None:
        return jsonify(error="Invalid roomId"), 400

    week_start = parse_date(week_arg)
    if week_start is None:
        return jsonify(error="Invalid weekStart. Use YYYY-MM-DD"), 400

    repo = get_repository()
    room = repo.get_room(room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    bookings = repo.bookings_for_week(room.id, week_start)
    days = build_week(
        room,
        bookings,
        week_start,
        clock.now(),
        day_start=current_app.config.get("CALENDAR_DAY_START", "07:00"),
        day_end=current_app.config.get("CALENDAR_DAY_END", "20:00"),
        step=current_app.config.get("CALENDAR_SLOT_MINUTES", 30),
    )
    return jsonify(
        roomId=room.id,
        weekStart=week_start.isoformat(),
        days=[d.serialize for d in days],
    ), 200


# ---------- PUBLIC: request a booking ----------
@booking_bp.post("")
def create_booking():
    data = json_body()

    missing = [f for f in REQUIRED_FIELDS if _blank(data.get(f), text=f != "room_id")]
    if missing:
        return jsonify(error="Missing required fields", missing=missing), 400

    if not is_valid_email(data.get("email")):
        return jsonify(error="Invalid email"), 400

    day = parse_date(data.get("date"))
    if day is None:
        return jsonify(error="Invalid date. Use YYYY-MM-DD"), 400

    start_time = data.get("start_time")
    end_time = data.get("end_time")
    if not is_hhmm(start_time) or not is_hhmm(end_time):
        return jsonify(error="start_time and end_time must be HH:MM"), 400
    if end_time <= start_time:
        return jsonify(error="end_time must be after start_time"), 400

    try:
        room_id = int(data.get("room_id"))
    except (TypeError, ValueError):
        return jsonify(error="Invalid room_id"), 400
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    # TODO: reject overlaps with approved bookings of the same room and date.
    booking = Booking(
        room_id=room.id,
        full_name=clean_text(data.get("full_name"), 120),
        area=clean_text(data.get("area"), 120),
        email=data["email"].strip().lower(),
        phone=clean_text(data.get("phone"), 30),
        reason=clean_text(data.get("reason"), 255),
        observations=clean_text(data.get("observations")),
        date=day,
        start_time=start_time,
        end_time=end_time,
        status=BookingStatus.PENDING,
        cancellation_token=str(uuid.uuid4()),
    )
    db.session.add(booking)
    db.session.commit()

    log_event(
        "BOOKING_CREATE",
        performed_by=booking.full_name,
        entity="booking",
        entity_id=booking.id,
        metadata={"email": booking.email, "area": booking.area, "room_id": room.id},
    )
    out = booking_out(booking)
    # only the requester ever sees the token
    out["cancellation_token"] = booking.cancellation_token
    return jsonify(out), 201


# ---------- PUBLIC: verify a cancellation token ----------
@booking_bp.get("/cancel/<token>")
def verify_cancellation_token(token: str):
    booking = Booking.query.filter_by(cancellation_token=token).first()
    if not booking:
        return jsonify(error="Invalid cancellation token"), 404
    return jsonify(valid=True, booking=booking_out(booking)), 200


@booking_bp.get("/<int:booking_id>")
def get_booking(booking_id: int):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    return jsonify(booking_out(booking, with_logs=True)), 200


# ---------- ADMIN: review ----------
@booking_bp.put("/<int:booking_id>/approve")
@admin_required
def approve_booking(booking_id: int):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    if booking.status != BookingStatus.PENDING:
        return jsonify(error=f"Only pending bookings can be approved (status: {booking.status})"), 400

    booking.status = BookingStatus.APPROVED
    booking.approved_by = g.admin.username
    booking.approved_at = datetime.utcnow()
    db.session.commit()

    log_event(
        "BOOKING_APPROVE",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="booking",
        entity_id=booking.id,
        metadata={"email": booking.email},
    )
    return jsonify(booking_out(booking)), 200


@booking_bp.put("/<int:booking_id>/reject")
@admin_required
def reject_booking(booking_id: int):
    data = json_body()
    reason = clean_text(data.get("rejection_reason"), 255)

    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    if booking.status != BookingStatus.PENDING:
        return jsonify(error=f"Only pending bookings can be rejected (status: {booking.status})"), 400

    booking.status = BookingStatus.REJECTED
    booking.rejected_by = g.admin.username
    booking.rejected_at = datetime.utcnow()
    booking.rejection_reason = reason
    db.session.commit()

    log_event(
        "BOOKING_REJECT",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="booking",
        entity_id=booking.id,
        metadata={"email": booking.email, "reason": reason},
    )
    return jsonify(booking_out(booking)), 200


@booking_bp.put("/<int:booking_id>/cancel")
@admin_required
def admin_cancel_booking(booking_id: int):
    data = json_body()
    reason = clean_text(data.get("reason"), 255) or "Admin cancellation"

    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    if booking.status not in BookingStatus.VISIBLE:
        return jsonify(error="Booking cannot be cancelled"), 400

    _cancel(booking, g.admin.username, reason)
    log_event(
        "BOOKING_CANCEL",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="booking",
        entity_id=booking.id,
        metadata={"email": booking.email, "reason": reason},
    )
    return jsonify(booking_out(booking)), 200


# ---------- PUBLIC: requester cancels with their token ----------
@booking_bp.post("/<int:booking_id>/cancel-user")
def user_cancel_booking(booking_id: int):
    data = json_body()
    token = data.get("cancellation_token")

    booking = None
    if isinstance(token, str) and token:
        booking = Booking.query.filter_by(id=booking_id, cancellation_token=token).first()
    if not booking:
        return jsonify(error="Invalid cancellation token"), 404
    if booking.status not in BookingStatus.VISIBLE:
        return jsonify(error="Booking cannot be cancelled"), 400

    _cancel(booking, booking.full_name, "User cancellation")
    log_event(
        "BOOKING_CANCEL_USER",
        performed_by=booking.full_name,
        entity="booking",
        entity_id=booking.id,
        metadata={"email": booking.email, "reason": "User cancellation"},
    )
    return jsonify(booking_out(booking)), 200


def _blank(value, text=True):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # text fields must arrive as strings
    return text


def _cancel(booking, cancelled_by, reason):
    booking.status = BookingStatus.CANCELLED
    booking.cancelled_by = cancelled_by
    booking.cancelled_at = datetime.utcnow()
    booking.cancellation_reason = reason
    db.session.commit()
    logger.info("booking %s cancelled by %s", booking.id, cancelled_by)
