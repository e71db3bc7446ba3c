import math
from datetime import datetime, timedelta

from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import extract, func

from models import db
from models.audit_log import AuditLog
from models.booking import Booking, BookingStatus
from models.room import Room
from routes.booking import booking_out
from utils.auth_context import admin_required
from utils.validation import parse_date

history_bp = Blueprint("history", __name__, url_prefix="/api/history")

STATS_MONTHS = 6


def _positive_int(name, default):
    value = request.args.get(name, type=int)
    if value is None or value < 1:
        return default
    return value


@history_bp.get("")
@admin_required
def list_history():
    max_limit = current_app.config.get("HISTORY_MAX_LIMIT", 200)
    page = _positive_int("page", 1)
    limit = min(_positive_int("limit", current_app.config.get("HISTORY_DEFAULT_LIMIT", 50)), max_limit)

    q = Booking.query
    status = request.args.get("status")
    if status:
        if status not in BookingStatus.ALL:
            return jsonify(error="Invalid status"), 400
        q = q.filter(Booking.status == status)

    room_id = request.args.get("roomId", type=int)
    if room_id:
        q = q.filter(Booking.room_id == room_id)

    # date range applies to when the request was made
    start_date = request.args.get("startDate")
    if start_date:
        start = parse_date(start_date)
        if not start:
            return jsonify(error="Invalid startDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.created_at >= datetime(start.year, start.month, start.day))
    end_date = request.args.get("endDate")
    if end_date:
        end = parse_date(end_date)
        if not end:
            return jsonify(error="Invalid endDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.created_at < datetime(end.year, end.month, end.day) + timedelta(days=1))

    total = q.count()
    rows = (
        q.order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return jsonify(
        data=[booking_out(b) for b in rows],
        pagination={
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    ), 200


@history_bp.get("/<int:booking_id>")
@admin_required
def booking_audit(booking_id: int):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    return jsonify(booking_out(booking, with_logs=True)), 200


@history_bp.get("/room/<int:room_id>")
@admin_required
def room_audit(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    q = Booking.query.filter(Booking.room_id == room.id)
    start_date = request.args.get("startDate")
    if start_date:
        start = parse_date(start_date)
        if not start:
            return jsonify(error="Invalid startDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.date >= start)
    end_date = request.args.get("endDate")
    if end_date:
        end = parse_date(end_date)
        if not end:
            return jsonify(error="Invalid endDate. Use YYYY-MM-DD"), 400
        q = q.filter(Booking.date <= end)

    rows = q.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify([booking_out(b, with_room=False, with_logs=True) for b in rows]), 200


def _months_ago(now: datetime, months: int) -> datetime:
    # first day of the month ``months`` back from ``now``
    index = now.year * 12 + (now.month - 1) - months
    return datetime(index // 12, index % 12 + 1, 1)


@history_bp.get("/stats/summary")
@admin_required
def stats_summary():
    counts = dict(
        db.session.query(Booking.status, func.count(Booking.id))
        .group_by(Booking.status)
        .all()
    )
    summary = {"total": sum(counts.values())}
    for status in BookingStatus.ALL:
        summary[status] = counts.get(status, 0)

    by_room = (
        db.session.query(Booking.room_id, Room.name, func.count(Booking.id))
        .outerjoin(Room, Room.id == Booking.room_id)
        .group_by(Booking.room_id, Room.name)
        .order_by(Booking.room_id.asc())
        .all()
    )

    year = extract("year", Booking.date)
    month = extract("month", Booking.date)
    by_month = (
        db.session.query(year, month, func.count(Booking.id))
        .filter(Booking.created_at >= _months_ago(datetime.utcnow(), STATS_MONTHS))
        .group_by(year, month)
        .order_by(year, month)
        .all()
    )

    return jsonify(
        summary=summary,
        byRoom=[
            {"roomId": room_id, "roomName": name or "Unknown", "count": count}
            for room_id, name, count in by_room
        ],
        byMonth=[
            {"year": int(y), "month": int(m), "count": count}
            for y, m, count in by_month
        ],
    ), 200


@history_bp.get("/audit-logs")
@admin_required
def list_audit_logs():
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    action = request.args.get("action")
    entity = request.args.get("entity")

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)
    if entity:
        q = q.filter(AuditLog.entity == entity)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([r.serialize for r in rows]), 200
