import logging

from flask import Blueprint, jsonify, g
from sqlalchemy.exc import IntegrityError

from models import db
from models.room import Room
from utils.audit import log_event
from utils.auth_context import admin_required
from utils.validation import clean_text, is_hhmm, json_body

logger = logging.getLogger(__name__)

rooms_bp = Blueprint("rooms", __name__, url_prefix="/api/rooms")


def _validate_room_payload(data, partial=False):
    """
    Returns (fields, error). ``fields`` only holds keys present in ``data``
    unless ``partial`` is False, in which case ``name`` is required.
    """
    fields = {}

    if "name" in data or not partial:
        name = clean_text(data.get("name"), 120)
        if not name:
            return None, "name is required"
        fields["name"] = name

    if "capacity" in data:
        capacity = data.get("capacity")
        if capacity is None:
            capacity = 0
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
            return None, "capacity must be a non-negative integer"
        fields["capacity"] = capacity

    for key, max_len in (("location", 160), ("image_url", 500), ("observations", None)):
        if key in data:
            fields[key] = clean_text(data.get(key), max_len)

    if "equipment" in data:
        equipment = data.get("equipment") or []
        if not isinstance(equipment, list) or not all(isinstance(e, str) for e in equipment):
            return None, "equipment must be a list of strings"
        fields["equipment"] = [e.strip() for e in equipment if e.strip()]

    if "available_days" in data:
        days = data.get("available_days")
        if not isinstance(days, list) or not all(
            isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in days
        ):
            return None, "available_days must be a list of weekday numbers 0-6 (0=Sunday)"
        fields["available_days"] = days

    for key in ("available_start", "available_end"):
        if key in data:
            if not is_hhmm(data.get(key)):
                return None, f"{key} must be HH:MM"
            fields[key] = data[key]

    return fields, None


def _check_hours(room):
    if room.available_start >= room.available_end:
        return "available_start must be before available_end"
    return None


@rooms_bp.get("")
def list_rooms():
    # blocked rooms are listed too, so the admin can unblock them
    rooms = Room.query.order_by(Room.name.asc()).all()
    return jsonify([r.serialize for r in rooms]), 200


@rooms_bp.get("/<int:room_id>")
def get_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404
    return jsonify(room.serialize), 200


@rooms_bp.post("")
@admin_required
def create_room():
    data = json_body()
    fields, error = _validate_room_payload(data)
    if error:
        return jsonify(error=error), 400

    room = Room(**fields)
    room.available_start = fields.get("available_start", "07:00")
    room.available_end = fields.get("available_end", "20:00")
    if "available_days" not in fields:
        room.available_days = [1, 2, 3, 4, 5]
    error = _check_hours(room)
    if error:
        return jsonify(error=error), 400

    db.session.add(room)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Room could not be saved"), 409

    log_event("ROOM_CREATE", admin_id=g.admin.id, performed_by=g.admin.username, entity="room", entity_id=room.id)
    return jsonify(room.serialize), 201


@rooms_bp.put("/<int:room_id>")
@admin_required
def update_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    data = json_body()
    fields, error = _validate_room_payload(data, partial=True)
    if error:
        return jsonify(error=error), 400

    for key, value in fields.items():
        setattr(room, key, value)
    error = _check_hours(room)
    if error:
        db.session.rollback()
        return jsonify(error=error), 400

    db.session.commit()
    log_event(
        "ROOM_UPDATE",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="room",
        entity_id=room.id,
        metadata={"fields": sorted(fields)},
    )
    return jsonify(room.serialize), 200


@rooms_bp.put("/<int:room_id>/block")
@admin_required
def block_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    data = json_body()
    reason = clean_text(data.get("reason"), 255)

    room.is_blocked = True
    room.block_reason = reason
    db.session.commit()

    log_event(
        "ROOM_BLOCK",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="room",
        entity_id=room.id,
        metadata={"reason": reason},
    )
    return jsonify(room.serialize), 200


@rooms_bp.put("/<int:room_id>/unblock")
@admin_required
def unblock_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    room.is_blocked = False
    room.block_reason = None
    db.session.commit()

    log_event("ROOM_UNBLOCK", admin_id=g.admin.id, performed_by=g.admin.username, entity="room", entity_id=room.id)
    return jsonify(room.serialize), 200


@rooms_bp.delete("/<int:room_id>")
@admin_required
def delete_room(room_id: int):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify(error="Room not found"), 404

    name = room.name
    db.session.delete(room)
    db.session.commit()

    logger.info("room %s (%s) deleted with its bookings", room_id, name)
    log_event(
        "ROOM_DELETE",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="room",
        entity_id=room_id,
        metadata={"name": name},
    )
    return jsonify(message="Room deleted successfully"), 200
