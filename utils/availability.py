"""Weekly availability grid for one room.

``build_week`` turns a room's weekly rules and the bookings of one week into
seven days of fixed-width slots, each tagged ``available``, ``occupied``,
``pending`` or ``blocked``. It reads nothing but its arguments: the caller
fetches the room and bookings and passes the current time as ``now``.

Times are zero-padded ``"HH:MM"`` strings, so they order correctly as
strings; they are still parsed to minutes so malformed values can be
detected and the affected day blocked instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Optional

AVAILABLE = "available"
OCCUPIED = "occupied"
PENDING = "pending"
BLOCKED = "blocked"

DAYS_PER_WEEK = 7

# booking statuses the grid can see
APPROVED_BOOKING = "approved"
PENDING_BOOKING = "pending"


@dataclass(frozen=True)
class Slot:
    time: str
    status: str
    booking_id: Optional[Any] = None
    duration: Optional[int] = None

    @property
    def serialize(self) -> dict[str, Any]:
        out: dict[str, Any] = {"time": self.time, "status": self.status}
        if self.booking_id is not None:
            out["bookingId"] = self.booking_id
        if self.duration is not None:
            out["duration"] = self.duration
        return out


@dataclass(frozen=True)
class DayGrid:
    date: date
    slots: list[Slot]

    @property
    def serialize(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "slots": [s.serialize for s in self.slots]}


def parse_hhmm(value) -> Optional[int]:
    """Minutes after midnight for ``"HH:MM"``, or None if malformed."""
    if not isinstance(value, str) or len(value) != 5 or value[2] != ":":
        return None
    hh, mm = value[:2], value[3:]
    if not (hh.isdigit() and mm.isdigit()):
        return None
    hours, minutes = int(hh), int(mm)
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def sunday_weekday(day: date) -> int:
    """Weekday index with 0=Sunday..6=Saturday."""
    return (day.weekday() + 1) % 7


def slot_times(day_start: str = "07:00", day_end: str = "20:00", step: int = 30) -> list[int]:
    """Slot start minutes from ``day_start`` up to and including ``day_end``."""
    first, last = parse_hhmm(day_start), parse_hhmm(day_end)
    if first is None or last is None or step <= 0:
        return []
    return list(range(first, last + 1, step))


def build_week(
    room,
    bookings: Iterable,
    week_start: date,
    now: datetime,
    day_start: str = "07:00",
    day_end: str = "20:00",
    step: int = 30,
) -> list[DayGrid]:
    """Build seven ``DayGrid`` entries starting at ``week_start``.

    ``room`` needs ``is_blocked``, ``available_days``, ``available_start`` and
    ``available_end``; each booking needs ``id``, ``date``, ``start_time``,
    ``end_time`` and ``status``. Bookings outside the week or with a status
    other than pending/approved are ignored.
    """
    times = slot_times(day_start, day_end, step)
    by_day: dict[date, list] = {}
    for booking in bookings:
        if booking.status in (PENDING_BOOKING, APPROVED_BOOKING):
            by_day.setdefault(booking.date, []).append(booking)

    open_days = _open_weekdays(room)
    room_start = parse_hhmm(room.available_start)
    room_end = parse_hhmm(room.available_end)
    room_usable = not room.is_blocked and room_start is not None and room_end is not None

    days = []
    for offset in range(DAYS_PER_WEEK):
        day = week_start + timedelta(days=offset)
        day_bookings = _parse_bookings(by_day.get(day, []))
        if not room_usable or sunday_weekday(day) not in open_days or day_bookings is None:
            days.append(DayGrid(day, [Slot(format_hhmm(t), BLOCKED) for t in times]))
            continue

        slots = []
        for t in times:
            if t < room_start or t >= room_end:
                slots.append(Slot(format_hhmm(t), BLOCKED))
            elif datetime.combine(day, time(t // 60, t % 60)) < now:
                slots.append(Slot(format_hhmm(t), BLOCKED))
            else:
                slots.append(_booked_slot(t, day_bookings, step))
        days.append(DayGrid(day, slots))
    return days


def _open_weekdays(room) -> set[int]:
    try:
        return {int(d) for d in room.available_days or ()}
    except (TypeError, ValueError):
        return set()


def _parse_bookings(bookings):
    # (start, end, booking) per booking; None when any time is malformed
    parsed = []
    for booking in bookings:
        start, end = parse_hhmm(booking.start_time), parse_hhmm(booking.end_time)
        if start is None or end is None:
            return None
        parsed.append((start, end, booking))
    return parsed


def _booked_slot(t: int, day_bookings, step: int) -> Slot:
    pending = None
    for start, end, booking in day_bookings:
        if not start <= t < end:
            continue
        if booking.status == APPROVED_BOOKING:
            return Slot(format_hhmm(t), OCCUPIED, booking.id, _round_up(end - start, step))
        if pending is None:
            pending = booking
    if pending is not None:
        return Slot(format_hhmm(t), PENDING, pending.id)
    return Slot(format_hhmm(t), AVAILABLE)


def _round_up(minutes: int, step: int) -> int:
    return -(-minutes // step) * step
