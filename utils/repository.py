from datetime import timedelta

from flask import current_app

from models.booking import Booking, BookingStatus
from models.room import Room

EXTENSION_KEY = "booking_repository"


class BookingRepository:
    """Room and booking reads used by the weekly calendar.

    Built once by the app factory around the SQLAlchemy session and handed
    to request handlers through ``get_repository``.
    """

    def __init__(self, session):
        self.session = session

    def get_room(self, room_id):
        return self.session.get(Room, room_id)

    def bookings_for_week(self, room_id, week_start, statuses=BookingStatus.VISIBLE):
        week_end = week_start + timedelta(days=7)
        return (
            self.session.query(Booking)
            .filter(
                Booking.room_id == room_id,
                Booking.date >= week_start,
                Booking.date < week_end,
                Booking.status.in_(statuses),
            )
            .order_by(Booking.date.asc(), Booking.start_time.asc())
            .all()
        )


def init_repository(app, session):
    app.extensions[EXTENSION_KEY] = BookingRepository(session)


def get_repository() -> BookingRepository:
    return current_app.extensions[EXTENSION_KEY]
