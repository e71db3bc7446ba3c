from .db import db
from .admin import Admin
from .audit_log import AuditLog
from .ip_rate_limit import IpRateLimit
from .room import Room
from .booking import Booking, BookingStatus
