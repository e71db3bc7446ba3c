import logging
from datetime import datetime, timedelta
from typing import NamedTuple

from flask import request, current_app

from models import db
from models.ip_rate_limit import IpRateLimit

logger = logging.getLogger(__name__)


class RateDecision(NamedTuple):
    allowed: bool
    retry_after: int


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    # leftmost hop is the originating client
    ip = forwarded.split(",")[0].strip() or request.remote_addr
    return (ip or "unknown")[:64]


def _counter_for(ip: str, now: datetime) -> IpRateLimit:
    row = IpRateLimit.query.filter_by(ip=ip).first()
    if row is None:
        row = IpRateLimit(ip=ip, window_start=now, count=0)
        db.session.add(row)
    return row


def login_attempt(now=None) -> RateDecision:
    """Count one admin login attempt for the calling IP.

    Every attempt counts, successful or not. The window opens on the first
    attempt and the counter starts over once LOGIN_RATE_WINDOW_SECONDS have
    passed since then.
    """
    now = now or datetime.utcnow()
    window = timedelta(seconds=current_app.config.get("LOGIN_RATE_WINDOW_SECONDS", 60))
    limit = current_app.config.get("LOGIN_RATE_MAX_REQUESTS", 15)

    ip = client_ip()
    row = _counter_for(ip, now)
    if row.window_start + window <= now:
        row.window_start, row.count = now, 0
    row.count += 1
    db.session.commit()

    if row.count <= limit:
        return RateDecision(True, 0)

    remaining = row.window_start + window - now
    logger.warning("login rate limit hit for %s (%d attempts)", ip, row.count)
    return RateDecision(False, max(int(remaining.total_seconds()), 1))
