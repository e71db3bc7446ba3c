from datetime import date

from flask import request

from utils.availability import parse_hhmm


def parse_date(value):
    """``YYYY-MM-DD`` to a date, or None."""
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def is_hhmm(value) -> bool:
    return parse_hhmm(value) is not None


def clean_text(value, max_len=None):
    text = (value or "").strip() if isinstance(value, str) else ""
    if max_len is not None:
        text = text[:max_len]
    return text or None


def is_valid_email(email) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, malformed, a list) is empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
