from functools import wraps
from flask import g, jsonify
from models import db
from models.admin import Admin
from security.token import decode_token, get_token_from_request


def admin_from_token(token):
    payload = decode_token(token)
    if not payload:
        return None
    try:
        admin_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    admin = db.session.get(Admin, admin_id)
    if not admin or not admin.is_active:
        return None
    return admin


def load_current_admin():
    token = get_token_from_request()
    g.admin = admin_from_token(token) if token else None


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "admin", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
