import logging
from datetime import datetime

from flask import Blueprint, jsonify
from sqlalchemy import or_

from models import db
from models.admin import Admin
from security.password import verify_password
from security.rate_limit import login_attempt
from security.token import create_token
from utils.audit import log_event
from utils.auth_context import admin_from_token
from utils.validation import json_body

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login():
    data = json_body()
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str):
        return jsonify(error="Username and password are required"), 400
    username = username.strip()
    if not username or not password:
        return jsonify(error="Username and password are required"), 400

    allowed, retry_after = login_attempt()
    if not allowed:
        log_event("LOGIN_RATE_LIMIT", performed_by=username, metadata={"retry_after": retry_after})
        return jsonify(error="Too many login requests. Slow down.", retry_after_seconds=retry_after), 429

    # username or email
    admin = Admin.query.filter(
        or_(Admin.username == username, Admin.email == username.lower())
    ).first()

    if not admin or not verify_password(password, admin.password_hash):
        logger.warning("failed admin login for %r", username)
        log_event(
            "LOGIN_FAIL",
            admin_id=admin.id if admin else None,
            performed_by=username,
            entity="admin",
            entity_id=admin.id if admin else None,
        )
        return jsonify(error="Invalid credentials"), 401

    if not admin.is_active:
        log_event("LOGIN_FAIL_DISABLED", admin_id=admin.id, performed_by=admin.username, entity="admin", entity_id=admin.id)
        return jsonify(error="Account is disabled"), 401

    admin.last_login_at = datetime.utcnow()
    db.session.commit()

    token = create_token(admin)
    log_event("LOGIN_SUCCESS", admin_id=admin.id, performed_by=admin.username, entity="admin", entity_id=admin.id)
    return jsonify(token=token, admin=admin.serialize), 200


@auth_bp.post("/verify")
def verify():
    data = json_body()
    token = data.get("token")
    if not isinstance(token, str) or not token:
        return jsonify(error="Token is required"), 400

    admin = admin_from_token(token)
    if admin is None:
        return jsonify(error="Invalid or expired token"), 401

    return jsonify(valid=True, admin=admin.serialize), 200
