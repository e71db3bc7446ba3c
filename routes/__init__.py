from flask import Blueprint, jsonify

from .auth import auth_bp
from .rooms import rooms_bp
from .booking import booking_bp
from .history import history_bp
from .upload import upload_bp

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return jsonify(status="ok"), 200
