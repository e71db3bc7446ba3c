import os
import uuid

from flask import Blueprint, request, jsonify, current_app, g, send_from_directory, url_for
from werkzeug.utils import secure_filename

from utils.audit import log_event
from utils.auth_context import admin_required

upload_bp = Blueprint("upload", __name__)


def _upload_dir() -> str:
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    return folder


def _is_safe_name(filename: str) -> bool:
    return bool(filename) and ".." not in filename and "/" not in filename and "\\" not in filename


@upload_bp.post("/api/upload")
@admin_required
def upload_image():
    file = request.files.get("image")
    if file is None or not file.filename:
        return jsonify(error="No file provided"), 400

    allowed = current_app.config.get("ALLOWED_IMAGE_TYPES", {})
    if file.mimetype not in allowed:
        return jsonify(error="File type not allowed. Only JPEG, PNG, GIF and WebP images are accepted."), 400

    original_name = secure_filename(file.filename) or "image"
    filename = f"{uuid.uuid4()}{allowed[file.mimetype]}"
    path = os.path.join(_upload_dir(), filename)
    file.save(path)
    size = os.path.getsize(path)

    log_event(
        "UPLOAD_CREATE",
        admin_id=g.admin.id,
        performed_by=g.admin.username,
        entity="upload",
        entity_id=filename,
        metadata={"original_name": original_name, "size": size},
    )
    return jsonify(
        url=url_for("upload.serve_upload", filename=filename, _external=True),
        filename=filename,
        originalName=file.filename,
        size=size,
        mimetype=file.mimetype,
    ), 200


@upload_bp.delete("/api/upload/<filename>")
@admin_required
def delete_image(filename: str):
    if not _is_safe_name(filename):
        return jsonify(error="Invalid filename"), 400

    path = os.path.join(_upload_dir(), filename)
    if not os.path.isfile(path):
        return jsonify(error="File not found"), 404

    os.remove(path)
    log_event("UPLOAD_DELETE", admin_id=g.admin.id, performed_by=g.admin.username, entity="upload", entity_id=filename)
    return jsonify(message="File deleted"), 200


@upload_bp.get("/uploads/<path:filename>")
def serve_upload(filename: str):
    return send_from_directory(_upload_dir(), filename)
