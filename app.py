import logging

import click
from flask import Flask, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError

from config import Config
from models import db
from routes import health_bp, auth_bp, rooms_bp, booking_bp, history_bp, upload_bp
from utils.auth_context import load_current_admin
from utils.repository import init_repository

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(rooms_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(history_bp)
    app.register_blueprint(upload_bp)

    # Database init
    db.init_app(app)
    init_repository(app, db.session)

    # Migrations
    Migrate(app, db)

    @app.before_request
    def _load_admin():
        load_current_admin()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_error_handlers(app)
    register_cli(app)

    logger.info("app created with %s", config_class.__name__)
    return app


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(_err):
        return jsonify(error="Not found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return jsonify(error="Method not allowed"), 405

    @app.errorhandler(413)
    def too_large(_err):
        limit_mb = (app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return jsonify(error=f"File too large. Maximum size is {limit_mb} MB"), 413

    @app.errorhandler(SQLAlchemyError)
    def database_error(err):
        db.session.rollback()
        logger.exception("database error: %s", err)
        return jsonify(error="Internal server error"), 500


#-------------------------
from utils.seed import seed_admin, seed_rooms, upsert_admin


def register_cli(app):
    @app.cli.command("seed")
    def seed():
        """Create the default admin and sample rooms (idempotent)."""
        admin = seed_admin()
        if admin:
            click.echo(f"Admin created: {admin.username}")
        else:
            click.echo("Admin already exists")
        for room in seed_rooms():
            click.echo(f"Room created: {room.name}")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.argument("email")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_admin(username, email, password):
        """Create an admin, or reset an existing admin's password."""
        admin, created = upsert_admin(username.strip(), email, password)
        if created:
            click.echo(f"Admin {admin.username} created")
        else:
            click.echo(f"Password reset for {admin.username}")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
