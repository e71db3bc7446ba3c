import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app, request

logger = logging.getLogger(__name__)


def create_token(admin) -> str:
    """Signed bearer token for an admin; the raw token is never stored."""
    lifetime = current_app.config.get("JWT_EXPIRES_SECONDS", 7 * 24 * 60 * 60)
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(admin.id),
        "username": admin.username,
        "email": admin.email,
        "iat": now,
        "exp": now + timedelta(seconds=lifetime),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def decode_token(token: str):
    """Returns the payload, or None if the token is invalid or expired."""
    if not token:
        return None
    try:
        return jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("rejected expired admin token")
        return None
    except jwt.InvalidTokenError as exc:
        logger.warning("rejected invalid admin token: %s", exc)
        return None


def get_token_from_request():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
