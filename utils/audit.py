import json
import logging

from flask import request

from models import db
from models.audit_log import AuditLog
from security.rate_limit import client_ip

logger = logging.getLogger(__name__)


def log_event(action: str, admin_id=None, performed_by=None, entity=None, entity_id=None, metadata=None):
    ip = client_ip()
    user_agent = request.headers.get("User-Agent", "")

    row = AuditLog(
        admin_id=admin_id,
        performed_by=performed_by[:120] if performed_by else None,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=ip,
        user_agent=user_agent[:255] if user_agent else None,
        metadata_json=json.dumps(metadata) if metadata else None
    )
    db.session.add(row)
    db.session.commit()
    logger.info("audit %s %s=%s by %s", action, entity or "-", entity_id or "-", performed_by or "anonymous")


def entity_logs(entity: str, entity_id):
    return (
        AuditLog.query
        .filter_by(entity=entity, entity_id=str(entity_id))
        .order_by(AuditLog.timestamp.asc(), AuditLog.id.asc())
        .all()
    )
