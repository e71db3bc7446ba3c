import json
from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("admins.id"), nullable=True)  # null for requester actions
    performed_by = db.Column(db.String(120), nullable=True)  # admin username or requester name
    action = db.Column(db.String(80), nullable=False)  # e.g. LOGIN_FAIL, BOOKING_CREATE
    entity = db.Column(db.String(80), nullable=True)   # e.g. booking, room
    entity_id = db.Column(db.String(80), nullable=True, index=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def serialize(self):
        return {
            "id": self.id,
            "admin_id": self.admin_id,
            "performed_by": self.performed_by,
            "action": self.action,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "ip": self.ip,
            "metadata": json.loads(self.metadata_json) if self.metadata_json else None,
            "timestamp": self.timestamp.isoformat(),
        }
