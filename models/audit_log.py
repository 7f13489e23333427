from datetime import datetime

from models import db

class AuditLog(db.Model):
    """One row per change request transition or direct employee edit."""
    __tablename__ = "audit_logs"
    __table_args__ = (
        db.Index("ix_audit_logs_entity", "entity", "entity_id"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # actor; role is the stored primary role at the time of the action
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    role = db.Column(db.String(20), default="system")

    action = db.Column(db.String(64), nullable=False)
    entity = db.Column(db.String(64), nullable=False)
    entity_id = db.Column(db.Integer)

    # originating HTTP call, empty for CLI and service-level calls
    method = db.Column(db.String(10))
    path = db.Column(db.String(255))
    status_code = db.Column(db.Integer)
    request_id = db.Column(db.String(64))
    ip_address = db.Column(db.String(64))
    user_agent = db.Column(db.String(255))

    meta = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity}#{self.entity_id} by {self.user_id}>"
