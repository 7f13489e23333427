import logging

from flask import request, g, has_request_context
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.audit_log import AuditLog
from utils.middleware import get_request_id

logger = logging.getLogger(__name__)

def log_action(action, entity, entity_id=None, status_code=200, meta=None, user=None):
    """
    Creates an audit log row for a change request transition.
    Runs after the transition committed; a failure here never undoes it.
    """
    in_request = has_request_context()
    if user is None and in_request:
        user = g.get('user')

    try:
        log = AuditLog(
            user_id=getattr(user, "id", None),
            role=getattr(user, "role", "system") if user else "system",

            action=action,
            entity=entity,
            entity_id=entity_id,

            method=request.method if in_request else None,
            path=request.path if in_request else None,
            status_code=status_code,
            request_id=get_request_id() if in_request else None,

            ip_address=request.remote_addr if in_request else None,
            user_agent=request.headers.get("User-Agent") if in_request else None,
            meta=meta
        )
        db.session.add(log)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to write audit log for %s %s#%s", action, entity, entity_id)
