from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db
from utils.responses import ok, fail

stabilization_bp = Blueprint("stabilization", __name__)

@stabilization_bp.route("/api/health", methods=["GET"])
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        return fail("Database unavailable", 503, details=type(e).__name__)
    return ok("HRIS is healthy", data={"status": "up"})
