import logging
from datetime import datetime

from flask import Blueprint, request, g

from models import db
from models.user import User
from models.rbac import RBAC
from utils.auth_utils import generate_token
from utils.decorators import token_required
from utils.errors import Unauthenticated
from utils.responses import ok
from utils.validators import json_body, require_fields

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)

def serialize_user(user):
    return {
        "id": user.id,
        "email": user.email,
        "role": RBAC.normalize_role(user.role).value,
        "roles": [RBAC.normalize_role(r).value for r in (user.roles or [])],
        "effectiveRole": user.effective_role.value,
        "employeeId": user.employee_id,
        "isActive": user.is_active,
        "permissions": RBAC.permissions_for(user),
    }

# -------------------------
# LOGIN
# -------------------------
@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body(request)
    require_fields(data, ["email", "password"])

    email = str(data["email"]).strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(data["password"]):
        logger.info("Failed login for %s", email)
        raise Unauthenticated("Invalid email or password")
    if not user.is_active:
        raise Unauthenticated("Account is inactive")

    user.last_login_at = datetime.utcnow()
    db.session.commit()

    return ok("Login successful", token=generate_token(user), user=serialize_user(user))

# -------------------------
# CURRENT USER
# -------------------------
@auth_bp.route("/me", methods=["GET"])
@token_required
def me():
    return ok(user=serialize_user(g.user))
