import logging

from models.rbac import RBAC, PRIVILEGED_ROLES
from utils.errors import Unauthenticated, Forbidden

logger = logging.getLogger(__name__)

def require_authenticated(principal):
    if principal is None or not getattr(principal, "is_authenticated", False):
        raise Unauthenticated()
    if not getattr(principal, "is_active", True):
        raise Unauthenticated("User not found or inactive")
    return principal

def require_role(principal, allowed):
    require_authenticated(principal)
    if not RBAC.has_any_role(principal, allowed):
        logger.warning("User %s denied: needs one of %s", principal.id, _names(allowed))
        raise Forbidden()

def require_own_record_or_role(principal, target_employee_id, allowed=PRIVILEGED_ROLES):
    """
    Self OR one of the allowed roles. Employee records use admin/hr.

    The role branch checks every assigned role (primary and secondary), not
    the single effective role, so a secondary "hr" assignment is enough.
    """
    require_authenticated(principal)
    own_id = getattr(principal, "employee_id", None)
    if own_id is not None and own_id == target_employee_id:
        return
    if RBAC.has_any_role(principal, allowed):
        return
    logger.warning("User %s denied access to employee %s", principal.id, target_employee_id)
    raise Forbidden("You can only access your own profile")

def _names(roles):
    return sorted(RBAC.normalize_role(r).value for r in roles)
