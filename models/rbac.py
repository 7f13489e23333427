import logging
from enum import Enum

logger = logging.getLogger(__name__)

class Role(Enum):
    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    IT = "it"

class Permission(Enum):
    SUBMIT_CHANGE_REQUEST = "change_requests:submit"
    REVIEW_CHANGE_REQUEST = "change_requests:review"
    VIEW_ALL_EMPLOYEES = "employees:view_all"
    UPDATE_EMPLOYEE = "employees:update"
    DELETE_EMPLOYEE = "employees:delete"

# Most specific first. Used to pick one role out of several assignments.
ROLE_PRECEDENCE = (Role.ADMIN, Role.HR, Role.IT, Role.MANAGER, Role.EMPLOYEE)

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.HR})

_ROLES_BY_VALUE = {r.value: r for r in Role}

HR_DEPARTMENTS = {"hr", "human resources"}
IT_DEPARTMENTS = {"it", "information technology"}

class RBAC:
    @staticmethod
    def normalize_role(raw):
        """
        Map any input to a Role. Unknown or missing values become EMPLOYEE,
        so nothing is ever elevated by default.
        """
        if isinstance(raw, Role):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return Role.EMPLOYEE

        role = _ROLES_BY_VALUE.get(raw.strip().lower())
        if role is None:
            logger.warning("Unknown role %r, treating as 'employee'", raw)
            return Role.EMPLOYEE
        return role

    @staticmethod
    def is_known_role(raw):
        return isinstance(raw, Role) or (
            isinstance(raw, str) and raw.strip().lower() in _ROLES_BY_VALUE
        )

    @staticmethod
    def role_set(role, roles=None):
        """Primary role plus any secondary roles, normalized."""
        result = {RBAC.normalize_role(role)}
        if isinstance(roles, (list, tuple, set, frozenset)):
            result.update(RBAC.normalize_role(r) for r in roles)
        return result

    @staticmethod
    def effective_role(role, roles=None, context=None):
        """
        Resolve the single role used for an authorization decision.

        Without a context the recognized primary role wins. If the primary
        role is missing or unknown, the most specific recognized secondary
        role is used instead, and EMPLOYEE after that.

        With a context (the roles a module cares about) the most specific
        assigned role inside that context is returned, falling back to the
        context-free answer when none matches.
        """
        secondary = []
        if isinstance(roles, (list, tuple, set, frozenset)):
            secondary = [RBAC.normalize_role(r) for r in roles if RBAC.is_known_role(r)]

        if context:
            wanted = {RBAC.normalize_role(r) for r in context}
            assigned = set(secondary)
            if RBAC.is_known_role(role):
                assigned.add(RBAC.normalize_role(role))
            for candidate in ROLE_PRECEDENCE:
                if candidate in wanted and candidate in assigned:
                    return candidate

        if RBAC.is_known_role(role):
            return RBAC.normalize_role(role)

        for candidate in ROLE_PRECEDENCE:
            if candidate in secondary:
                return candidate
        return Role.EMPLOYEE

    @staticmethod
    def has_any_role(principal, allowed_roles):
        """True if the principal's primary or any secondary role is allowed."""
        if principal is None:
            return False
        # unrecognized entries never match; they must not collapse to EMPLOYEE
        allowed = {RBAC.normalize_role(r) for r in allowed_roles if RBAC.is_known_role(r)}
        held = RBAC.role_set(getattr(principal, "role", None), getattr(principal, "roles", None))
        return bool(held & allowed)

    @staticmethod
    def is_privileged(principal):
        return RBAC.has_any_role(principal, PRIVILEGED_ROLES)

    @staticmethod
    def infer_role_from_employee(department=None, direct_reports=0):
        dept = (department or "").strip().lower()
        if dept in HR_DEPARTMENTS:
            return Role.HR
        if direct_reports and direct_reports > 0:
            return Role.MANAGER
        if dept in IT_DEPARTMENTS:
            return Role.IT
        return Role.EMPLOYEE

    @staticmethod
    def get_all_permissions(role):
        permissions = {
            Role.ADMIN: [p for p in Permission],
            Role.HR: [
                Permission.SUBMIT_CHANGE_REQUEST,
                Permission.REVIEW_CHANGE_REQUEST,
                Permission.VIEW_ALL_EMPLOYEES,
                Permission.UPDATE_EMPLOYEE,
            ],
            Role.MANAGER: [Permission.SUBMIT_CHANGE_REQUEST],
            Role.EMPLOYEE: [Permission.SUBMIT_CHANGE_REQUEST],
            Role.IT: [Permission.SUBMIT_CHANGE_REQUEST],
        }
        return permissions.get(RBAC.normalize_role(role), [])

    @staticmethod
    def permissions_for(principal):
        held = RBAC.role_set(getattr(principal, "role", None), getattr(principal, "roles", None))
        codes = set()
        for role in held:
            codes.update(p.value for p in RBAC.get_all_permissions(role))
        return sorted(codes)
