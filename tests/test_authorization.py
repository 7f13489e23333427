from types import SimpleNamespace

import pytest

from models.rbac import Role, PRIVILEGED_ROLES
from utils.authorization import require_authenticated, require_role, require_own_record_or_role
from utils.errors import Unauthenticated, Forbidden


def principal(role="employee", roles=None, employee_id=None, active=True):
    return SimpleNamespace(id=7, role=role, roles=roles, employee_id=employee_id,
                           is_authenticated=True, is_active=active)


def test_require_authenticated_passes_principal_through():
    user = principal()
    assert require_authenticated(user) is user


@pytest.mark.parametrize("user", [None, principal(active=False)])
def test_require_authenticated_rejects(user):
    with pytest.raises(Unauthenticated):
        require_authenticated(user)


def test_require_role_allows_matching_role():
    require_role(principal("hr"), PRIVILEGED_ROLES)


def test_require_role_allows_secondary_role():
    require_role(principal("employee", ["admin"]), [Role.ADMIN])


def test_require_role_forbids_other_roles():
    with pytest.raises(Forbidden):
        require_role(principal("manager"), PRIVILEGED_ROLES)


def test_require_role_with_misspelled_role_forbids_employee():
    with pytest.raises(Forbidden):
        require_role(principal("employee"), ["Admn"])


def test_own_record_allowed():
    require_own_record_or_role(principal(employee_id=3), 3)


def test_privileged_allowed_for_any_record():
    require_own_record_or_role(principal("admin"), 99)
    require_own_record_or_role(principal("hr", employee_id=1), 99)


@pytest.mark.parametrize("role", ["employee", "manager", "it"])
def test_non_privileged_forbidden_for_other_records(role):
    with pytest.raises(Forbidden):
        require_own_record_or_role(principal(role, employee_id=3), 4)


def test_user_without_employee_link_is_not_treated_as_owner():
    with pytest.raises(Forbidden):
        require_own_record_or_role(principal(employee_id=None), None)


def test_secondary_privileged_role_reaches_other_records():
    require_own_record_or_role(principal("employee", ["hr"], employee_id=3), 4)
