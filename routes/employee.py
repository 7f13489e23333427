import logging

from flask import Blueprint, request, g
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.rbac import Role, PRIVILEGED_ROLES
from models.user import User
from change_requests.audit_logger import log_action
from change_requests.fields import CATEGORY_FIELDS, EMPLOYEE_EDITABLE_FIELDS, resolve_field
from utils import employee_store
from utils.authorization import require_own_record_or_role
from utils.decorators import token_required, role_required
from utils.errors import StorageFailure, ValidationError
from utils.responses import ok
from utils.validators import json_body

logger = logging.getLogger(__name__)

employee_bp = Blueprint('employee', __name__)

def serialize(emp):
    fields = employee_store.snapshot(emp)
    return {
        "id": emp.id,
        "employeeCode": emp.employee_code,
        "workEmail": emp.work_email,
        "fullName": emp.full_name,
        "firstName": emp.first_name,
        "lastName": emp.last_name,
        "managerId": emp.manager_id,
        "fields": {resolve_field(column).public_name: value for column, value in fields.items()},
        "selfServiceFields": sorted(resolve_field(c).public_name for c in EMPLOYEE_EDITABLE_FIELDS),
        "categories": {cat.value: list(cols) for cat, cols in CATEGORY_FIELDS.items()},
        "updatedAt": emp.updated_at.isoformat() if emp.updated_at else None,
    }

@employee_bp.route('/employees/<int:employee_id>', methods=['GET'])
@token_required
def get_employee(employee_id):
    require_own_record_or_role(g.user, employee_id)
    return ok(employee=serialize(employee_store.get_employee(employee_id)))

@employee_bp.route('/employees/<int:employee_id>', methods=['PATCH'])
@token_required
@role_required(PRIVILEGED_ROLES)
def update_employee(employee_id):
    """Direct edit by HR/Admin; no change request involved."""
    data = json_body(request)
    if not data:
        raise ValidationError("No fields to update")

    unknown = [name for name in data if resolve_field(name) is None]
    if unknown:
        raise ValidationError("Unknown or read-only fields", fields=unknown)

    try:
        for name, value in data.items():
            try:
                employee_store.write(employee_id, name, value)
            except ValueError as e:
                raise ValidationError(str(e), field=name)
        db.session.commit()
    except ValidationError:
        db.session.rollback()
        raise
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Updating employee %s failed", employee_id)
        raise StorageFailure("Employee could not be updated")

    log_action("EMPLOYEE_UPDATED", "Employee", employee_id, meta={"fields": sorted(data)})
    return ok("Employee updated", employee=serialize(employee_store.get_employee(employee_id)))

@employee_bp.route('/employees/<int:employee_id>', methods=['DELETE'])
@token_required
@role_required([Role.ADMIN])
def delete_employee(employee_id):
    emp = employee_store.get_employee(employee_id)

    try:
        # unlink accounts and reportees, change requests go with the cascade
        User.query.filter_by(employee_id=emp.id).update({"employee_id": None})
        for reportee in list(emp.reportees):
            reportee.manager_id = None
        db.session.delete(emp)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Deleting employee %s failed", employee_id)
        raise StorageFailure("Employee could not be deleted")

    logger.info("User %s deleted employee %s", g.user.id, employee_id)
    log_action("EMPLOYEE_DELETED", "Employee", employee_id)
    return ok("Employee deleted")
