"""
Narrow read/write access to employee records, keyed by id and field name.

Writes go through one setter per registered field; nothing outside the
registry can be written.
"""
from models import db
from models.employee import Employee
from change_requests.fields import FIELDS, resolve_field
from utils.errors import NotFound, ValidationError

def _make_setter(spec):
    def setter(employee, value):
        setattr(employee, spec.column, spec.coerce(value))
    return setter

def _make_getter(spec):
    def getter(employee):
        return spec.to_text(getattr(employee, spec.column))
    return getter

SETTERS = {spec.column: _make_setter(spec) for spec in FIELDS}
GETTERS = {spec.column: _make_getter(spec) for spec in FIELDS}

def get_employee(employee_id):
    employee = db.session.get(Employee, employee_id) if employee_id is not None else None
    if employee is None:
        raise NotFound("Employee not found")
    return employee

def _spec_for(field_name, allowed=None):
    spec = resolve_field(field_name)
    if spec is None or (allowed is not None and spec.column not in allowed):
        raise ValidationError("Unknown or read-only field", field=field_name)
    return spec

def read(employee_id, field_name):
    spec = _spec_for(field_name)
    return GETTERS[spec.column](get_employee(employee_id))

def write(employee_id, field_name, value, allowed=None):
    """
    Set one field on the employee row inside the current transaction.
    The caller commits. Bad values raise ValueError from the field's coercion.
    """
    spec = _spec_for(field_name, allowed)
    employee = get_employee(employee_id)
    SETTERS[spec.column](employee, value)
    db.session.flush()
    return employee

def snapshot(employee, fields=None):
    """Text rendering of registered fields, as stored in change request audit columns."""
    columns = fields if fields is not None else GETTERS.keys()
    return {column: GETTERS[column](employee) for column in columns}
