"""
Field registry for employee records.

Every field a change request (or a privileged direct edit) can touch is
listed here once, with its public identifier, storage column, category and
value kind. Lookups never derive column names from user input.
"""
import json
import re
from datetime import date, datetime
from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional, Tuple

from models.change_request import ChangeRequestCategory
from models.employee import GENDERS, MARITAL_STATUSES, EMPLOYMENT_STATUSES

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

class FieldKind(Enum):
    TEXT = "text"
    DATE = "date"
    CHOICE = "choice"
    EMAIL = "email"
    JSON_LIST = "json_list"

class FieldSpec(NamedTuple):
    public_name: str
    column: str
    category: Optional[ChangeRequestCategory]
    kind: FieldKind = FieldKind.TEXT
    self_service: bool = True
    choices: Tuple[str, ...] = ()
    max_length: Optional[int] = None

    def coerce(self, value):
        """Turn an incoming value into what the column stores. Raises ValueError."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None

        if self.kind is FieldKind.DATE:
            if isinstance(value, date):
                return value
            try:
                return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
            except ValueError:
                raise ValueError(f"{self.public_name} must be a date in YYYY-MM-DD format")

        if self.kind is FieldKind.JSON_LIST:
            parsed = value
            if isinstance(value, str):
                try:
                    parsed = json.loads(value)
                except json.JSONDecodeError:
                    raise ValueError(f"{self.public_name} must be a JSON list")
            if not isinstance(parsed, list):
                raise ValueError(f"{self.public_name} must be a JSON list")
            return json.dumps(parsed)

        text = str(value).strip()
        if self.kind is FieldKind.CHOICE:
            text = text.lower()
            if text not in self.choices:
                raise ValueError(f"{self.public_name} must be one of: {', '.join(self.choices)}")
        elif self.kind is FieldKind.EMAIL:
            text = text.lower()
            if not EMAIL_RE.match(text):
                raise ValueError(f"{self.public_name} must be a valid email address")
        if self.max_length and len(text) > self.max_length:
            raise ValueError(f"{self.public_name} must be at most {self.max_length} characters")
        return text

    def to_text(self, stored) -> Optional[str]:
        """Render a stored value as text for audit snapshots."""
        if stored is None:
            return None
        if isinstance(stored, date):
            return stored.isoformat()
        return str(stored)

_PD = ChangeRequestCategory.PERSONAL_DETAILS
_ADDR = ChangeRequestCategory.ADDRESS
_CONTACT = ChangeRequestCategory.CONTACT

FIELDS: Tuple[FieldSpec, ...] = (
    # personal_details
    FieldSpec("dob", "dob", _PD, FieldKind.DATE),
    FieldSpec("gender", "gender", _PD, FieldKind.CHOICE, choices=GENDERS),
    FieldSpec("maritalStatus", "marital_status", _PD, FieldKind.CHOICE, choices=MARITAL_STATUSES),
    FieldSpec("bloodGroup", "blood_group", _PD, max_length=10),
    # address
    FieldSpec("street", "street", _ADDR, max_length=255),
    FieldSpec("city", "city", _ADDR, max_length=120),
    FieldSpec("state", "state", _ADDR, max_length=120),
    FieldSpec("country", "country", _ADDR, max_length=120),
    FieldSpec("zipCode", "zip_code", _ADDR, max_length=20),
    FieldSpec("commStreet", "comm_street", _ADDR, max_length=255),
    FieldSpec("commCity", "comm_city", _ADDR, max_length=120),
    FieldSpec("commState", "comm_state", _ADDR, max_length=120),
    FieldSpec("commCountry", "comm_country", _ADDR, max_length=120),
    FieldSpec("commZipCode", "comm_zip_code", _ADDR, max_length=20),
    # contact
    FieldSpec("personalEmail", "personal_email", _CONTACT, FieldKind.EMAIL, max_length=255),
    FieldSpec("workPhone", "work_phone", _CONTACT, max_length=50),
    # dependents / emergency contacts
    FieldSpec("dependentsData", "dependents_data", ChangeRequestCategory.DEPENDENTS, FieldKind.JSON_LIST),
    FieldSpec("emergencyContactsData", "emergency_contacts_data",
              ChangeRequestCategory.EMERGENCY_CONTACTS, FieldKind.JSON_LIST),
    # work details: HR/Admin only, never through self-service
    FieldSpec("jobTitle", "job_title", None, self_service=False, max_length=120),
    FieldSpec("department", "department", None, self_service=False, max_length=120),
    FieldSpec("location", "location", None, self_service=False, max_length=120),
    FieldSpec("employmentStatus", "employment_status", None, FieldKind.CHOICE,
              self_service=False, choices=EMPLOYMENT_STATUSES),
)

# Bank fields belong to a category but are not stored on the employee row yet.
BANK_DETAIL_FIELDS = ("bank_name", "account_number", "routing_number")

FIELDS_BY_NAME: Dict[str, FieldSpec] = {}
for _spec in FIELDS:
    FIELDS_BY_NAME[_spec.public_name] = _spec
    FIELDS_BY_NAME[_spec.column] = _spec

CATEGORY_FIELDS: Dict[ChangeRequestCategory, Tuple[str, ...]] = {
    category: tuple(s.column for s in FIELDS if s.category is category)
    for category in ChangeRequestCategory
}
CATEGORY_FIELDS[ChangeRequestCategory.BANK_DETAILS] = BANK_DETAIL_FIELDS

EMPLOYEE_EDITABLE_FIELDS: FrozenSet[str] = frozenset(s.column for s in FIELDS if s.self_service)

def resolve_field(name) -> Optional[FieldSpec]:
    if not isinstance(name, str):
        return None
    return FIELDS_BY_NAME.get(name.strip())

def resolve_editable_field(name) -> Optional[FieldSpec]:
    spec = resolve_field(name)
    if spec is None or spec.column not in EMPLOYEE_EDITABLE_FIELDS:
        return None
    return spec

def parse_category(raw) -> Optional[ChangeRequestCategory]:
    if isinstance(raw, ChangeRequestCategory):
        return raw
    try:
        return ChangeRequestCategory(str(raw).strip().lower())
    except ValueError:
        return None

def validate_registry(model):
    """Fail fast if a registered field has no matching column on the model."""
    columns = set(model.__table__.columns.keys())
    missing = sorted(s.column for s in FIELDS if s.column not in columns)
    if missing:
        raise RuntimeError(f"Field registry references unknown columns: {', '.join(missing)}")
    clashes = sorted(
        s.public_name for s in FIELDS
        if FIELDS_BY_NAME[s.public_name] is not s or FIELDS_BY_NAME[s.column] is not s
    )
    if clashes:
        raise RuntimeError(f"Field registry has clashing names: {', '.join(clashes)}")
