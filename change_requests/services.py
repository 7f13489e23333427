import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.change_request import ChangeRequest, ChangeRequestStatus
from models.rbac import RBAC, PRIVILEGED_ROLES
from change_requests.fields import (
    EMPLOYEE_EDITABLE_FIELDS, FieldKind, parse_category, resolve_editable_field,
)
from change_requests.audit_logger import log_action
from utils import employee_store
from utils.authorization import require_authenticated, require_role, require_own_record_or_role
from utils.errors import (
    HRISError, ValidationError, NotFound, ConflictOrAlreadyProcessed, StorageFailure,
)

logger = logging.getLogger(__name__)

SELF_SERVICE_HINT = "Contact HR for changes to this field"
NOT_PENDING = "Pending change request not found"
MAX_BULK_APPROVE = 500

def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database commit failed")
        raise StorageFailure()

def _editable_spec(field_name):
    spec = resolve_editable_field(field_name)
    if spec is None:
        raise ValidationError(
            "This field cannot be changed via self-service",
            field=field_name,
            hint=SELF_SERVICE_HINT,
        )
    return spec

def _resolve_category(spec, category):
    """Category comes from the registry; a supplied one has to agree with it."""
    if category in (None, ""):
        return spec.category
    parsed = parse_category(category)
    if parsed is None:
        raise ValidationError("Invalid category", field="category")
    if parsed is not spec.category:
        raise ValidationError(
            f"{spec.public_name} belongs to category '{spec.category.value}'",
            field=spec.public_name,
            category=parsed.value,
        )
    return spec.category

def _value_as_text(spec, value) -> str:
    """The value as the column will hold it, rendered back to text."""
    if value is None:
        raise ValidationError("newValue is required", field=spec.public_name)
    if spec.kind is FieldKind.JSON_LIST and not isinstance(value, str):
        value = json.dumps(value)
    elif isinstance(value, (dict, list, bool)):
        raise ValidationError(f"{spec.public_name} must be a plain value", field=spec.public_name)
    try:
        text = spec.to_text(spec.coerce(str(value)))
    except ValueError as e:
        raise ValidationError(str(e), field=spec.public_name)
    if text is None:
        raise ValidationError(f"{spec.public_name} cannot be blank", field=spec.public_name)
    return text

def _new_request(principal, employee, spec, category, text) -> ChangeRequest:
    return ChangeRequest(
        requester_id=principal.id,
        employee_id=employee.id,
        category=category,
        field_name=spec.column,
        old_value=employee_store.read(employee.id, spec.column),
        new_value=text,
        status=ChangeRequestStatus.PENDING,
    )

# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

def submit(principal, employee_id: int, field_name: str, new_value: Any,
           category: Optional[str] = None) -> ChangeRequest:
    require_own_record_or_role(principal, employee_id)

    spec = _editable_spec(field_name)
    resolved = _resolve_category(spec, category)
    text = _value_as_text(spec, new_value)
    employee = employee_store.get_employee(employee_id)

    change_request = _new_request(principal, employee, spec, resolved, text)
    db.session.add(change_request)
    _commit()

    logger.info("User %s submitted change request %s (%s on employee %s)",
                principal.id, change_request.id, spec.column, employee.id)
    log_action("CHANGE_REQUEST_SUBMITTED", "ChangeRequest", change_request.id, 201,
               meta={"field": spec.column, "employee_id": employee.id}, user=principal)
    return change_request

def bulk_submit(principal, employee_id: int, category: Optional[str],
                changes: Dict[str, Any]) -> List[ChangeRequest]:
    """
    One pending request per field. The batch is all-or-nothing: a single
    field that is not self-service editable rejects every field.
    """
    require_own_record_or_role(principal, employee_id)

    parsed_category = parse_category(category) if category not in (None, "") else None
    if category not in (None, "") and parsed_category is None:
        raise ValidationError("Invalid category", field="category")
    if not isinstance(changes, dict) or not changes:
        raise ValidationError("changes must be a non-empty object", field="changes")

    not_editable, invalid = [], {}
    accepted: List[Tuple[Any, str]] = []
    seen = set()
    for name, value in changes.items():
        spec = resolve_editable_field(name)
        if spec is None:
            not_editable.append(name)
            continue
        if spec.column in seen:
            invalid[name] = "Field given more than once"
            continue
        seen.add(spec.column)
        try:
            _resolve_category(spec, parsed_category)
            accepted.append((spec, _value_as_text(spec, value)))
        except ValidationError as e:
            invalid[name] = e.message

    if not_editable or invalid:
        payload = {"fields": not_editable, "invalid": invalid}
        if not_editable:
            payload["hint"] = SELF_SERVICE_HINT
        raise ValidationError("Some fields cannot be changed via self-service", **payload)

    employee = employee_store.get_employee(employee_id)
    created = [_new_request(principal, employee, spec, spec.category, text) for spec, text in accepted]
    db.session.add_all(created)
    _commit()

    logger.info("User %s submitted %d change request(s) for employee %s",
                principal.id, len(created), employee.id)
    log_action("CHANGE_REQUEST_BULK_SUBMITTED", "Employee", employee.id, 201,
               meta={"request_ids": [c.id for c in created]}, user=principal)
    return created

# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

def _claim(request_id: int, status: ChangeRequestStatus, reviewer_id: int, notes: Optional[str]):
    """Conditional status update. Only a pending row can move, and only once."""
    now = datetime.utcnow()
    stmt = (
        update(ChangeRequest)
        .where(ChangeRequest.id == request_id, ChangeRequest.status == ChangeRequestStatus.PENDING)
        .values(status=status, reviewed_by=reviewer_id, reviewed_at=now,
                review_notes=notes, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return db.session.execute(stmt).rowcount

def _clean_notes(notes) -> Optional[str]:
    if notes is None:
        return None
    if not isinstance(notes, str):
        raise ValidationError("reviewNotes must be text", field="reviewNotes")
    return notes.strip() or None

def _pending_request(request_id: int) -> ChangeRequest:
    try:
        change_request = db.session.get(ChangeRequest, request_id)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Loading change request %s failed", request_id)
        raise StorageFailure()
    if change_request is None or change_request.status is not ChangeRequestStatus.PENDING:
        raise NotFound(NOT_PENDING, resource="change_request")
    return change_request

def approve(principal, request_id: int, review_notes: Optional[str] = None) -> ChangeRequest:
    require_role(principal, PRIVILEGED_ROLES)
    notes = _clean_notes(review_notes)

    change_request = _pending_request(request_id)
    employee_id = change_request.employee_id
    field_name = change_request.field_name
    new_value = change_request.new_value

    try:
        if _claim(request_id, ChangeRequestStatus.APPROVED, principal.id, notes) != 1:
            raise ConflictOrAlreadyProcessed()
        employee_store.write(employee_id, field_name, new_value, allowed=EMPLOYEE_EDITABLE_FIELDS)
        db.session.commit()
    except HRISError:
        db.session.rollback()
        raise
    except (ValueError, SQLAlchemyError):
        db.session.rollback()
        logger.exception("Applying change request %s failed", request_id)
        raise StorageFailure()

    change_request = db.session.get(ChangeRequest, request_id)
    logger.info("User %s approved change request %s (%s on employee %s)",
                principal.id, request_id, field_name, employee_id)
    log_action("CHANGE_REQUEST_APPROVED", "ChangeRequest", request_id,
               meta={"field": field_name, "employee_id": employee_id}, user=principal)
    return change_request

def reject(principal, request_id: int, review_notes: Optional[str]) -> ChangeRequest:
    require_role(principal, PRIVILEGED_ROLES)
    notes = _clean_notes(review_notes)
    if not notes:
        raise ValidationError("Rejection reason is required", field="reviewNotes")

    try:
        claimed = _claim(request_id, ChangeRequestStatus.REJECTED, principal.id, notes)
        if claimed != 1:
            db.session.rollback()
            raise NotFound(NOT_PENDING, resource="change_request")
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Rejecting change request %s failed", request_id)
        raise StorageFailure("Change request could not be updated")

    change_request = db.session.get(ChangeRequest, request_id)
    logger.info("User %s rejected change request %s", principal.id, request_id)
    log_action("CHANGE_REQUEST_REJECTED", "ChangeRequest", request_id,
               meta={"notes": notes}, user=principal)
    return change_request

def _failure_reason(error: HRISError) -> str:
    if isinstance(error, ConflictOrAlreadyProcessed):
        return "Not found or already processed"
    if isinstance(error, NotFound):
        if error.payload.get("resource") == "change_request":
            return "Not found or already processed"
        return "Employee record not found"
    return "Processing error"

def bulk_approve(principal, request_ids: List[Any], review_notes: Optional[str] = None) -> Dict[str, list]:
    """Approve each id on its own; one failure never stops the rest."""
    require_role(principal, PRIVILEGED_ROLES)
    if not isinstance(request_ids, list) or not request_ids:
        raise ValidationError("requestIds array is required", field="requestIds")
    if len(request_ids) > MAX_BULK_APPROVE:
        raise ValidationError(f"At most {MAX_BULK_APPROVE} requests per batch", field="requestIds")
    _clean_notes(review_notes)

    approved, failed = [], []
    for raw_id in request_ids:
        if isinstance(raw_id, bool) or not str(raw_id).isdigit():
            failed.append({"id": raw_id, "reason": "Invalid id"})
            continue
        request_id = int(raw_id)
        try:
            approve(principal, request_id, review_notes)
            approved.append(request_id)
        except HRISError as e:
            failed.append({"id": request_id, "reason": _failure_reason(e)})
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Bulk approve of change request %s failed", request_id)
            failed.append({"id": request_id, "reason": "Processing error"})

    logger.info("User %s bulk approved %d, %d failed", principal.id, len(approved), len(failed))
    return {"approved": approved, "failed": failed}

# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _page_limit(limit: Optional[int]) -> int:
    default = current_app.config.get("CHANGE_REQUESTS_DEFAULT_LIMIT", 100)
    maximum = current_app.config.get("CHANGE_REQUESTS_MAX_LIMIT", 500)
    if limit is None:
        return default
    if limit < 1:
        raise ValidationError("limit must be >= 1", field="limit")
    return min(limit, maximum)

def list_requests(principal, status: Optional[str] = None, employee_id: Optional[int] = None,
                  limit: Optional[int] = None, offset: int = 0) -> Tuple[List[ChangeRequest], int, int]:
    """
    Privileged users see every request; everyone else only what they submitted,
    whatever filters they pass. Newest first.
    """
    require_authenticated(principal)
    limit = _page_limit(limit)
    if offset is None:
        offset = 0
    if offset < 0:
        raise ValidationError("offset must be >= 0", field="offset")

    q = ChangeRequest.query
    if not RBAC.is_privileged(principal):
        q = q.filter(ChangeRequest.requester_id == principal.id)

    if status:
        try:
            q = q.filter(ChangeRequest.status == ChangeRequestStatus(str(status).lower()))
        except ValueError:
            raise ValidationError("Invalid status", field="status")
    if employee_id is not None:
        q = q.filter(ChangeRequest.employee_id == employee_id)

    total = q.count()
    items = (
        q.order_by(ChangeRequest.created_at.desc(), ChangeRequest.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return items, total, limit

def count_pending(principal) -> int:
    require_role(principal, PRIVILEGED_ROLES)
    return ChangeRequest.query.filter(ChangeRequest.status == ChangeRequestStatus.PENDING).count()

def get_request(principal, request_id: int) -> ChangeRequest:
    require_authenticated(principal)
    change_request = db.session.get(ChangeRequest, request_id)
    if change_request is None:
        raise NotFound("Change request not found")
    if not RBAC.is_privileged(principal) and change_request.requester_id != principal.id:
        raise NotFound("Change request not found")
    return change_request
