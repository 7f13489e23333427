from flask import request, g

from . import change_requests_bp
from . import services
from models.rbac import PRIVILEGED_ROLES
from utils.decorators import token_required, role_required
from utils.errors import ValidationError
from utils.responses import ok
from utils.validators import json_body, parse_int, require_fields

def serialize(change_request):
    return change_request.to_dict()

# ==============================================================================
# Listing
# ==============================================================================

@change_requests_bp.route('/change-requests', methods=['GET'])
@token_required
def list_change_requests():
    args = request.args
    offset = parse_int(args.get('offset'), 'offset', default=0, minimum=0)
    items, total, limit = services.list_requests(
        g.user,
        status=args.get('status') or None,
        employee_id=parse_int(args.get('employeeId'), 'employeeId'),
        limit=parse_int(args.get('limit'), 'limit', minimum=1),
        offset=offset,
    )
    return ok(requests=[serialize(cr) for cr in items], total=total, limit=limit, offset=offset)

@change_requests_bp.route('/change-requests/pending/count', methods=['GET'])
@token_required
@role_required(PRIVILEGED_ROLES)
def pending_count():
    return ok(count=services.count_pending(g.user))

@change_requests_bp.route('/change-requests/<int:request_id>', methods=['GET'])
@token_required
def get_change_request(request_id):
    return ok(request=serialize(services.get_request(g.user, request_id)))

# ==============================================================================
# Submission
# ==============================================================================

@change_requests_bp.route('/change-requests', methods=['POST'])
@token_required
def submit_change_request():
    data = json_body(request)
    require_fields(data, ['employeeId', 'fieldName'])
    if data.get('newValue') is None:
        raise ValidationError("Validation failed", missing_fields=['newValue'])

    change_request = services.submit(
        g.user,
        employee_id=parse_int(data['employeeId'], 'employeeId'),
        field_name=data['fieldName'],
        new_value=data['newValue'],
        category=data.get('category'),
    )
    return ok(
        "Change request submitted successfully",
        201,
        request=serialize(change_request),
        note="Your request has been sent to HR for approval",
    )

@change_requests_bp.route('/change-requests/bulk', methods=['POST'])
@token_required
def bulk_submit_change_requests():
    data = json_body(request)
    require_fields(data, ['employeeId', 'changes'])

    created = services.bulk_submit(
        g.user,
        employee_id=parse_int(data['employeeId'], 'employeeId'),
        category=data.get('category'),
        changes=data['changes'],
    )
    return ok(
        f"{len(created)} change request(s) submitted",
        201,
        created=[serialize(cr) for cr in created],
        note="Your requests have been sent to HR for approval",
    )

# ==============================================================================
# Review (Admin / HR)
# ==============================================================================

@change_requests_bp.route('/change-requests/bulk/approve', methods=['PATCH'])
@token_required
@role_required(PRIVILEGED_ROLES)
def bulk_approve_change_requests():
    data = json_body(request)
    result = services.bulk_approve(g.user, data.get('requestIds'), data.get('reviewNotes'))
    return ok(
        f"{len(result['approved'])} approved, {len(result['failed'])} failed",
        approved=result['approved'],
        failed=result['failed'],
    )

@change_requests_bp.route('/change-requests/<int:request_id>/approve', methods=['PATCH'])
@token_required
@role_required(PRIVILEGED_ROLES)
def approve_change_request(request_id):
    data = json_body(request)
    change_request = services.approve(g.user, request_id, data.get('reviewNotes'))
    return ok("Change request approved and applied", request=serialize(change_request))

@change_requests_bp.route('/change-requests/<int:request_id>/reject', methods=['PATCH'])
@token_required
@role_required(PRIVILEGED_ROLES)
def reject_change_request(request_id):
    data = json_body(request)
    change_request = services.reject(g.user, request_id, data.get('reviewNotes'))
    return ok("Change request rejected", request=serialize(change_request))
