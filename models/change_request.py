from datetime import datetime
from enum import Enum
from models import db

class ChangeRequestStatus(Enum):
    PENDING = "pending"      # awaiting review
    APPROVED = "approved"    # approved and applied
    REJECTED = "rejected"    # rejected by HR/Admin

class ChangeRequestCategory(Enum):
    PERSONAL_DETAILS = "personal_details"
    ADDRESS = "address"
    CONTACT = "contact"
    DEPENDENTS = "dependents"
    EMERGENCY_CONTACTS = "emergency_contacts"
    BANK_DETAILS = "bank_details"

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class ChangeRequest(db.Model):
    __tablename__ = 'change_requests'
    id = db.Column(db.Integer, primary_key=True)

    requester_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)

    category = db.Column(
        db.Enum(ChangeRequestCategory, name='change_request_category', values_callable=_enum_values),
        nullable=False,
    )
    field_name = db.Column(db.String(100), nullable=False)  # storage column, e.g. "city"
    old_value = db.Column(db.Text, nullable=True)            # snapshot at submission time
    new_value = db.Column(db.Text, nullable=False)

    status = db.Column(
        db.Enum(ChangeRequestStatus, name='change_request_status', values_callable=_enum_values),
        nullable=False,
        default=ChangeRequestStatus.PENDING,
        index=True,
    )

    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    review_notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    requester = db.relationship('User', foreign_keys=[requester_id])
    reviewer = db.relationship('User', foreign_keys=[reviewed_by])
    employee = db.relationship(
        'Employee',
        backref=db.backref('change_requests', lazy=True, cascade="all, delete-orphan"),
    )

    def to_dict(self):
        employee = self.employee
        return {
            "id": self.id,
            "requesterId": self.requester_id,
            "requesterEmail": self.requester.email if self.requester else None,
            "employeeId": self.employee_id,
            "employeeName": employee.full_name if employee else None,
            "employeeCode": employee.employee_code if employee else None,
            "category": self.category.value if self.category else None,
            "fieldName": self.field_name,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "status": self.status.value if self.status else None,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "reviewNotes": self.review_notes,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
