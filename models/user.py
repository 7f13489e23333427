from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from models import db
from models.rbac import RBAC

class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=True)  # Null for SSO users

    # Stored as-is; RBAC.normalize_role decides what it means
    role = db.Column(db.String(20), nullable=False, default='employee')
    roles = db.Column(db.JSON, nullable=True)  # secondary assignments, e.g. ["manager"]

    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), unique=True, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = db.relationship('Employee', backref=db.backref('user', uselist=False), lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def effective_role(self):
        if not RBAC.is_known_role(self.role) and not self.roles and self.employee is not None:
            return RBAC.infer_role_from_employee(
                self.employee.department,
                len(self.employee.reportees),
            )
        return RBAC.effective_role(self.role, self.roles)
