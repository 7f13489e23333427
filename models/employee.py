from datetime import datetime
from models import db

GENDERS = ("male", "female", "other", "prefer_not_to_say")
MARITAL_STATUSES = ("single", "married", "divorced", "widowed")
EMPLOYMENT_STATUSES = ("active", "onboarding", "on_leave", "terminated", "resigned", "offboarded")

class Employee(db.Model):
    __tablename__ = 'employees'
    id = db.Column(db.Integer, primary_key=True)
    employee_code = db.Column(db.String(50), unique=True, nullable=False)
    work_email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    middle_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100), nullable=False)

    # Work details
    job_title = db.Column(db.String(120))
    department = db.Column(db.String(120))
    location = db.Column(db.String(120))
    manager_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=True)
    employment_status = db.Column(db.String(20), default='active')

    # Contact
    personal_email = db.Column(db.String(255))
    work_phone = db.Column(db.String(50))

    # Personal details
    dob = db.Column(db.Date)
    gender = db.Column(db.String(20))
    marital_status = db.Column(db.String(20))
    blood_group = db.Column(db.String(10))

    # Permanent address
    street = db.Column(db.String(255))
    city = db.Column(db.String(120))
    state = db.Column(db.String(120))
    country = db.Column(db.String(120))
    zip_code = db.Column(db.String(20))

    # Communication address
    comm_street = db.Column(db.String(255))
    comm_city = db.Column(db.String(120))
    comm_state = db.Column(db.String(120))
    comm_country = db.Column(db.String(120))
    comm_zip_code = db.Column(db.String(20))

    # JSON text: list of {name, relationship, ...}
    dependents_data = db.Column(db.Text)
    emergency_contacts_data = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    manager = db.relationship('Employee', remote_side=[id], backref='reportees')

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)
