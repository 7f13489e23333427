from datetime import date

from models import db
from models.employee import Employee
from models.user import User

DEMO_EMPLOYEES = [
    # code, first, last, email, department, title, city
    ("EMP-001", "Ayesha", "Khan", "ayesha.khan@example.com", "Human Resources", "HR Lead", "Lahore"),
    ("EMP-002", "Bilal", "Ahmed", "bilal.ahmed@example.com", "Engineering", "Engineering Manager", "Karachi"),
    ("EMP-003", "Sara", "Malik", "sara.malik@example.com", "Engineering", "Software Engineer", "Lahore"),
    ("EMP-004", "Omar", "Farooq", "omar.farooq@example.com", "IT", "IT Support", "Islamabad"),
]

DEMO_USERS = [
    # email, role, secondary roles, employee code
    ("admin@example.com", "admin", [], None),
    ("ayesha.khan@example.com", "hr", [], "EMP-001"),
    ("bilal.ahmed@example.com", "employee", ["manager"], "EMP-002"),
    ("sara.malik@example.com", "employee", [], "EMP-003"),
    ("omar.farooq@example.com", "it", [], "EMP-004"),
]

def seed_demo(password):
    """Create demo records; existing rows are left alone. Yields progress lines."""
    by_code = {}
    for code, first, last, email, dept, title, city in DEMO_EMPLOYEES:
        emp = Employee.query.filter_by(employee_code=code).first()
        if emp:
            yield f"  = Employee {code} already exists"
        else:
            emp = Employee(
                employee_code=code, work_email=email, first_name=first, last_name=last,
                department=dept, job_title=title, city=city, country="Pakistan",
                dob=date(1990, 1, 1),
            )
            db.session.add(emp)
            db.session.flush()
            yield f"  + Employee {code} ({first} {last})"
        by_code[code] = emp

    manager = by_code["EMP-002"]
    by_code["EMP-003"].manager_id = manager.id

    for email, role, roles, code in DEMO_USERS:
        if User.query.filter_by(email=email).first():
            yield f"  = User {email} already exists"
            continue
        user = User(
            email=email, role=role, roles=roles or None,
            employee_id=by_code[code].id if code else None,
        )
        user.set_password(password)
        db.session.add(user)
        yield f"  + User {email} ({role}{', roles: ' + ','.join(roles) if roles else ''})"

    db.session.commit()
    yield "Demo data ready."
