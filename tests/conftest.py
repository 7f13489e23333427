"""
Pytest configuration and fixtures.
"""
import pytest

from app import create_app
from config import TestConfig
from models import db as _db
from models.employee import Employee
from models.user import User
from utils.auth_utils import generate_token


@pytest.fixture
def app():
    """Application with a fresh in-memory database per test."""
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_employee(db):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        n = counter["n"]
        defaults = {
            "employee_code": f"EMP-{n:03d}",
            "work_email": f"employee{n}@example.com",
            "first_name": "Test",
            "last_name": f"Employee{n}",
            "department": "Engineering",
            "job_title": "Engineer",
        }
        defaults.update(fields)
        emp = Employee(**defaults)
        db.session.add(emp)
        db.session.commit()
        return emp

    return _make


@pytest.fixture
def make_user(db):
    def _make(email, role="employee", roles=None, employee=None, is_active=True, password="secret123"):
        user = User(
            email=email,
            role=role,
            roles=roles,
            employee_id=employee.id if employee else None,
            is_active=is_active,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def employee(make_employee):
    """Employee E from the Lahore scenario."""
    return make_employee(first_name="Sara", last_name="Malik", city="Lahore")


@pytest.fixture
def employee_user(make_user, employee):
    return make_user("sara@example.com", role="employee", employee=employee)


@pytest.fixture
def other_employee(make_employee):
    return make_employee(first_name="Bilal", last_name="Ahmed", city="Karachi")


@pytest.fixture
def other_user(make_user, other_employee):
    return make_user("bilal@example.com", role="employee", employee=other_employee)


@pytest.fixture
def hr_user(make_user, make_employee):
    hr_employee = make_employee(first_name="Ayesha", last_name="Khan", department="Human Resources")
    return make_user("hr@example.com", role="hr", employee=hr_employee)


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@example.com", role="admin")


@pytest.fixture
def auth_headers(app):
    """Return Authorization headers for a user."""
    def _headers(user):
        return {"Authorization": f"Bearer {generate_token(user)}"}
    return _headers
