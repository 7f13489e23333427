from models.employee import Employee
from models.user import User
from models.rbac import Role
from seed_hrms import seed_demo, DEMO_USERS


def test_seed_demo_is_idempotent(db):
    list(seed_demo("demo1234"))
    lines = list(seed_demo("demo1234"))

    assert User.query.count() == len(DEMO_USERS)
    assert all("already exists" in line for line in lines[:-1])


def test_seeded_roles(db):
    list(seed_demo("demo1234"))

    manager = User.query.filter_by(email="bilal.ahmed@example.com").one()
    assert manager.roles == ["manager"]
    assert manager.check_password("demo1234")

    sara = Employee.query.filter_by(employee_code="EMP-003").one()
    assert sara.manager_id == manager.employee_id
    assert User.query.filter_by(email="omar.farooq@example.com").one().effective_role is Role.IT


def test_seed_command(app):
    result = app.test_cli_runner().invoke(args=["seed-demo", "--password", "pw123456"])
    assert result.exit_code == 0
    assert "Demo data ready." in result.output
