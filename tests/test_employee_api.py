from models.change_request import ChangeRequest
from models.employee import Employee
from models.user import User
from change_requests import services


def test_employee_reads_own_record(client, auth_headers, employee, employee_user):
    res = client.get(f"/api/employees/{employee.id}", headers=auth_headers(employee_user))

    assert res.status_code == 200
    body = res.get_json()["employee"]
    assert body["fields"]["city"] == "Lahore"
    assert "city" in body["selfServiceFields"]
    assert "jobTitle" not in body["selfServiceFields"]


def test_employee_cannot_read_other_record(client, auth_headers, other_employee, employee_user):
    res = client.get(f"/api/employees/{other_employee.id}", headers=auth_headers(employee_user))
    assert res.status_code == 403
    assert res.get_json()["error"] == "You can only access your own profile"


def test_hr_reads_any_record(client, auth_headers, other_employee, hr_user):
    res = client.get(f"/api/employees/{other_employee.id}", headers=auth_headers(hr_user))
    assert res.status_code == 200


def test_missing_employee(client, auth_headers, hr_user):
    assert client.get("/api/employees/9999", headers=auth_headers(hr_user)).status_code == 404


def test_hr_direct_edit(db, client, auth_headers, employee, hr_user):
    res = client.patch(f"/api/employees/{employee.id}", headers=auth_headers(hr_user),
                       json={"jobTitle": "Lead Engineer", "city": "Islamabad"})

    assert res.status_code == 200
    db.session.expire_all()
    emp = db.session.get(Employee, employee.id)
    assert emp.job_title == "Lead Engineer"
    assert emp.city == "Islamabad"


def test_direct_edit_is_all_or_nothing(db, client, auth_headers, employee, hr_user):
    res = client.patch(f"/api/employees/{employee.id}", headers=auth_headers(hr_user),
                       json={"city": "Islamabad", "dob": "not a date"})

    assert res.status_code == 400
    assert res.get_json()["field"] == "dob"
    db.session.expire_all()
    assert db.session.get(Employee, employee.id).city == "Lahore"


def test_direct_edit_unknown_field(client, auth_headers, employee, hr_user):
    res = client.patch(f"/api/employees/{employee.id}", headers=auth_headers(hr_user),
                       json={"salary": 1})
    assert res.status_code == 400
    assert res.get_json()["fields"] == ["salary"]


def test_employee_cannot_direct_edit(client, auth_headers, employee, employee_user):
    res = client.patch(f"/api/employees/{employee.id}", headers=auth_headers(employee_user),
                       json={"city": "Islamabad"})
    assert res.status_code == 403


def test_admin_delete_cascades_change_requests(db, client, auth_headers, employee, employee_user, admin_user):
    services.submit(employee_user, employee.id, "city", "Karachi")
    employee_id, user_id = employee.id, employee_user.id

    res = client.delete(f"/api/employees/{employee_id}", headers=auth_headers(admin_user))

    assert res.status_code == 200
    db.session.expire_all()
    assert db.session.get(Employee, employee_id) is None
    assert ChangeRequest.query.filter_by(employee_id=employee_id).count() == 0
    assert db.session.get(User, user_id).employee_id is None


def test_hr_cannot_delete(client, auth_headers, employee, hr_user):
    res = client.delete(f"/api/employees/{employee.id}", headers=auth_headers(hr_user))
    assert res.status_code == 403
