from teamsync.models.assignment import Assignment
from teamsync.models.tenant_membership import TenantMembership
from teamsync.models.user import User
from tests.conftest import auth, make_assignment

NEW_EMPLOYEE = {
    "name": "Neo Anderson",
    "email": "neo@example.com",
    "password": "follow-the-rabbit",
    "branchId": "b1",
}


def test_onboard_employee(client, world, emails):
    response = client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth("ta1"))
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["tenantId"] == "t1"
    assert data["tenantName"] == "Tenant One"
    assert data["branchId"] == "b1"
    assert data["branchName"] == "Downtown"
    assert data["isActive"] is True
    assert "password" not in data
    assert "passwordHash" not in data

    user = world.get(User, data["id"])
    assert user.password_hash != NEW_EMPLOYEE["password"]
    assert world.query(TenantMembership).filter(TenantMembership.user_id == user.id).count() == 1
    assert emails.sent == [("welcome", "neo@example.com", "Neo Anderson")]


def test_onboarded_employee_can_sign_in(client, world):
    client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth("ta1"))
    response = client.post(
        "/api/auth/login",
        json={"email": NEW_EMPLOYEE["email"], "password": NEW_EMPLOYEE["password"]},
    )
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "employee"


def test_onboard_with_foreign_branch_forbidden(client, world, emails):
    response = client.post("/api/employees", json={**NEW_EMPLOYEE, "branchId": "b3"}, headers=auth("ta1"))
    assert response.status_code == 403
    assert world.query(User).filter(User.email == "neo@example.com").count() == 0
    assert emails.sent == []


def test_onboard_duplicate_email(client, world):
    response = client.post(
        "/api/employees",
        json={**NEW_EMPLOYEE, "email": "E1@example.com"},
        headers=auth("ta1"),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_EMPLOYEE_EMAIL"


def test_super_admin_onboard_requires_tenant(client, world):
    response = client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth("user_super"))
    assert response.status_code == 400
    assert response.json()["code"] == "TENANT_ID_REQUIRED"


def test_short_password_rejected(client, world):
    response = client.post("/api/employees", json={**NEW_EMPLOYEE, "password": "short"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_client_admin_cannot_onboard(client, world):
    response = client.post("/api/employees", json=NEW_EMPLOYEE, headers=auth("ca1"))
    assert response.status_code == 403


def test_list_employees_per_role(client, world):
    tenant_view = {e["id"] for e in client.get("/api/employees", headers=auth("ta1")).json()["data"]}
    assert tenant_view == {"e1", "e2"}

    client_view = {e["id"] for e in client.get("/api/employees", headers=auth("ca1")).json()["data"]}
    assert client_view == {"e1", "e2"}

    assert client.get("/api/employees", headers=auth("e1")).status_code == 403


def test_list_employees_filters(client, world):
    world.get(User, "e2").is_active = False
    world.commit()

    active = client.get("/api/employees?isActive=true", headers=auth("ta1")).json()["data"]
    assert [e["id"] for e in active] == ["e1"]

    found = client.get("/api/employees?search=E2@", headers=auth("ta1")).json()["data"]
    assert [e["id"] for e in found] == ["e2"]


def test_super_admin_lists_employees_of_tenant(client, world):
    response = client.get("/api/employees?tenantId=t2", headers=auth("user_super"))
    assert [e["id"] for e in response.json()["data"]] == ["e3"]


def test_employee_reads_own_profile_only(client, world):
    assert client.get("/api/employees/e1", headers=auth("e1")).status_code == 200
    assert client.get("/api/employees/e2", headers=auth("e1")).status_code == 403


def test_get_employee_scope(client, world):
    assert client.get("/api/employees/e3", headers=auth("ta1")).status_code == 403
    assert client.get("/api/employees/e1", headers=auth("ca1")).status_code == 200


def test_admin_user_is_not_an_employee(client, world):
    response = client.get("/api/employees/ta1", headers=auth("user_super"))
    assert response.status_code == 404


def test_employee_updates_own_name(client, world):
    response = client.patch("/api/employees/e1", json={"name": "Trinity", "phone": "555"}, headers=auth("e1"))
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Trinity"


def test_employee_cannot_deactivate_self(client, world):
    response = client.patch("/api/employees/e1", json={"isActive": False}, headers=auth("e1"))
    assert response.status_code == 403


def test_tenant_admin_moves_employee_branch(client, world):
    response = client.patch("/api/employees/e1", json={"branchId": None}, headers=auth("ta1"))
    assert response.status_code == 200
    assert response.json()["data"]["branchId"] is None

    response = client.patch("/api/employees/e1", json={"branchId": "b3"}, headers=auth("ta1"))
    assert response.status_code == 403


def test_tenant_admin_deactivates_employee(client, world):
    response = client.patch("/api/employees/e2", json={"isActive": False}, headers=auth("ta1"))
    assert response.status_code == 200
    assert response.json()["data"]["isActive"] is False


def test_update_duplicate_email(client, world):
    response = client.patch("/api/employees/e2", json={"email": "e1@example.com"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_EMPLOYEE_EMAIL"


def test_delete_employee(client, world):
    response = client.delete("/api/employees/e2", headers=auth("ta1"))
    assert response.status_code == 200
    assert world.query(User).filter(User.id == "e2").count() == 0
    assert world.query(TenantMembership).filter(TenantMembership.user_id == "e2").count() == 0


def test_delete_foreign_employee_forbidden(client, world):
    assert client.delete("/api/employees/e3", headers=auth("ta1")).status_code == 403


def test_delete_employee_removes_its_assignments(client, world):
    make_assignment(world, "a1", "e1", "ev1")
    make_assignment(world, "a2", "e2", "ev1")

    response = client.delete("/api/employees/e1", headers=auth("ta1"))
    assert response.status_code == 200

    world.expire_all()
    assert world.query(Assignment).filter(Assignment.employee_id == "e1").count() == 0
    rows = client.get("/api/assignments", headers=auth("ta1")).json()["data"]
    assert [row["id"] for row in rows] == ["a2"]
