import pytest

from teamsync.models.assignment import Assignment
from teamsync.models.branch import Branch
from teamsync.models.event import Event
from teamsync.models.tenant_membership import TenantMembership
from tests.conftest import auth, make_assignment


def test_tenant_admin_creates_branch(client, world):
    response = client.post(
        "/api/branches",
        json={"clientId": "c1", "name": "Uptown", "address": "9 North Ave"},
        headers=auth("ta1"),
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["clientId"] == "c1"
    assert data["clientName"] == "Acme Corp"
    assert data["tenantId"] == "t1"
    assert data["tenantName"] == "Tenant One"


def test_client_admin_creates_branch_for_own_client(client, world):
    response = client.post("/api/branches", json={"clientId": "c1", "name": "Uptown"}, headers=auth("ca1"))
    assert response.status_code == 201


def test_client_admin_cannot_create_for_other_client(client, world):
    response = client.post("/api/branches", json={"clientId": "c2", "name": "Uptown"}, headers=auth("ca1"))
    assert response.status_code == 403


@pytest.mark.parametrize("client_id", ["c1", "c2"])
def test_client_admin_cannot_set_supervisor_on_create(client, world, client_id):
    response = client.post(
        "/api/branches",
        json={"clientId": client_id, "name": "Uptown", "supervisorId": "e1"},
        headers=auth("ca1"),
    )
    assert response.status_code == 403
    assert "supervisor_id" in response.json()["error"]


@pytest.mark.parametrize("branch_id", ["b1", "b2"])
def test_client_admin_cannot_set_supervisor_on_update(client, world, branch_id):
    response = client.patch(f"/api/branches/{branch_id}", json={"supervisorId": "e1"}, headers=auth("ca1"))
    assert response.status_code == 403
    world.expire_all()
    assert world.get(Branch, branch_id).supervisor_id is None


def test_client_admin_updates_branch_name(client, world):
    response = client.patch("/api/branches/b1", json={"name": "Downtown East"}, headers=auth("ca1"))
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Downtown East"


def test_branch_for_foreign_tenant_client_rejected(client, world):
    """Tenant admin of T1 naming a client of T2 inserts nothing"""
    before = world.query(Branch).count()
    response = client.post("/api/branches", json={"clientId": "c3", "name": "Sneaky"}, headers=auth("ta1"))
    assert response.status_code == 403
    assert world.query(Branch).count() == before
    assert world.query(Branch).filter(Branch.name == "Sneaky").count() == 0


def test_branch_for_missing_client(client, world):
    response = client.post("/api/branches", json={"clientId": "c404", "name": "Ghost"}, headers=auth("ta1"))
    assert response.status_code == 404


def test_duplicate_branch_name_within_client(client, world):
    response = client.post("/api/branches", json={"clientId": "c1", "name": "downtown"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_BRANCH_NAME"


def test_same_branch_name_other_client(client, world):
    response = client.post("/api/branches", json={"clientId": "c2", "name": "Downtown"}, headers=auth("ta1"))
    assert response.status_code == 201


def test_supervisor_must_belong_to_tenant(client, world):
    response = client.post(
        "/api/branches",
        json={"clientId": "c1", "name": "Uptown", "supervisorId": "e3"},
        headers=auth("ta1"),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_tenant_admin_sets_supervisor(client, world):
    response = client.patch("/api/branches/b1", json={"supervisorId": "e1"}, headers=auth("ta1"))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["supervisorId"] == "e1"
    assert data["supervisorName"] == "e1"


def test_list_branches_per_role(client, world):
    tenant_ids = {b["id"] for b in client.get("/api/branches", headers=auth("ta1")).json()["data"]}
    assert tenant_ids == {"b1", "b2"}

    client_ids = {b["id"] for b in client.get("/api/branches", headers=auth("ca1")).json()["data"]}
    assert client_ids == {"b1"}


def test_list_branches_filter_cannot_escape_tenant(client, world):
    response = client.get("/api/branches?clientId=c3", headers=auth("ta1"))
    assert response.json()["data"] == []


def test_super_admin_lists_branches_by_client(client, world):
    response = client.get("/api/branches?clientId=c3", headers=auth("user_super"))
    assert [b["id"] for b in response.json()["data"]] == ["b3"]


def test_super_admin_lists_branches_requires_tenant(client, world):
    response = client.get("/api/branches", headers=auth("user_super"))
    assert response.status_code == 400
    assert response.json()["code"] == "TENANT_ID_REQUIRED"


def test_search_branches_by_address(client, world):
    response = client.get("/api/branches?search=main", headers=auth("ta1"))
    assert [b["id"] for b in response.json()["data"]] == ["b1"]


def test_get_branch_scope(client, world):
    assert client.get("/api/branches/b1", headers=auth("ta1")).status_code == 200
    assert client.get("/api/branches/b3", headers=auth("ta1")).status_code == 403
    assert client.get("/api/branches/b2", headers=auth("ca1")).status_code == 403
    assert client.get("/api/branches/missing", headers=auth("user_super")).status_code == 404


def test_client_admin_cannot_delete_branch(client, world):
    response = client.delete("/api/branches/b1", headers=auth("ca1"))
    assert response.status_code == 403


def test_tenant_admin_deletes_branch(client, world):
    response = client.delete("/api/branches/b2", headers=auth("ta1"))
    assert response.status_code == 200
    assert response.json()["data"]["deleted"] is True
    assert world.query(Branch).filter(Branch.id == "b2").count() == 0


def test_delete_branch_removes_its_events_and_assignments(client, world):
    make_assignment(world, "a1", "e1", "ev1")

    response = client.delete("/api/branches/b1", headers=auth("ta1"))
    assert response.status_code == 200

    world.expire_all()
    assert world.query(Event).filter(Event.branch_id == "b1").count() == 0
    assert world.query(Assignment).filter(Assignment.branch_id == "b1").count() == 0
    assert world.get(TenantMembership, "membership_e1").branch_id is None

    events = client.get("/api/events", headers=auth("ta1")).json()
    assert events["data"] == []
    assert client.get("/api/assignments", headers=auth("ta1")).json()["data"] == []
