from teamsync.models.assignment import Assignment
from teamsync.models.branch import Branch
from teamsync.models.client import Client
from teamsync.models.contract import Contract
from teamsync.models.event import Event
from teamsync.models.invoice import Invoice
from teamsync.repositories.contract_repository import ContractRepository
from tests.conftest import auth, make_assignment, make_invoice


def test_tenant_admin_search_only_sees_own_tenant(client, world):
    """GET /api/clients?search=acme as tenant admin of T1"""
    response = client.get("/api/clients?search=acme", headers=auth("ta1"))
    assert response.status_code == 200

    body = response.json()
    names = {c["name"] for c in body["data"]}
    assert names == {"Acme Corp", "ACME Labs"}
    for item in body["data"]:
        assert item["tenantId"] == "t1"
        assert item["tenantName"] == "Tenant One"
    assert body["meta"]["total"] == 2
    assert body["meta"]["page"] == 1


def test_tenant_filter_cannot_widen_scope(client, world):
    """A foreign tenantId is ANDed with the forced scope"""
    response = client.get("/api/clients?tenantId=t2", headers=auth("ta1"))
    assert response.status_code == 200
    assert response.json()["data"] == []
    assert response.json()["meta"]["total"] == 0


def test_client_admin_lists_own_client(client, world):
    response = client.get("/api/clients", headers=auth("ca1"))
    assert [c["id"] for c in response.json()["data"]] == ["c1"]


def test_super_admin_must_pass_tenant_id(client, world):
    response = client.get("/api/clients", headers=auth("user_super"))
    assert response.status_code == 400
    assert response.json()["code"] == "TENANT_ID_REQUIRED"


def test_super_admin_lists_named_tenant(client, world):
    response = client.get("/api/clients?tenantId=t2", headers=auth("user_super"))
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["data"]] == ["c3"]


def test_employee_cannot_list_clients(client, world):
    response = client.get("/api/clients", headers=auth("e1"))
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_pagination_meta(client, world):
    response = client.get("/api/clients?limit=2&page=2", headers=auth("ta1"))
    body = response.json()
    assert len(body["data"]) == 1
    assert body["meta"] == {
        "total": 3,
        "page": 2,
        "limit": 2,
        "totalPages": 2,
        "hasNext": False,
        "hasPrev": True,
    }


def test_limit_is_capped(client, world):
    response = client.get("/api/clients?limit=500", headers=auth("ta1"))
    assert response.json()["meta"]["limit"] == 100


def test_invalid_page_is_validation_error(client, world):
    response = client.get("/api/clients?page=0", headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_create_client_with_initial_contract(client, world):
    response = client.post("/api/clients", json={"name": "Initech", "phone": "555-0100"}, headers=auth("ta1"))
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["tenantId"] == "t1"
    assert data["tenantName"] == "Tenant One"
    assert data["id"].startswith("client_")

    contracts = world.query(Contract).filter(Contract.client_id == data["id"]).all()
    assert len(contracts) == 1
    assert contracts[0].terms == "Standard contract terms"
    assert contracts[0].tenant_id == "t1"
    assert (contracts[0].end_date - contracts[0].start_date).days == 365


def test_create_client_with_client_admin(client, world):
    response = client.post(
        "/api/clients",
        json={"name": "Initech", "adminId": "ca1"},
        headers=auth("ta1"),
    )
    assert response.status_code == 201
    assert response.json()["data"]["adminName"] == "ca1"


def test_create_client_admin_must_have_client_admin_role(client, world):
    response = client.post("/api/clients", json={"name": "Initech", "adminId": "e1"}, headers=auth("ta1"))
    assert response.status_code == 400


def test_super_admin_create_requires_tenant(client, world):
    response = client.post("/api/clients", json={"name": "Initech"}, headers=auth("user_super"))
    assert response.status_code == 400
    assert response.json()["code"] == "TENANT_ID_REQUIRED"


def test_super_admin_creates_in_named_tenant(client, world):
    response = client.post("/api/clients", json={"name": "Initech", "tenantId": "t2"}, headers=auth("user_super"))
    assert response.status_code == 201
    assert response.json()["data"]["tenantId"] == "t2"


def test_super_admin_unknown_tenant(client, world):
    response = client.post("/api/clients", json={"name": "Initech", "tenantId": "t404"}, headers=auth("user_super"))
    assert response.status_code == 404


def test_tenant_admin_cannot_create_in_foreign_tenant(client, world):
    response = client.post("/api/clients", json={"name": "Initech", "tenantId": "t2"}, headers=auth("ta1"))
    assert response.status_code == 403
    assert world.query(Client).filter(Client.name == "Initech").count() == 0


def test_client_admin_cannot_create_clients(client, world):
    response = client.post("/api/clients", json={"name": "Initech"}, headers=auth("ca1"))
    assert response.status_code == 403


def test_duplicate_client_name_in_tenant(client, world):
    response = client.post("/api/clients", json={"name": "globex"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_CLIENT_NAME"


def test_same_name_allowed_in_other_tenant(client, world):
    response = client.post("/api/clients", json={"name": "Globex"}, headers=auth("ta2"))
    assert response.status_code == 201


def test_missing_name_is_validation_error(client, world):
    response = client.post("/api/clients", json={"phone": "1"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert "name" in response.json()["error"]


def test_contract_failure_rolls_back_client(lenient_client, world, monkeypatch):
    """A storage fault on the contract insert must not leave the client behind"""

    def failing_add(self, entity):
        raise RuntimeError("simulated storage fault")

    monkeypatch.setattr(ContractRepository, "add", failing_add)
    monkeypatch.setattr("teamsync.services.client_service.generate_id", lambda prefix: f"{prefix}_fixed")

    response = lenient_client.post("/api/clients", json={"name": "Initech"}, headers=auth("ta1"))
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "code": "INTERNAL_ERROR"}

    lookup = lenient_client.get("/api/clients/client_fixed", headers=auth("ta1"))
    assert lookup.status_code == 404
    assert lookup.json()["code"] == "NOT_FOUND"
    assert world.query(Client).filter(Client.name == "Initech").count() == 0


def test_get_client(client, world):
    response = client.get("/api/clients/c1", headers=auth("ca1"))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Acme Corp"
    assert data["adminId"] == "ca1"


def test_get_client_outside_scope(client, world):
    assert client.get("/api/clients/c3", headers=auth("ta1")).status_code == 403
    assert client.get("/api/clients/c2", headers=auth("ca1")).status_code == 403


def test_missing_client_is_not_found_for_every_actor(client, world):
    for actor in ("user_super", "ta1", "ca1"):
        response = client.get("/api/clients/nope", headers=auth(actor))
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    assert client.patch("/api/clients/nope", json={"name": "x"}, headers=auth("user_super")).status_code == 404
    assert client.delete("/api/clients/nope", headers=auth("user_super")).status_code == 404


def test_update_client(client, world):
    response = client.patch("/api/clients/c2", json={"address": "42 Harbor Rd"}, headers=auth("ta1"))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["address"] == "42 Harbor Rd"
    assert data["name"] == "Globex"


def test_update_client_duplicate_name(client, world):
    response = client.patch("/api/clients/c2", json={"name": "Acme Corp"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_CLIENT_NAME"


def test_update_foreign_client_forbidden(client, world):
    response = client.patch("/api/clients/c3", json={"name": "Mine now"}, headers=auth("ta1"))
    assert response.status_code == 403
    world.expire_all()
    assert world.get(Client, "c3").name == "Acme Overseas"


def test_client_admin_cannot_update_client(client, world):
    response = client.patch("/api/clients/c1", json={"phone": "1"}, headers=auth("ca1"))
    assert response.status_code == 403


def test_delete_client(client, world):
    response = client.delete("/api/clients/c2", headers=auth("ta1"))
    assert response.status_code == 200
    assert response.json()["data"] == {"id": "c2", "deleted": True}
    assert client.get("/api/clients/c2", headers=auth("ta1")).status_code == 404


def test_delete_foreign_client_forbidden(client, world):
    response = client.delete("/api/clients/c3", headers=auth("ta1"))
    assert response.status_code == 403


def test_delete_client_removes_everything_below_it(client, world):
    make_assignment(world, "a1", "e1", "ev1")
    make_invoice(world, "i1", "k1")

    response = client.delete("/api/clients/c1", headers=auth("ta1"))
    assert response.status_code == 200

    world.expire_all()
    assert world.query(Branch).filter(Branch.client_id == "c1").count() == 0
    assert world.query(Event).filter(Event.client_id == "c1").count() == 0
    assert world.query(Assignment).filter(Assignment.client_id == "c1").count() == 0
    assert world.query(Contract).filter(Contract.client_id == "c1").count() == 0
    assert world.query(Invoice).count() == 0
