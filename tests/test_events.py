from teamsync.models.assignment import Assignment
from teamsync.models.event import Event
from tests.conftest import auth, make_assignment

GALA = {
    "clientId": "c1",
    "branchId": "b1",
    "name": "Gala",
    "startTime": "2030-03-01T18:00:00Z",
    "endTime": "2030-03-01T23:00:00Z",
}


def test_create_event(client, world):
    response = client.post("/api/events", json=GALA, headers=auth("ta1"))
    assert response.status_code == 201

    data = response.json()["data"]
    assert data["status"] == "scheduled"
    assert data["tenantId"] == "t1"
    assert data["clientName"] == "Acme Corp"
    assert data["branchName"] == "Downtown"
    assert data["branchAddress"] == "1 Main St"


def test_event_branch_must_belong_to_client(client, world):
    response = client.post("/api/events", json={**GALA, "branchId": "b2"}, headers=auth("ta1"))
    assert response.status_code == 400


def test_event_time_range(client, world):
    response = client.post(
        "/api/events",
        json={**GALA, "endTime": GALA["startTime"]},
        headers=auth("ta1"),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_duplicate_event_name_within_client(client, world):
    response = client.post("/api/events", json={**GALA, "name": "LAUNCH"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_EVENT_NAME"


def test_client_admin_cannot_create_events(client, world):
    response = client.post("/api/events", json=GALA, headers=auth("ca1"))
    assert response.status_code == 403


def test_event_for_foreign_client_forbidden(client, world):
    response = client.post(
        "/api/events",
        json={**GALA, "clientId": "c3", "branchId": "b3"},
        headers=auth("ta1"),
    )
    assert response.status_code == 403
    assert world.query(Event).filter(Event.name == "Gala").count() == 0


def test_list_events_per_role(client, world):
    assert [e["id"] for e in client.get("/api/events", headers=auth("ta1")).json()["data"]] == ["ev1"]
    assert [e["id"] for e in client.get("/api/events", headers=auth("ca1")).json()["data"]] == ["ev1"]
    assert client.get("/api/events", headers=auth("e1")).status_code == 403


def test_list_events_filters(client, world):
    client.post("/api/events", json=GALA, headers=auth("ta1"))

    later = client.get("/api/events?startFrom=2030-02-01T00:00:00Z", headers=auth("ta1")).json()["data"]
    assert [e["name"] for e in later] == ["Gala"]

    scheduled = client.get("/api/events?status=scheduled", headers=auth("ta1")).json()
    assert scheduled["meta"]["total"] == 2

    assert client.get("/api/events?status=bogus", headers=auth("ta1")).status_code == 400


def test_super_admin_lists_events_of_tenant(client, world):
    response = client.get("/api/events?tenantId=t2", headers=auth("user_super"))
    assert [e["id"] for e in response.json()["data"]] == ["ev3"]


def test_event_status_lifecycle(client, world):
    ongoing = client.patch("/api/events/ev1", json={"status": "ongoing"}, headers=auth("ta1"))
    assert ongoing.status_code == 200
    assert ongoing.json()["data"]["status"] == "ongoing"

    completed = client.patch("/api/events/ev1", json={"status": "completed"}, headers=auth("ta1"))
    assert completed.json()["data"]["status"] == "completed"

    back = client.patch("/api/events/ev1", json={"status": "scheduled"}, headers=auth("ta1"))
    assert back.status_code == 400
    assert back.json()["code"] == "INVALID_STATUS"


def test_event_cannot_skip_to_completed(client, world):
    response = client.patch("/api/events/ev1", json={"status": "completed"}, headers=auth("ta1"))
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATUS"


def test_update_event_time_range(client, world):
    response = client.patch("/api/events/ev1", json={"startTime": "2030-01-10T18:00:00Z"}, headers=auth("ta1"))
    assert response.status_code == 400


def test_update_foreign_event_forbidden(client, world):
    assert client.patch("/api/events/ev3", json={"name": "Mine"}, headers=auth("ta1")).status_code == 403
    assert client.patch("/api/events/missing", json={"name": "Mine"}, headers=auth("user_super")).status_code == 404


def test_delete_event_removes_assignments(client, world):
    make_assignment(world, "a1", "e1", "ev1")

    response = client.delete("/api/events/ev1", headers=auth("ta1"))
    assert response.status_code == 200
    assert world.query(Event).filter(Event.id == "ev1").count() == 0
    assert world.query(Assignment).filter(Assignment.event_id == "ev1").count() == 0
