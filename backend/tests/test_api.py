from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.crm.seed import seed_demo_data
from app.crm.store import CrmStore, get_store
from app.main import app


@pytest.fixture
def client():
    store = CrmStore()
    seed_demo_data(store)
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health_counts_records_per_board(client):
    before = client.get("/health").json()["records"]
    assert before["leads"] > 0
    assert before["opportunities"] > 0

    client.post("/api/v1/tasks", json={"title": "Ligar para a escola"})
    after = client.get("/health").json()["records"]
    assert after["tasks"] == before["tasks"] + 1


def test_opportunity_board_lists_every_stage(client):
    columns = client.get("/api/v1/opportunities").json()
    assert [c["title"] for c in columns] == [
        "New Opportunity", "Trial Class", "Negotiation", "Contract Signing",
        "Awaiting Payment", "Won", "Lost",
    ]


def test_create_and_move_opportunity_to_lost(client):
    created = client.post("/api/v1/opportunities", json={"name": "Nova conta", "amount": 300}).json()
    assert created["stage"] == "New Opportunity"

    moved = client.post(
        f"/api/v1/opportunities/{created['id']}/move",
        json={"source_stage": "New Opportunity", "dest_stage": "Lost", "loss_reason": "Timing"},
    )
    assert moved.status_code == 200
    body = moved.json()
    assert body["stage"] == "Lost"
    assert body["loss_reason"] == "Timing"


def test_unknown_opportunity_is_404(client):
    assert client.get("/api/v1/opportunities/ghost").status_code == 404
    assert client.delete("/api/v1/opportunities/ghost").status_code == 404


def test_accepting_via_api_supersedes_previous(client):
    first = client.post("/api/v1/proposals", json={
        "opportunity_id": "opp-2", "title": "A", "status": "Accepted",
    }).json()
    second = client.post("/api/v1/proposals", json={
        "opportunity_id": "opp-2", "title": "B", "status": "Draft",
    }).json()

    response = client.post(
        f"/api/v1/proposals/{second['id']}/move",
        json={"source_status": "Draft", "dest_status": "Accepted"},
    )
    assert response.status_code == 200

    proposals = client.get("/api/v1/proposals", params={"opportunity_id": "opp-2"}).json()
    statuses = {p["id"]: p["status"] for p in proposals}
    assert statuses[first["id"]] == "Superseded"
    assert statuses[second["id"]] == "Accepted"
    assert list(statuses.values()).count("Accepted") == 1


def test_invalid_proposal_status_is_400(client):
    response = client.put("/api/v1/proposals/prp-1", json={"status": "Maybe"})
    assert response.status_code == 400


def test_proposal_carries_contact_name(client):
    proposal = client.get("/api/v1/proposals/prp-1").json()
    assert proposal["opportunity_name"] == "Colégio Horizonte - Reforço"
    assert proposal["contact_name"] == "Paulo Santos"


def test_task_toggle(client):
    task = client.post("/api/v1/tasks/tsk-1/toggle").json()
    assert task["is_completed"] is True
    assert task["related_object_name"] == "Colégio Horizonte - Reforço"


def test_disqualify_requires_reason(client):
    response = client.post("/api/v1/leads/lead-1/move", json={
        "source_stage": "New Lead", "dest_stage": "Disqualified",
    })
    assert response.status_code == 400


def test_dashboard_summary(client):
    summary = client.get("/api/v1/dashboard/summary").json()
    assert summary["by_stage"]["Trial Class"]["count"] == 1
    assert summary["open_pipeline_value"] == pytest.approx(1800.0 + 12500.0 + 950.0)
    assert summary["open_tasks"] == 2


def test_disqualify_by_column_id_requires_reason(client):
    columns = client.get("/api/v1/leads").json()
    disqualified = next(c for c in columns if c["title"] == "Disqualified")

    response = client.post("/api/v1/leads/lead-1/move", json={
        "source_stage": "New Lead", "dest_stage": disqualified["id"],
    })
    assert response.status_code == 400
    assert client.get("/api/v1/leads/lead-1").json()["stage"] == "New Lead"


def test_relink_task_via_api_drops_old_name(client):
    task = client.post("/api/v1/tasks", json={
        "title": "Enviar proposta",
        "related_object_type": "account",
        "related_object_id": "acc-1",
    }).json()
    assert task["related_object_name"]

    updated = client.put(f"/api/v1/tasks/{task['id']}", json={
        "related_object_type": "lead", "related_object_id": "lead-missing",
    }).json()
    assert updated["related_object_id"] == "lead-missing"
    assert updated["related_object_name"] == ""
