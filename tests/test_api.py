from __future__ import annotations

import asyncio
import csv
import io
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from lab_central import auth, main
from lab_central.agents import LabAssistantAgent
from lab_central.system import LabCentralSystem


class CannedAgent:
    async def run(self, task):
        return SimpleNamespace(messages=[SimpleNamespace(content=f"echo: {task}")])


@pytest.fixture
def api_system(store, scheduler, clock, monkeypatch) -> LabCentralSystem:
    system = LabCentralSystem(
        store=store,
        scheduler=scheduler,
        clock=clock,
        assistant=LabAssistantAgent(agent_factory=lambda system_message: CannedAgent()),
    )
    monkeypatch.setattr(main, "system", system)
    return system


@pytest.fixture
def client(api_system) -> TestClient:
    return TestClient(main.app)


def _login(client, role="FACULTY", **extra) -> dict:
    response = client.post("/api/login", json={"role": role, **extra})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _book(client, headers, **overrides):
    payload = {
        "equipment_id": "eq-001",
        "contact": "+91 98765 43210",
        "purpose": "Surface imaging",
        "start_time": "2024-01-01T00:00:00Z",
        "end_time": "2024-01-03T00:00:00Z",
    }
    payload.update(overrides)
    return client.post("/api/bookings", json=payload, headers=headers)


def test_login_labels_role(client) -> None:
    headers = _login(client, "ADMIN")
    me = client.get("/api/users/me", headers=headers).json()
    assert me["role"] == "ADMIN"
    assert me["name"] == "System Administrator"


def test_bookings_require_a_token(client) -> None:
    assert client.get("/api/bookings").status_code == 401
    assert client.get("/api/bookings", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_inventory_endpoints(client) -> None:
    assert len(client.get("/api/equipment").json()) == 10
    microscopes = client.get("/api/equipment", params={"category": "Microscopy"}).json()
    assert {item["id"] for item in microscopes} == {"eq-001", "eq-006", "eq-007"}
    assert client.get("/api/equipment/categories").json()[0] == "All"
    assert client.get("/api/equipment/eq-004").json()["status"] == "MAINTENANCE"
    assert client.get("/api/equipment/eq-404").status_code == 404
    assert "Nanotechnology" in client.get("/api/departments").json()


def test_booking_flow(client, api_system) -> None:
    faculty = _login(client, "FACULTY", name="Ada Lovelace", department="Information Technology")
    admin = _login(client, "ADMIN")

    created = _book(client, faculty)
    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "PENDING"
    assert booking["faculty_name"] == "Ada Lovelace"
    assert booking["department"] == "Information Technology"
    assert booking["fine"] == 0
    assert booking["short_id"] == booking["id"][-6:]

    decided = client.post(f"/api/bookings/{booking['id']}/decision", json={"decision": "APPROVED"}, headers=admin)
    assert decided.status_code == 200
    assert decided.json()["status"] == "APPROVED"

    logs = client.get("/api/notifications").json()
    assert [n["status"] for n in logs] == ["SENDING", "QUEUED"]
    assert logs[0]["link"].startswith("https://wa.me/919876543210?text=LabCentral%20Alert")

    banner = client.get("/api/notifications/banner").json()
    assert banner["notification_id"] == logs[0]["id"]

    mine = client.get("/api/bookings", params={"mine": True}, headers=faculty).json()
    assert [b["id"] for b in mine] == [booking["id"]]
    assert client.get("/api/bookings", params={"mine": True}, headers=admin).json() == []


def test_booking_validation_errors(client) -> None:
    headers = _login(client)

    too_long = _book(client, headers, start_time="2024-01-01T00:00:00Z", end_time="2024-01-09T00:00:00Z")
    assert too_long.status_code == 400
    assert too_long.json()["detail"] == "exceeds max duration"

    backwards = _book(client, headers, start_time="2024-01-03T00:00:00Z", end_time="2024-01-01T00:00:00Z")
    assert backwards.status_code == 400
    assert backwards.json()["detail"] == "end before start"

    assert _book(client, headers, equipment_id="eq-404").status_code == 404
    assert client.get("/api/bookings", headers=headers).json() == []


def test_decision_errors(client) -> None:
    headers = _login(client, "ADMIN")
    missing = client.post("/api/bookings/bk-missing00/decision", json={"decision": "APPROVED"}, headers=headers)
    assert missing.status_code == 404

    booking = _book(client, headers).json()
    pending = client.post(f"/api/bookings/{booking['id']}/decision", json={"decision": "PENDING"}, headers=headers)
    assert pending.status_code == 400
    bogus = client.post(f"/api/bookings/{booking['id']}/decision", json={"decision": "MAYBE"}, headers=headers)
    assert bogus.status_code == 422


def test_overdue_fine_shows_after_tick(client, api_system, clock) -> None:
    headers = _login(client)
    booking = _book(client, headers).json()
    client.post(f"/api/bookings/{booking['id']}/decision", json={"decision": "APPROVED"}, headers=headers)

    clock.advance(days=3)  # 2024-01-04 12:00, a day and a half past the end
    api_system.tick()

    listed = client.get("/api/bookings", headers=headers).json()
    assert listed[0]["fine"] == 100
    assert listed[0]["overdue"] is True
    assert client.get("/api/notifications").json()[0]["message"].startswith("⚠️ OVERDUE ALERT")


def test_report_download(client) -> None:
    headers = _login(client)
    _book(client, headers)

    response = client.get("/api/reports/bookings")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="LabCentral_Report_' in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[3][1] == "Scanning Electron Microscope (SEM)"


def test_utilization_endpoint(client) -> None:
    chart = client.get("/api/analytics/utilization").json()
    assert chart[1] == {"name": "NMR", "usage": 3500, "avg": 2000}


def test_assistant_endpoint(client) -> None:
    assert client.post("/api/assistant", json={"prompt": "  "}).status_code == 400
    response = client.post("/api/assistant", json={"prompt": "Which microscope?"})
    assert response.json() == {"response": "echo: Which microscope?"}


def test_websocket_rejects_missing_token(client) -> None:
    from starlette.websockets import WebSocketDisconnect

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_text()


def test_websocket_pushes_initial_state(client) -> None:
    response = client.post("/api/login", json={"role": "FACULTY"})
    token = response.json()["access_token"]

    with client.websocket_connect(f"/ws?token={token}") as websocket:
        assert websocket.receive_json()["type"] == "auth_success"
        update = websocket.receive_json()
        assert update["type"] == "equipment_update"
        assert len(update["data"]) == 10
        websocket.send_text('{"type": "get_notifications"}')
        assert websocket.receive_json() == {"type": "notifications_update", "data": []}


def test_second_decision_is_a_conflict(client) -> None:
    headers = _login(client, "ADMIN")
    booking = _book(client, headers).json()
    url = f"/api/bookings/{booking['id']}/decision"

    assert client.post(url, json={"decision": "APPROVED"}, headers=headers).status_code == 200
    again = client.post(url, json={"decision": "REJECTED"}, headers=headers)

    assert again.status_code == 409
    assert client.get("/api/bookings", headers=headers).json()[0]["status"] == "APPROVED"


def test_websocket_survives_invalid_json(client) -> None:
    token = client.post("/api/login", json={"role": "FACULTY"}).json()["access_token"]

    with client.websocket_connect(f"/ws?token={token}") as websocket:
        websocket.receive_json()
        websocket.receive_json()
        websocket.send_text("not json")
        assert websocket.receive_json()["type"] == "error"
        websocket.send_text('{"type": "get_banner"}')
        assert websocket.receive_json() == {"type": "banner_update", "data": None}


class RecordingSocket:
    def __init__(self, broken=False):
        self.broken = broken
        self.sent = []

    async def send_text(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_broadcast_drops_dead_sockets_and_reaches_the_rest(store, scheduler, clock) -> None:
    manager = main.ConnectionManager()
    dead, alive = RecordingSocket(broken=True), RecordingSocket()
    manager.active_connections.extend([dead, alive])
    system = LabCentralSystem(store=store, scheduler=scheduler, clock=clock, manager=manager)

    asyncio.run(system.broadcast_tick({"equipment": store.list_equipment(), "alerts": []}))

    assert manager.active_connections == [alive]
    assert json.loads(alive.sent[0])["type"] == "equipment_update"


def test_secret_key_comes_from_environment() -> None:
    assert auth.load_secret_key({"SECRET_KEY": "from-env"}) == "from-env"


def test_missing_secret_key_gets_a_random_one(caplog) -> None:
    first = auth.load_secret_key({})
    second = auth.load_secret_key({"SECRET_KEY": ""})

    assert first != second
    assert len(first) >= 32
    assert "SECRET_KEY is not set" in caplog.text
