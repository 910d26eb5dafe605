import pytest
from fastapi.testclient import TestClient

from tickcpu.main import app


@pytest.fixture
def client():
    c = TestClient(app)
    resp = c.post(
        "/sim/init",
        json={"preset": 1, "algorithm": "FCFS", "quantum": 2, "aging_enabled": False, "tick_ms": 200, "max_ticks": 10000},
    )
    assert resp.status_code == 200
    return c


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_algorithms_listing(client):
    body = client.get("/sim/algorithms").json()
    assert body["algorithms"] == ["FCFS", "SJF", "SRTF", "RR", "Priority", "PriorityNP"]
    assert [p["id"] for p in body["presets"]] == [1, 2, 3, 4, 5]


def test_init_puts_everything_in_the_job_pool(client):
    state = client.get("/sim/state").json()
    assert state["time"] == 0
    assert state["algorithm"] == "FCFS"
    assert [p["id"] for p in state["job_pool"]] == [1, 2, 3]
    assert state["cpu_process"] is None
    assert state["done"] is False


def test_tick_then_run_to_completion(client):
    state = client.post("/sim/tick").json()
    assert state["time"] == 1
    assert state["cpu_process"]["id"] == 1
    assert state["trace"] == ["Time 0: Running Process 1 (5 remaining). "]

    state = client.post("/sim/run", json={"steps": 100}).json()
    assert state["done"] is True
    assert state["time"] == 9
    assert [p["id"] for p in state["finished"]] == [1, 2, 3]
    assert state["metrics"]["makespan"] == 9
    assert state["gantt"][-1] == "P3"


@pytest.mark.parametrize("steps", [-1, "ten", 1.5])
def test_run_rejects_bad_steps(client, steps):
    assert client.post("/sim/run", json={"steps": steps}).status_code == 422


def test_init_rejects_duplicate_ids(client):
    resp = client.post(
        "/sim/init",
        json={"processes": [{"id": 1, "burst_time": 2}, {"id": 1, "burst_time": 3}]},
    )
    assert resp.status_code == 422


def test_add_duplicate_id_is_rejected(client):
    resp = client.post("/sim/add", json={"process": {"id": 2, "arrival_time": 0, "burst_time": 1}})
    assert resp.status_code == 422
    assert "already exists" in resp.json()["detail"]


def test_added_process_joins_a_finished_run(client):
    client.post("/sim/run", json={"steps": 100})

    state = client.post("/sim/add", json={"id": 9, "name": "late", "arrival_time": 0, "burst_time": 2}).json()
    assert state["done"] is False
    assert [p["id"] for p in state["job_pool"]] == [9]

    state = client.post("/sim/tick").json()
    assert state["cpu_process"]["id"] == 9
    assert state["cpu_process"]["remaining"] == 1


def test_clear_added_rebuilds_from_defaults(client):
    client.post("/sim/add", json={"id": 9, "arrival_time": 0, "burst_time": 2})
    state = client.post("/sim/clear_added").json()
    assert [p["id"] for p in state["job_pool"]] == [1, 2, 3]


def test_config_clamps_and_applies(client):
    body = client.post("/sim/config", json={"algorithm": "RR", "quantum": 0, "aging": "on"}).json()
    assert body["ok"] is True
    assert body["config"]["algorithm"] == "RR"
    assert body["config"]["quantum"] == 1
    assert body["config"]["aging_enabled"] is True
    assert client.get("/sim/state").json()["algorithm"] == "RR"


def test_tick_cap_halts_the_session(client):
    client.post("/sim/init", json={"preset": 3, "max_ticks": 3})
    state = client.post("/sim/run", json={"steps": 100}).json()
    assert state["time"] == 3
    assert state["done"] is False
    assert "Tick cap 3 reached" in state["event_log"][-1]


def test_reset_rewinds_the_clock(client):
    client.post("/sim/run", json={"steps": 4})
    state = client.post("/sim/reset").json()
    assert state["time"] == 0
    assert state["gantt"] == []


def test_compare_preset(client):
    results = client.post("/sim/compare", json={"preset": 1}).json()["results"]
    assert len(results) == 6
    fcfs = results[0]
    assert fcfs["algorithm"] == "FCFS"
    assert fcfs["finish_order"] == [1, 2, 3]
    assert [p["ct"] for p in fcfs["per_process"]] == [5, 8, 9]


def test_compare_rejects_bad_payloads(client):
    assert client.post("/sim/compare", json={"processes": [{"id": 1, "burst_time": 0}]}).status_code == 422
    assert client.post("/sim/compare", json={"preset": "x"}).status_code == 422


def test_compare_rejects_duplicate_ids(client):
    resp = client.post(
        "/sim/compare",
        json={"processes": [{"id": 1, "burst_time": 2}, {"id": 1, "burst_time": 3}]},
    )
    assert resp.status_code == 422
    assert "already exists" in resp.json()["detail"]


def test_unknown_preset_is_unprocessable(client):
    assert client.post("/sim/compare", json={"preset": 99}).status_code == 422
    assert client.post("/sim/init", json={"preset": 99}).status_code == 422


def test_websocket_tick(client):
    with client.websocket_connect("/ws/state") as ws:
        first = ws.receive_json()
        assert first["type"] == "state"
        assert first["data"]["time"] == 0

        ws.send_json({"type": "tick"})
        msg = ws.receive_json()
        assert msg["data"]["time"] == 1

        ws.send_json({"type": "add_process", "process": {"id": 1, "burst_time": 1}})
        err = ws.receive_json()
        assert err["type"] == "error"
        assert ws.receive_json()["type"] == "state"


def test_websocket_survives_malformed_numbers(client):
    with client.websocket_connect("/ws/state") as ws:
        assert ws.receive_json()["data"]["time"] == 0

        # null steps falls back to a single step
        ws.send_json({"type": "run", "steps": None})
        assert ws.receive_json()["data"]["time"] == 1

        ws.send_json({"type": "set_speed", "tick_ms": {"fast": True}})
        state = ws.receive_json()
        assert state["type"] == "state"
        assert state["data"]["config"]["tick_ms"] == 200

        ws.send_json(["not", "an", "object"])
        assert ws.receive_json()["type"] == "error"
        assert ws.receive_json()["data"]["time"] == 1

        ws.send_json({"type": "tick"})
        assert ws.receive_json()["data"]["time"] == 2
