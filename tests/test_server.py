import pytest

from schedsim.server import create_app


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _payload(**overrides):
    body = {
        "processes": [
            {"id": 1, "burstTime": 5, "arrivalTime": 0, "priority": 2},
            {"id": 2, "burstTime": 3, "arrivalTime": 1, "priority": 1},
            {"id": 3, "burstTime": 8, "arrivalTime": 2, "priority": 3},
        ],
        "algorithms": {"fcfs": True, "roundRobin": True},
        "timeQuantum": 2,
    }
    body.update(overrides)
    return body


def test_generated_processes(client):
    resp = client.get("/api/processes/5")
    assert resp.status_code == 200
    data = resp.get_json()
    assert [p["id"] for p in data] == [1, 2, 3, 4, 5]
    assert set(data[0]) == {"id", "burstTime", "arrivalTime", "priority"}
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_generated_processes_bad_count(client):
    assert client.get("/api/processes/0").status_code == 400


def test_schedule(client):
    resp = client.post("/api/schedule", json=_payload())
    assert resp.status_code == 200
    fcfs, rr = resp.get_json()
    assert fcfs["name"] == "FCFS"
    assert fcfs["ganttChart"][0] == {"processId": 1, "startTime": 0, "endTime": 5}
    assert rr["name"] == "Round Robin (TQ=2)"
    assert [p["completionTime"] for p in rr["processes"]] == [12, 9, 16]
    assert rr["throughput"] == pytest.approx(3 / 16)


def test_schedule_rejects_zero_burst(client):
    body = _payload()
    body["processes"][1]["burstTime"] = 0
    resp = client.post("/api/schedule", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidProcess"


def test_schedule_requires_an_algorithm(client):
    resp = client.post("/api/schedule", json=_payload(algorithms={"fcfs": False}))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "NoAlgorithmSelected"


def test_schedule_rejects_bad_quantum(client):
    resp = client.post("/api/schedule", json=_payload(timeQuantum=0))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidQuantum"


def test_schedule_rejects_empty_batch(client):
    resp = client.post("/api/schedule", json=_payload(processes=[]))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "EmptyInput"


def test_schedule_rejects_malformed_json(client):
    resp = client.post("/api/schedule", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidJSON"


def test_preflight(client):
    resp = client.open("/api/schedule", method="OPTIONS")
    assert resp.status_code == 204
    assert "Content-Type" in resp.headers["Access-Control-Allow-Headers"]


@pytest.mark.parametrize("field, value", [("burstTime", 2.9), ("burstTime", True), ("arrivalTime", 1.5), ("id", False)])
def test_schedule_rejects_non_integer_process_fields(client, field, value):
    body = _payload()
    body["processes"][0][field] = value
    resp = client.post("/api/schedule", json=body)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidProcess"


@pytest.mark.parametrize("quantum", [0.5, 2.9, "2", True])
def test_schedule_rejects_non_integer_quantum(client, quantum):
    resp = client.post("/api/schedule", json=_payload(timeQuantum=quantum))
    assert resp.status_code == 400
    data = resp.get_json()
    assert data["error"] == "InvalidQuantum"
    assert repr(quantum) in data["message"]


def test_schedule_quantum_defaults_when_absent(client):
    body = _payload()
    del body["timeQuantum"]
    resp = client.post("/api/schedule", json=body)
    assert resp.status_code == 200
    assert resp.get_json()[1]["name"] == "Round Robin (TQ=2)"


def test_schedule_rejects_string_algorithm_flag(client):
    resp = client.post("/api/schedule", json=_payload(algorithms={"fcfs": "false", "sjf": True}))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidJSON"
