from __future__ import annotations

import os

from conftest import F, R, act, make_node, make_solution
from fastapi.testclient import TestClient

from gtodrill.core.config import TrainerConfig
from gtodrill.data.solution_loader import DEMO_SOLUTION, SolutionRepository
from gtodrill.web.app import _solution_paths, create_app

BASE = "/api/v1/trainer"


def _client(demo_solution) -> TestClient:
    app = create_app(SolutionRepository([demo_solution]), config=TrainerConfig())
    return TestClient(app)


def _create(client: TestClient, **body) -> str:
    response = client.post(BASE, json=body)
    assert response.status_code == 200, response.text
    return response.json()["session"]


def test_healthz(demo_solution) -> None:
    client = _client(demo_solution)
    assert client.get("/healthz").json() == {"status": "ok"}


def test_spot_answer_summary_flow(demo_solution) -> None:
    client = _client(demo_solution)
    sid = _create(client, seed=3, spot_types="RFI,vs Open")

    spot_resp = client.post(f"{BASE}/{sid}/spot")
    assert spot_resp.status_code == 200
    payload = spot_resp.json()
    assert payload["ok"] is True
    spot = payload["spot"]
    assert spot["spot_type"] in ("RFI", "vs Open")
    assert spot["solution_id"] == demo_solution.solution_id
    assert [option["index"] for option in spot["options"]] == list(range(len(spot["options"])))

    answer = client.post(f"{BASE}/{sid}/answer", json={"choice": 0})
    assert answer.status_code == 200
    feedback = answer.json()["feedback"]
    assert feedback["quality"] in ("best", "correct", "inaccuracy", "mistake", "blunder")
    assert answer.json()["summary"]["questions"] == 1

    summary = client.get(f"{BASE}/{sid}/summary").json()
    assert summary["questions"] == 1
    assert set(summary["tiers"]) == {"best", "correct", "inaccuracy", "mistake", "blunder"}


def test_unknown_session_is_404(demo_solution) -> None:
    client = _client(demo_solution)
    assert client.post(f"{BASE}/nope/spot").status_code == 404
    assert client.post(f"{BASE}/nope/answer", json={"choice": 0}).status_code == 404
    assert client.get(f"{BASE}/nope/summary").status_code == 404


def test_answer_errors_are_400(demo_solution) -> None:
    client = _client(demo_solution)
    sid = _create(client, seed=5, spot_types=["RFI"])

    assert client.post(f"{BASE}/{sid}/answer", json={"choice": 0}).status_code == 400

    client.post(f"{BASE}/{sid}/spot")
    out_of_range = client.post(f"{BASE}/{sid}/answer", json={"choice": 99})
    assert out_of_range.status_code == 400
    assert "out of range" in out_of_range.json()["detail"]


def test_create_session_validates_spot_types(demo_solution) -> None:
    client = _client(demo_solution)
    response = client.post(BASE, json={"spot_types": "RFI,Limp"})
    assert response.status_code == 422


def test_busted_session_is_400() -> None:
    root = make_node(0, 0, [act(F), act(R, 200, 1)], {"AA": ((0.0, 1.0), (0.0, 1.5))})
    solution = make_solution([root, make_node(1, 1, [act(F)])], stacks=(1000, 1000), solution_id="hu")
    client = TestClient(create_app(SolutionRepository([solution]), config=TrainerConfig()))
    sid = _create(client, seed=11, spot_types="RFI", lives=1)

    assert client.post(f"{BASE}/{sid}/spot").json()["ok"] is True
    result = client.post(f"{BASE}/{sid}/answer", json={"choice": 0}).json()

    assert result["feedback"]["quality"] == "blunder"
    assert result["summary"]["busted"] is True
    busted = client.post(f"{BASE}/{sid}/spot")
    assert busted.status_code == 400
    assert "out of lives" in busted.json()["detail"]


def test_solution_paths_expand_directories(tmp_path) -> None:
    (tmp_path / "b.json").write_text("{}", encoding="utf-8")
    (tmp_path / "a.json").write_text("{}", encoding="utf-8")
    single = tmp_path / "extra.txt"

    paths = _solution_paths(f"{tmp_path}{os.pathsep}{single}{os.pathsep}")

    assert paths == [tmp_path / "a.json", tmp_path / "b.json", single]
    assert _solution_paths(None) == [DEMO_SOLUTION]


def test_app_serves_bundled_demo_and_restarts_executor() -> None:
    app = create_app(config=TrainerConfig(spot_types=("RFI",)), solution_paths=[DEMO_SOLUTION])

    for _ in range(2):
        with TestClient(app) as client:
            sid = _create(client, seed=1)
            assert client.get(f"{BASE}/{sid}/summary").json()["questions"] == 0


def test_create_session_accepts_bounty_display(demo_solution) -> None:
    client = _client(demo_solution)
    sid = _create(client, seed=2, spot_types="RFI", bounty_in_dollars=True)

    spot = client.post(f"{BASE}/{sid}/spot").json()["spot"]

    assert spot["bounties"][2] == "$1500.00"
