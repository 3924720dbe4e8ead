import random

import pytest
from fastapi.testclient import TestClient

from mind_reader.game_manager import GameManager
from mind_reader.predictor import Predictor
from mind_reader.web_server import create_app


@pytest.fixture
def client():
    manager = GameManager(predictor=Predictor(rng=random.Random(0)))
    return TestClient(create_app(manager=manager, cfg={}))


def join(client, player_id="p1", username="alice"):
    r = client.post("/api/games", json={"player_id": player_id, "username": username})
    assert r.status_code == 200
    return r.json()["game_id"]


def test_health(client):
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/api/config").json()["choices"] == ["rock", "paper", "scissors"]


def test_round_trip_game(client):
    game_id = join(client)

    r = client.get(f"/api/games/{game_id}/prediction", headers={"X-Api-Key": "sk-ignored"})
    assert r.status_code == 200
    assert r.json()["confidence"] == 35
    assert r.json()["pattern_type"] == "psychological"

    r = client.post(f"/api/games/{game_id}/moves", json={"player_id": "p1", "choice": "paper"})
    assert r.status_code == 200
    body = r.json()
    assert body["ai_choice"] == "paper"
    assert body["winner"] == "tie"
    assert body["correct"] is False
    assert body["scores"] == {"player": 0, "ai": 0}
    assert body["pattern"]["total_moves"] == 1
    assert body["next_prediction"]["prediction"] == "rock"

    for choice in ["rock", "paper", "scissors"]:
        r = client.post(f"/api/games/{game_id}/moves", json={"player_id": "p1", "choice": choice})
        assert r.status_code == 200

    pattern = client.get(f"/api/games/{game_id}/pattern").json()
    assert pattern["frequencies"] == {"rock": 1, "paper": 2, "scissors": 1}
    assert pattern["last_moves"] == ["paper", "rock", "paper", "scissors"]

    stats = client.get("/api/stats").json()
    assert stats["total_moves"] == 4

    r = client.post(f"/api/games/{game_id}/end")
    assert r.status_code == 200
    assert r.json()["status"] == "finished"
    assert client.get(f"/api/games/{game_id}").status_code == 404


def test_errors_map_to_status_codes(client):
    assert client.post("/api/games", json={"player_id": "p1", "username": "al"}).status_code == 400
    assert client.get("/api/games/missing/prediction").status_code == 404

    game_id = join(client)
    r = client.post(f"/api/games/{game_id}/moves", json={"player_id": "p1", "choice": "lizard"})
    assert r.status_code == 400
    r = client.post(f"/api/games/{game_id}/moves", json={"player_id": "intruder", "choice": "rock"})
    assert r.status_code == 403
