import json
import random

import pytest

from minesweeper import server
from minesweeper.session import GameSession
from minesweeper.storage import LEADERBOARD_KEY
from minesweeper.types import MoveRequest


class FakeHandle:
    """Stands in for a workflow handle by driving a local GameSession."""

    def __init__(self, client, game_id):
        self.client = client
        self.game_id = game_id

    async def query(self, query):
        return self.client.sessions[self.game_id].snapshot()

    async def execute_update(self, update, arg):
        if isinstance(arg, MoveRequest):
            session = self.client.sessions[self.game_id]
            session.apply(arg)
            return session.snapshot()
        self.client.sessions[self.game_id] = GameSession(arg, rng=random.Random(1), game_id=self.game_id)
        return self.client.sessions[self.game_id].snapshot()

    async def signal(self, signal):
        self.client.closed.append(self.game_id)


class FakeClient:
    def __init__(self):
        self.sessions = {}
        self.started = []
        self.closed = []

    async def start_workflow(self, run, args, id, task_queue):
        game_id, config = args
        self.started.append((id, task_queue))
        self.sessions[game_id] = GameSession(config, rng=random.Random(1), game_id=game_id)

    def get_workflow_handle(self, game_id):
        if game_id not in self.sessions:
            raise KeyError(game_id)
        return FakeHandle(self, game_id)


@pytest.fixture
def client(data_dir, monkeypatch):
    fake = FakeClient()
    monkeypatch.setattr(server, "temporal_client", fake)
    server.app.config["TESTING"] = True
    with server.app.test_client() as test_client:
        test_client.fake = fake
        yield test_client


def create(client, body):
    response = client.post("/api/games", json=body)
    assert response.status_code == 200
    return response.get_json()["gameState"]


def test_create_game_from_difficulty(client):
    state = create(client, {"difficulty": "easy"})
    assert state["configKey"] == "9x9-10"
    assert state["status"] == "READY"
    assert state["statusLabel"] == "Ready"
    assert state["minesLeftDisplay"] == "010"
    assert state["timerDisplay"] == "000"
    assert len(state["board"]["cells"]) == 9
    assert client.fake.started[0][1] == "minesweeper-task-queue"


def test_create_game_rejects_invalid_config(client):
    assert client.post("/api/games", json={"config": {"rows": 3, "cols": 3, "mines": 9}}).status_code == 400
    assert client.post("/api/games", json={"config": {"rows": 3}}).status_code == 400
    assert client.post("/api/games", json={"difficulty": "impossible"}).status_code == 400
    assert client.post("/api/games", data="nope").status_code == 400
    assert client.post("/api/games", json=[1, 2]).status_code == 400
    assert client.post("/api/games", json={"config": [9, 9, 10]}).status_code == 400


def test_custom_difficulty_is_clamped(client):
    state = create(client, {"difficulty": "custom", "config": {"rows": 2, "cols": 50, "mines": 3}})
    assert state["config"] == {"rows": 6, "cols": 40, "mines": 3}
    assert state["difficulty"] == "custom"


def test_custom_difficulty_zero_clamps_to_minimum(client):
    state = create(client, {"difficulty": "custom", "config": {"rows": 0, "cols": 0, "mines": 0}})
    assert state["config"] == {"rows": 6, "cols": 6, "mines": 1}


def test_custom_difficulty_rejects_non_numbers_as_json(client):
    response = client.post("/api/games", json={"difficulty": "custom", "config": {"cols": [1]}})
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_moves_flow_through_session(client):
    game_id = create(client, {"config": {"rows": 9, "cols": 9, "mines": 10}})["id"]

    response = client.post(f"/api/games/{game_id}/moves", json={"action": "reveal", "row": 4, "col": 4})
    state = response.get_json()["gameState"]
    assert state["status"] in ("PLAYING", "WON")
    assert state["board"]["cells"][4][4]["isOpen"]
    assert state["lastOutcome"]["changed"]

    response = client.post(f"/api/games/{game_id}/moves", json={"action": "hint"})
    assert response.get_json()["gameState"]["hintsUsed"] in (0, 1)

    response = client.get(f"/api/games/{game_id}")
    assert response.get_json()["gameState"]["id"] == game_id


def test_invalid_move_is_rejected(client):
    game_id = create(client, {"difficulty": "easy"})["id"]
    assert client.post(f"/api/games/{game_id}/moves", json={"action": "chord"}).status_code == 400
    assert client.post(f"/api/games/{game_id}/moves", json={"action": "reveal", "row": "1"}).status_code == 400
    assert client.post(f"/api/games/{game_id}/moves", json=["reveal"]).status_code == 400


def test_unknown_game(client):
    assert client.get("/api/games/missing").status_code == 404
    assert client.post("/api/games/missing/moves", json={"action": "hint"}).status_code == 500


def test_restart_and_close(client):
    game_id = create(client, {"difficulty": "easy"})["id"]
    client.post(f"/api/games/{game_id}/moves", json={"action": "flag", "row": 0, "col": 0})

    response = client.post(f"/api/games/{game_id}/restart", json={"difficulty": "medium"})
    state = response.get_json()["gameState"]
    assert state["configKey"] == "16x16-40"
    assert state["minesLeft"] == 40

    assert client.post(f"/api/games/{game_id}/close").get_json() == {"closed": True}
    assert client.fake.closed == [game_id]


def test_leaderboard_endpoints(client, data_dir):
    (data_dir / f"{LEADERBOARD_KEY}.json").write_text(json.dumps({"9x9-10": [40, 20]}))

    body = client.get("/api/leaderboard?difficulty=easy").get_json()["leaderboard"]
    assert body["label"] == "Easy"
    assert [entry["time"] for entry in body["entries"]] == [20, 40]
    assert body["empty"] is False

    custom = client.get("/api/leaderboard?rows=8&cols=10&mines=12").get_json()["leaderboard"]
    assert custom["label"] == "Custom 10x8 / 12"
    assert custom["lines"] == ["No records yet"]
    assert custom["empty"] is True

    assert client.get("/api/leaderboard").status_code == 400

    assert client.delete("/api/leaderboard").get_json() == {"cleared": True}
    body = client.get("/api/leaderboard?difficulty=easy").get_json()["leaderboard"]
    assert body["entries"] == []


def test_settings_endpoints(client):
    assert client.get("/api/settings").get_json() == {"soundEnabled": True, "nickname": "Player"}
    response = client.put("/api/settings", json={"nickname": "  Robin  ", "soundEnabled": False})
    assert response.get_json() == {"soundEnabled": False, "nickname": "Robin"}
    assert client.get("/api/settings").get_json()["nickname"] == "Robin"

    assert client.put("/api/settings", json=["Robin"]).status_code == 400


def test_health(client):
    assert client.get("/api/health").get_json()["status"] == "OK"


def test_no_static_frontend_routes(client):
    assert client.get("/").status_code == 404
    assert client.get("/index.html").status_code == 404
