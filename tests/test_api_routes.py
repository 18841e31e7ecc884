"""Tests for the subscription API."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import router
from app.errors import TransientFetchError
from app.service import build_goal_notifier
from app.subscriptions import SubscriptionStore
from conftest import RecordingNotifier


@pytest.fixture
def goal_notifier(tmp_path, config, source, fake_timer):
    return build_goal_notifier(
        config,
        store=SubscriptionStore(tmp_path / "subs.json"),
        source=source,
        notifier=RecordingNotifier(failing_topics={"broken"}),
        timer_factory=fake_timer,
    )


@pytest.fixture
def client(goal_notifier):
    app = FastAPI()
    app.include_router(router)
    app.state.goal_notifier = goal_notifier
    return TestClient(app)


class TestSubscribe:

    def test_subscribe_returns_201_and_runs_catch_up(self, client, goal_notifier, source):
        source.set_schedule("TOR", (1, "FUT"))
        source.feeds[1] = {"gameState": "FUT"}

        resp = client.post("/api/subscribe", json={"topic": " alice! ", "team_abbrev": "TOR"})

        assert resp.status_code == 201
        body = resp.json()["subscription"]
        assert body["topic"] == "alice"
        assert body["team"]["name"] == "Toronto Maple Leafs"
        # background catch-up ran after the response
        assert goal_notifier.tracker.tracked_game_ids() == [1]
        assert goal_notifier.scheduler.next_delay == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"team_abbrev": "TOR"},
            {"topic": "alice"},
            {"topic": "alice", "team_abbrev": "XYZ"},
            {"topic": "a!", "team_abbrev": "TOR"},
        ],
    )
    def test_bad_requests(self, client, payload):
        assert client.post("/api/subscribe", json=payload).status_code == 400

    def test_duplicate_is_conflict(self, client):
        client.post("/api/subscribe", json={"topic": "alice", "team_abbrev": "TOR"})
        resp = client.post("/api/subscribe", json={"topic": "alice", "team_abbrev": "TOR"})

        assert resp.status_code == 409

    def test_list_and_delete(self, client):
        client.post("/api/subscribe", json={"topic": "alice", "team_abbrev": "TOR"})
        client.post("/api/subscribe", json={"topic": "bob", "team_abbrev": "BOS"})

        subs = client.get("/api/subscriptions", params={"topic": "alice"}).json()["subscriptions"]
        assert [s["team_abbrev"] for s in subs] == ["TOR"]

        assert client.delete(f"/api/subscribe/{subs[0]['id']}").json() == {"ok": True}
        assert client.delete(f"/api/subscribe/{subs[0]['id']}").status_code == 404
        assert len(client.get("/api/subscriptions").json()["subscriptions"]) == 1


class TestMisc:

    def test_teams(self, client):
        teams = client.get("/api/teams").json()["teams"]
        assert len(teams) == 32
        assert {"abbrev", "id", "name", "conference", "division"} <= set(teams[0])

    def test_test_notification(self, client, goal_notifier):
        assert client.post("/api/test", json={"topic": "alice", "team_abbrev": "BOS"}).status_code == 200
        topic, n = goal_notifier.notifier.sent[0]
        assert topic == "alice"
        assert "Boston Bruins" in n.title

    def test_test_notification_failure(self, client):
        resp = client.post("/api/test", json={"topic": "broken"})
        assert resp.status_code == 500

    def test_health(self, client):
        client.post("/api/subscribe", json={"topic": "alice", "team_abbrev": "TOR"})

        body = client.get("/api/health").json()
        assert body == {"status": "ok", "subscriptions": 1, "active_teams": ["TOR"], "tracked_games": 0}

    def test_debug_reports_upstream_failures(self, client, goal_notifier):
        goal_notifier.source.check = MagicMock(side_effect=TransientFetchError("down"))
        goal_notifier.notifier.health = MagicMock(return_value="OK (status 200): healthy")

        body = client.get("/api/debug").json()
        assert body["nhl_api"].startswith("FAIL")
        assert body["ntfy_health"].startswith("OK")
        assert body["tracked_games"] == []
