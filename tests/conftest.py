"""
Shared fakes for the goal-notifier tests.

Feeds are built as raw NHL play-by-play JSON and go through the real parser,
so the engine tests also cover the field mapping.
"""

from dataclasses import replace

import pytest

from app.config import Config
from app.errors import NotificationDeliveryError, TransientFetchError
from app.sources.nhl import parse_game_feed
from app.models import ScheduledGame
from app.subscriptions import Subscription

TOR_ID = 10
BOS_ID = 6
MTL_ID = 8


def make_player(player_id, first, last, number, team_id, headshot=None):
    return {
        "playerId": player_id,
        "firstName": {"default": first},
        "lastName": {"default": last},
        "sweaterNumber": number,
        "teamId": team_id,
        "headshot": headshot or f"https://assets.nhle.com/mugs/{player_id}.png",
    }


def make_goal(event_id, team_id, scorer_id, assists=(), home_score=1, away_score=0,
              period=1, period_type="REG", time="05:00"):
    details = {
        "eventOwnerTeamId": team_id,
        "scoringPlayerId": scorer_id,
        "homeScore": home_score,
        "awayScore": away_score,
    }
    for i, a in enumerate(assists[:2], start=1):
        details[f"assist{i}PlayerId"] = a
    return {
        "eventId": event_id,
        "typeDescKey": "goal",
        "timeInPeriod": time,
        "periodDescriptor": {"number": period, "periodType": period_type},
        "details": details,
    }


def make_pbp(state="LIVE", goals=(), roster=(), intermission=False,
             home=("TOR", TOR_ID), away=("BOS", BOS_ID), extra_plays=()):
    return {
        "gameState": state,
        "homeTeam": {"abbrev": home[0], "id": home[1]},
        "awayTeam": {"abbrev": away[0], "id": away[1]},
        "rosterSpots": list(roster),
        "plays": list(extra_plays) + list(goals),
        "clock": {"inIntermission": intermission},
    }


class FakeSource:
    def __init__(self):
        self.feeds = {}        # game_id -> raw pbp dict
        self.schedules = {}    # team -> [ScheduledGame]
        self.failing_feeds = set()
        self.failing_teams = set()
        self.feed_calls = []

    def set_schedule(self, team, *games):
        self.schedules[team] = [
            ScheduledGame(game_id=gid, game_date="2026-10-19", game_state=state)
            for gid, state in games
        ]

    def todays_games(self, team_abbrev):
        if team_abbrev in self.failing_teams:
            raise TransientFetchError(f"schedule down for {team_abbrev}")
        return list(self.schedules.get(team_abbrev, []))

    def game_feed(self, game_id):
        self.feed_calls.append(game_id)
        if game_id in self.failing_feeds:
            raise TransientFetchError(f"pbp down for {game_id}")
        return parse_game_feed(game_id, self.feeds[game_id])


class FakeStore:
    def __init__(self, *pairs):
        self.subs = [
            Subscription(id=f"s{i}", topic=topic, team_abbrev=team, created_at="2026-10-19T00:00:00+00:00")
            for i, (topic, team) in enumerate(pairs)
        ]

    def subscribers_for_team(self, team_abbrev):
        return [s for s in self.subs if s.team_abbrev == team_abbrev]

    def distinct_subscribed_teams(self):
        return {s.team_abbrev for s in self.subs}


class RecordingNotifier:
    def __init__(self, failing_topics=()):
        self.sent = []
        self.failing_topics = set(failing_topics)

    def send(self, topic, notification):
        if topic in self.failing_topics:
            raise NotificationDeliveryError(topic, "boom")
        self.sent.append((topic, notification))

    def topics(self):
        return [t for t, _ in self.sent]


class FakeTimer:
    """Stands in for threading.Timer; never fires on its own."""

    created = []

    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def config():
    return replace(
        Config(),
        poll_live_seconds=15,
        poll_intermission_seconds=30,
        poll_pre_game_seconds=180,
        poll_schedule_check_seconds=600,
        catch_up_repoll_seconds=1,
        notifications_enabled=True,
    )


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def fake_timer():
    FakeTimer.created = []
    return FakeTimer


@pytest.fixture
def roster():
    return [
        make_player(101, "Jane", "Doe", 9, TOR_ID),
        make_player(102, "A", "", 11, TOR_ID),
        make_player(103, "B", "", 44, TOR_ID),
        make_player(201, "Brad", "Marchand", 63, BOS_ID),
    ]
