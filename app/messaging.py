# app/messaging.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from app.config import CONFIG, Config
from app.errors import NotificationDeliveryError
from app.models import GameFeed, RosterEntry, ScoringPlay
from app.teams import Team, team_logo_url

logger = logging.getLogger(__name__)

GOAL_PRIORITY = 5
TEST_PRIORITY = 3


@dataclass
class Notification:
    title: str
    message: str
    image_url: Optional[str] = None
    icon_url: Optional[str] = None
    priority: int = 4
    tags: List[str] = field(default_factory=lambda: ["ice_hockey", "goal"])

    def to_ntfy(self, topic: str) -> dict:
        payload = {
            "topic": topic,
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
            "tags": list(self.tags),
        }
        if self.image_url:
            payload["attach"] = self.image_url
        if self.icon_url:
            payload["icon"] = self.icon_url
        return payload


# ---------------------------------------------------------------------------
# Message formatting
# ---------------------------------------------------------------------------

def _score(value) -> str:
    return "?" if value is None else str(value)


def format_period(play: ScoringPlay) -> str:
    """
    "P2 07:14" in regulation, "OT 03:10" in overtime. Shootouts keep the
    period number.
    """
    if play.period_type == "OT":
        label = "OT"
    elif play.period_number is not None:
        label = f"P{play.period_number}"
    else:
        return ""
    return f"{label} {play.time_in_period or ''}".strip()


def format_score_line(feed: GameFeed, play: ScoringPlay, scoring_abbrev: str) -> str:
    if scoring_abbrev == feed.home.abbrev:
        opponent = feed.away.abbrev
        mine, theirs = play.home_score, play.away_score
    else:
        opponent = feed.home.abbrev
        mine, theirs = play.away_score, play.home_score
    return f"{scoring_abbrev} {_score(mine)} - {opponent} {_score(theirs)}"


def build_goal_notification(
    feed: GameFeed,
    play: ScoringPlay,
    scoring_abbrev: str,
    roster: Dict[int, RosterEntry],
) -> Notification:
    """
    Build the push for one goal. Missing roster data degrades to "Unknown".
    """
    scorer = roster.get(play.scoring_player_id)
    scorer_name = scorer.full_name if scorer else "Unknown"
    scorer_num = f"#{scorer.sweater_number}" if scorer and scorer.sweater_number else ""

    assists = []
    for player_id in play.assist_player_ids[:2]:
        a = roster.get(player_id)
        if a:
            assists.append(a.full_name)
    assist_line = f"Assists: {', '.join(assists)}" if assists else "Unassisted"

    lines = [
        format_score_line(feed, play, scoring_abbrev),
        format_period(play),
        assist_line,
    ]

    return Notification(
        title=f"🚨 GOAL! {scorer_name} {scorer_num}".strip(),
        message="\n".join(lines),
        image_url=scorer.headshot if scorer else None,
        icon_url=team_logo_url(scoring_abbrev),
        priority=GOAL_PRIORITY,
    )


def build_test_notification(team: Optional[Team]) -> Notification:
    name = team.name if team else "NHL"
    abbrev = team.abbrev if team else "NHL"
    return Notification(
        title=f"🧪 Test: {name} Goal Alerts",
        message=f"Notifications are working!\nYou'll be notified when {name} scores.",
        icon_url=team_logo_url(abbrev),
        priority=TEST_PRIORITY,
    )


# ---------------------------------------------------------------------------
# ntfy sending
# ---------------------------------------------------------------------------

class NtfyNotifier:
    """
    Posts notifications to an ntfy server. With notifications disabled it
    only logs what would have been sent.
    """

    def __init__(self, config: Config = CONFIG, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def send(self, topic: str, notification: Notification) -> None:
        if not self.config.notifications_enabled:
            logger.info("[ntfy disabled] %s -> %s | %s", topic, notification.title,
                        notification.message.replace("\n", " | "))
            return

        try:
            resp = self.session.post(
                self.config.ntfy_url,
                json=notification.to_ntfy(topic),
                timeout=self.config.http_timeout_seconds,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise NotificationDeliveryError(topic, str(e)) from e

    def health(self) -> str:
        url = f"{self.config.ntfy_url}/v1/health"
        resp = self.session.get(url, timeout=self.config.http_timeout_seconds)
        return f"OK (status {resp.status_code}): {resp.text.strip()}"
