# app/subscriptions.py

import json
import logging
import re
import secrets
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Set

from app.errors import (
    DuplicateSubscriptionError,
    InvalidSubscriptionError,
    SubscriptionNotFoundError,
)
from app.teams import is_known_team

logger = logging.getLogger(__name__)

MIN_TOPIC_LENGTH = 3
_UNSAFE_TOPIC_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


@dataclass
class Subscription:
    id: str
    topic: str
    team_abbrev: str
    created_at: str  # ISO UTC


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def clean_topic(raw: str) -> str:
    """
    Strip whitespace and drop anything outside [A-Za-z0-9_-].

    Raises InvalidSubscriptionError if fewer than 3 characters survive.
    """
    clean = _UNSAFE_TOPIC_CHARS.sub("", (raw or "").strip())
    if len(clean) < MIN_TOPIC_LENGTH:
        raise InvalidSubscriptionError(f"Topic must be {MIN_TOPIC_LENGTH}+ characters")
    return clean


class SubscriptionStore:
    """
    JSON-file backed list of {topic, team} pairs.

    API handlers run on a worker thread pool while the poller reads from its
    timer thread, so every access goes through one lock.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._subs: List[Subscription] = []
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            self._subs = []
            if not self.path.exists():
                return 0
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                self._subs = [Subscription(**row) for row in raw]
            except (OSError, ValueError, TypeError) as e:
                logger.error("[subs] failed to load %s: %s", self.path, e)
                self._subs = []
            logger.info("[subs] loaded %d subscription(s)", len(self._subs))
            return len(self._subs)

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps([asdict(s) for s in self._subs], indent=2),
            encoding="utf-8",
        )

    def add(self, topic: str, team_abbrev: str) -> Subscription:
        topic = clean_topic(topic)
        if not is_known_team(team_abbrev):
            raise InvalidSubscriptionError("Invalid team")

        with self._lock:
            for s in self._subs:
                if s.topic == topic and s.team_abbrev == team_abbrev:
                    raise DuplicateSubscriptionError("You are already subscribed to this team")

            sub = Subscription(
                id=secrets.token_hex(6),
                topic=topic,
                team_abbrev=team_abbrev,
                created_at=utc_now_iso(),
            )
            self._subs.append(sub)
            self._save()
        return sub

    def remove(self, sub_id: str) -> Subscription:
        with self._lock:
            for i, s in enumerate(self._subs):
                if s.id == sub_id:
                    del self._subs[i]
                    self._save()
                    return s
        raise SubscriptionNotFoundError("Not found")

    def list(self, topic: Optional[str] = None) -> List[Subscription]:
        with self._lock:
            if topic is None:
                return list(self._subs)
            return [s for s in self._subs if s.topic == topic]

    def subscribers_for_team(self, team_abbrev: str) -> List[Subscription]:
        with self._lock:
            return [s for s in self._subs if s.team_abbrev == team_abbrev]

    def distinct_subscribed_teams(self) -> Set[str]:
        with self._lock:
            return {s.team_abbrev for s in self._subs}

    def __len__(self) -> int:
        with self._lock:
            return len(self._subs)
