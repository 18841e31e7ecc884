# app/game_tracker.py

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from app.errors import NotificationDeliveryError, TransientFetchError
from app.messaging import build_goal_notification
from app.models import EventKey, GameFeed, GamePhase, RosterEntry, ScoringPlay
from app.teams import TEAM_BY_ABBREV

logger = logging.getLogger(__name__)


@dataclass
class TrackerRecord:
    game_id: int
    team_abbrevs: Set[str] = field(default_factory=set)
    known_goal_events: Set[EventKey] = field(default_factory=set)
    roster_cache: Dict[int, RosterEntry] = field(default_factory=dict)
    game_state: GamePhase = GamePhase.LIVE


class GameTracker:
    """
    Per-game goal state across poll cycles.

    Each scoring play is keyed by (game_id, event_id); once a key is in
    known_goal_events it never leaves, so a goal is announced at most once
    for the life of the record. Records are dropped as soon as the game is
    final.

    source:   todays_games(team) / game_feed(game_id)
    store:    subscribers_for_team(team)
    notifier: send(topic, Notification)
    """

    def __init__(self, source, store, notifier):
        self.source = source
        self.store = store
        self.notifier = notifier
        self._games: Dict[int, TrackerRecord] = {}
        # process() is called from the poll timer and from catch-up threads
        self._lock = threading.RLock()

    def get(self, game_id: int) -> Optional[TrackerRecord]:
        with self._lock:
            return self._games.get(game_id)

    def discard(self, game_id: int) -> bool:
        """Drop a record without polling it; True if one existed."""
        with self._lock:
            if self._games.pop(game_id, None) is None:
                return False
        logger.info("[tracker] game %s final on schedule, no longer tracked", game_id)
        return True

    def tracked_game_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._games)

    def process(self, game_id: int, team_abbrevs: Iterable[str], catch_up: bool = False) -> GamePhase:
        with self._lock:
            return self._process(game_id, set(team_abbrevs), catch_up)

    def _process(self, game_id: int, team_abbrevs: Set[str], catch_up: bool) -> GamePhase:
        tracker = self._games.get(game_id)
        is_new = tracker is None
        if is_new:
            tracker = TrackerRecord(game_id=game_id)
            self._games[game_id] = tracker
        tracker.team_abbrevs |= team_abbrevs

        try:
            feed = self.source.game_feed(game_id)
        except TransientFetchError as e:
            # keep the fast cadence through a blip rather than backing off
            logger.warning("[pbp] game %s fetch failed: %s", game_id, e)
            return GamePhase.LIVE

        tracker.game_state = feed.phase
        if tracker.game_state is GamePhase.PRE_GAME:
            return GamePhase.PRE_GAME

        tracker.roster_cache.update(feed.roster)

        if catch_up and is_new:
            for play in feed.scoring_plays:
                tracker.known_goal_events.add(EventKey(game_id, play.event_id))
            logger.info("[catch-up] seeded %d existing goal(s) for game %s",
                        len(feed.scoring_plays), game_id)
            if tracker.game_state is GamePhase.POST_GAME:
                del self._games[game_id]
            return tracker.game_state

        for play in feed.scoring_plays:
            key = EventKey(game_id, play.event_id)
            if key in tracker.known_goal_events:
                continue
            tracker.known_goal_events.add(key)
            self._announce(tracker, feed, play)

        if tracker.game_state is GamePhase.POST_GAME:
            del self._games[game_id]
            logger.info("[tracker] game %s final, no longer tracked", game_id)
            return GamePhase.POST_GAME

        if feed.in_intermission:
            return GamePhase.INTERMISSION
        return tracker.game_state

    def _announce(self, tracker: TrackerRecord, feed: GameFeed, play: ScoringPlay) -> None:
        scoring_abbrev = feed.abbrev_for_team_id(play.scoring_team_id)
        if scoring_abbrev is None:
            logger.debug("[goal] game %s event %s has no matching team, skipped",
                         tracker.game_id, play.event_id)
            return
        if scoring_abbrev not in tracker.team_abbrevs:
            return

        subs = self.store.subscribers_for_team(scoring_abbrev)
        if not subs:
            return

        notification = build_goal_notification(feed, play, scoring_abbrev, tracker.roster_cache)
        team = TEAM_BY_ABBREV.get(scoring_abbrev)
        logger.info("[goal] %s GOAL: %s | %s",
                    team.name if team else scoring_abbrev,
                    notification.title,
                    notification.message.splitlines()[0])

        for sub in subs:
            try:
                self.notifier.send(sub.topic, notification)
                logger.info("[goal] notified %s", sub.topic)
            except NotificationDeliveryError as e:
                logger.error("[goal] failed to notify %s: %s", sub.topic, e.reason)
