# app/poller.py

import logging
import threading
from typing import Dict, Iterable, Optional, Set

from app.config import CONFIG, Config
from app.errors import TransientFetchError
from app.models import GamePhase

logger = logging.getLogger(__name__)


def pick_next_delay(phases: Iterable[GamePhase], config: Config = CONFIG) -> float:
    """
    Most urgent phase wins: LIVE > INTERMISSION > PRE_GAME > nothing going on.
    """
    seen = set(phases)
    if GamePhase.LIVE in seen:
        return config.poll_live_seconds
    if GamePhase.INTERMISSION in seen:
        return config.poll_intermission_seconds
    if GamePhase.PRE_GAME in seen:
        return config.poll_pre_game_seconds
    return config.poll_schedule_check_seconds


class PollScheduler:
    """
    Self re-arming poll loop with exactly one pending timer.

    schedule_next() cancels whatever is pending before arming the new timer,
    so a catch-up re-poll simply replaces the scheduled cycle. Cycle bodies
    are serialized, so an early re-poll waits for a running cycle to finish.
    """

    def __init__(self, tracker, source, store, config: Config = CONFIG, timer_factory=threading.Timer):
        self.tracker = tracker
        self.source = source
        self.store = store
        self.config = config
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._cycle_lock = threading.Lock()
        self._started = False
        self._stopped = False
        self.next_delay: Optional[float] = None

    def start(self) -> None:
        with self._timer_lock:
            if self._started:
                return
            self._started = True
        self.schedule_next(0)

    def stop(self) -> None:
        with self._timer_lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def schedule_next(self, delay: float) -> None:
        with self._timer_lock:
            if self._stopped:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(delay, self._fire)
            self._timer.daemon = True
            self._timer.start()
            self.next_delay = delay
        logger.info("[poll] next poll in %ss", round(delay))

    def _fire(self) -> None:
        delay = self.config.poll_schedule_check_seconds
        try:
            with self._cycle_lock:
                delay = self.run_cycle()
        except Exception:
            logger.exception("[poll] cycle failed")
        finally:
            self.schedule_next(delay)

    def collect_games(self, teams: Iterable[str]) -> Dict[int, Set[str]]:
        """
        game id -> subscribed teams playing in it. Finished games are skipped
        and any tracker still held for them is dropped.
        """
        game_teams: Dict[int, Set[str]] = {}
        for team in sorted(teams):
            try:
                games = self.source.todays_games(team)
            except TransientFetchError as e:
                logger.warning("[poll] schedule fetch failed for %s: %s", team, e)
                continue
            for g in games:
                if g.phase is GamePhase.POST_GAME:
                    self.tracker.discard(g.game_id)
                    continue
                game_teams.setdefault(g.game_id, set()).add(team)
        return game_teams

    def run_cycle(self) -> float:
        """
        One full pass over every subscribed team's games. Returns the next delay.
        """
        teams = self.store.distinct_subscribed_teams()
        if not teams:
            logger.info("[poll] no subscriptions")
            return self.config.poll_schedule_check_seconds

        logger.info("[poll] polling %d team(s): %s", len(teams), ", ".join(sorted(teams)))

        phases = []
        for game_id, team_set in self.collect_games(teams).items():
            try:
                phases.append(self.tracker.process(game_id, team_set))
            except Exception:
                logger.exception("[poll] game %s failed", game_id)

        return pick_next_delay(phases, self.config)
