# app/catch_up.py

import logging

from app.config import CONFIG, Config
from app.errors import TransientFetchError
from app.models import GamePhase

logger = logging.getLogger(__name__)


class CatchUpController:
    """
    Runs once per new subscription: seeds goals already scored today so the
    subscriber is not flooded with history, then pulls the next poll forward.
    """

    def __init__(self, source, tracker, scheduler, config: Config = CONFIG):
        self.source = source
        self.tracker = tracker
        self.scheduler = scheduler
        self.config = config

    def notify_new_subscription(self, team_abbrev: str) -> int:
        """
        Returns the number of games seeded. Never raises on upstream errors.
        """
        try:
            games = self.source.todays_games(team_abbrev)
        except TransientFetchError as e:
            logger.error("[catch-up] schedule fetch failed for %s: %s", team_abbrev, e)
            return 0

        seeded = 0
        for g in games:
            if g.phase not in (GamePhase.LIVE, GamePhase.PRE_GAME):
                continue
            logger.info("[catch-up] game %s for new %s subscription", g.game_id, team_abbrev)
            try:
                self.tracker.process(g.game_id, [team_abbrev], catch_up=True)
            except Exception:
                logger.exception("[catch-up] game %s failed", g.game_id)
                continue
            seeded += 1

        if seeded:
            self.scheduler.schedule_next(self.config.catch_up_repoll_seconds)
        return seeded
