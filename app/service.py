# app/service.py
# wires the engine to its collaborators; one instance per process

import logging
from dataclasses import dataclass

from app.catch_up import CatchUpController
from app.config import CONFIG, Config
from app.game_tracker import GameTracker
from app.messaging import NtfyNotifier
from app.poller import PollScheduler
from app.sources.nhl import NhlClient
from app.subscriptions import SubscriptionStore

logger = logging.getLogger(__name__)


@dataclass
class GoalNotifier:
    config: Config
    store: SubscriptionStore
    source: NhlClient
    notifier: NtfyNotifier
    tracker: GameTracker
    scheduler: PollScheduler
    catch_up: CatchUpController

    def start(self) -> None:
        """Begin continuous polling. Safe to call more than once."""
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def notify_new_subscription(self, team_abbrev: str) -> None:
        self.catch_up.notify_new_subscription(team_abbrev)


def build_goal_notifier(config: Config = CONFIG, store=None, source=None, notifier=None,
                        timer_factory=None) -> GoalNotifier:
    if store is None:
        store = SubscriptionStore(config.data_file)
    if source is None:
        source = NhlClient(config)
    if notifier is None:
        notifier = NtfyNotifier(config)

    tracker = GameTracker(source, store, notifier)
    if timer_factory is None:
        scheduler = PollScheduler(tracker, source, store, config)
    else:
        scheduler = PollScheduler(tracker, source, store, config, timer_factory=timer_factory)
    catch_up = CatchUpController(source, tracker, scheduler, config)

    return GoalNotifier(
        config=config,
        store=store,
        source=source,
        notifier=notifier,
        tracker=tracker,
        scheduler=scheduler,
        catch_up=catch_up,
    )
