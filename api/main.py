import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.routes import router
from app.config import CONFIG
from app.service import build_goal_notifier

logging.basicConfig(
    level=CONFIG.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    goal_notifier = build_goal_notifier(CONFIG)
    goal_notifier.store.load()
    app.state.goal_notifier = goal_notifier

    teams = sorted(goal_notifier.store.distinct_subscribed_teams())
    logger.info("NHL Goal Notifier starting; active teams: %s", ", ".join(teams) or "(none)")
    goal_notifier.start()
    try:
        yield
    finally:
        goal_notifier.stop()


app = FastAPI(title="NHL Goal Notifier API", lifespan=lifespan)

app.include_router(router)
