# app/config.py
# acts as central place for all tunables; env (.env) overrides the defaults

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Config:
    # NHL public web API (schedule + play-by-play)
    nhl_api_url: str = "https://api-web.nhle.com/v1"

    # ntfy.sh push server
    ntfy_url: str = "https://ntfy.sh"
    notifications_enabled: bool = True

    data_file: Path = Path("data/subscriptions.json")

    # Polling intervals (seconds)
    poll_live_seconds: float = 15
    poll_intermission_seconds: float = 30
    poll_pre_game_seconds: float = 180
    poll_schedule_check_seconds: float = 600
    catch_up_repoll_seconds: float = 1

    # "Today" for the schedule; late games stay on today until the rollover hour
    schedule_timezone: str = "America/New_York"
    day_rollover_hour: int = 5

    http_timeout_seconds: float = 20
    user_agent: str = "NHLGoalNotifier/2.0"

    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def config_from_env() -> Config:
    """
    Build the runtime Config, letting environment variables override defaults.
    """
    d = Config()
    return Config(
        nhl_api_url=os.getenv("NHL_API_URL", d.nhl_api_url).rstrip("/"),
        ntfy_url=os.getenv("NTFY_URL", d.ntfy_url).rstrip("/"),
        notifications_enabled=_env_bool("NOTIFICATIONS_ENABLED", d.notifications_enabled),
        data_file=Path(os.getenv("DATA_FILE", str(d.data_file))),
        poll_live_seconds=_env_float("POLL_LIVE_SECONDS", d.poll_live_seconds),
        poll_intermission_seconds=_env_float("POLL_INTERMISSION_SECONDS", d.poll_intermission_seconds),
        poll_pre_game_seconds=_env_float("POLL_PRE_GAME_SECONDS", d.poll_pre_game_seconds),
        poll_schedule_check_seconds=_env_float("POLL_SCHEDULE_CHECK_SECONDS", d.poll_schedule_check_seconds),
        catch_up_repoll_seconds=_env_float("POLL_CATCH_UP_SECONDS", d.catch_up_repoll_seconds),
        schedule_timezone=os.getenv("SCHEDULE_TZ", d.schedule_timezone),
        day_rollover_hour=int(_env_float("DAY_ROLLOVER_HOUR", d.day_rollover_hour)),
        http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", d.http_timeout_seconds),
        user_agent=os.getenv("USER_AGENT", d.user_agent),
        log_level=os.getenv("LOG_LEVEL", d.log_level).upper(),
    )


CONFIG = config_from_env()
