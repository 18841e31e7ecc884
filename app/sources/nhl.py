# app/sources/nhl.py

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

import requests

from app.config import CONFIG, Config
from app.errors import TransientFetchError
from app.models import GameFeed, RosterEntry, ScheduledGame, ScoringPlay, TeamRef

logger = logging.getLogger(__name__)


def _safe_int(x) -> Optional[int]:
    try:
        return int(x)
    except (TypeError, ValueError):
        return None


def _localized(value) -> str:
    """
    Names come back either as plain strings or as {"default": "...", "fr": ...}.
    """
    if isinstance(value, dict):
        return value.get("default") or ""
    return value or ""


def sports_day(now_utc: datetime, tz: str, rollover_hour: int = 5) -> str:
    now_local = now_utc.astimezone(ZoneInfo(tz))
    # Sports day rolls over at rollover_hour local, so late games stay on "today"
    if now_local.hour < rollover_hour:
        day = now_local.date() - timedelta(days=1)
    else:
        day = now_local.date()
    return day.isoformat()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_team_schedule(data: dict, day: str) -> List[ScheduledGame]:
    """
    Club week schedule -> games played on `day` (YYYY-MM-DD).
    """
    games: List[ScheduledGame] = []
    for g in (data or {}).get("games") or []:
        if not isinstance(g, dict):
            continue
        if g.get("gameDate") != day:
            continue
        game_id = _safe_int(g.get("id"))
        if game_id is None:
            continue
        games.append(ScheduledGame(game_id=game_id, game_date=day, game_state=g.get("gameState")))
    return games


def parse_roster(spots) -> dict:
    roster = {}
    for p in spots or []:
        if not isinstance(p, dict):
            continue
        player_id = _safe_int(p.get("playerId"))
        if player_id is None:
            continue
        roster[player_id] = RosterEntry(
            first_name=_localized(p.get("firstName")),
            last_name=_localized(p.get("lastName")),
            sweater_number=_safe_int(p.get("sweaterNumber")),
            team_id=_safe_int(p.get("teamId")),
            headshot=p.get("headshot"),
        )
    return roster


def parse_scoring_play(play: dict) -> Optional[ScoringPlay]:
    event_id = _safe_int(play.get("eventId"))
    if event_id is None:
        return None

    details = play.get("details") or {}
    period = play.get("periodDescriptor") or {}

    assists = []
    for key in ("assist1PlayerId", "assist2PlayerId"):
        player_id = _safe_int(details.get(key))
        if player_id is not None:
            assists.append(player_id)

    return ScoringPlay(
        event_id=event_id,
        scoring_team_id=_safe_int(details.get("eventOwnerTeamId")),
        scoring_player_id=_safe_int(details.get("scoringPlayerId")),
        assist_player_ids=tuple(assists),
        home_score=_safe_int(details.get("homeScore")),
        away_score=_safe_int(details.get("awayScore")),
        period_number=_safe_int(period.get("number")),
        period_type=period.get("periodType"),
        time_in_period=play.get("timeInPeriod"),
    )


def parse_game_feed(game_id: int, data: dict) -> GameFeed:
    data = data or {}
    home = data.get("homeTeam") or {}
    away = data.get("awayTeam") or {}

    plays = []
    for p in data.get("plays") or []:
        if not isinstance(p, dict):
            continue
        if p.get("typeDescKey") != "goal":
            continue
        parsed = parse_scoring_play(p)
        if parsed is not None:
            plays.append(parsed)

    return GameFeed(
        game_id=game_id,
        game_state=data.get("gameState"),
        home=TeamRef(id=_safe_int(home.get("id")), abbrev=home.get("abbrev")),
        away=TeamRef(id=_safe_int(away.get("id")), abbrev=away.get("abbrev")),
        roster=parse_roster(data.get("rosterSpots")),
        scoring_plays=plays,
        in_intermission=bool((data.get("clock") or {}).get("inIntermission")),
    )


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

class NhlClient:
    """
    Thin client over the NHL web API. Every failure surfaces as
    TransientFetchError so callers can skip the team/game for this cycle.
    """

    def __init__(self, config: Config = CONFIG, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.user_agent})

    def _get_json(self, path: str) -> dict:
        url = f"{self.config.nhl_api_url}{path}"
        try:
            resp = self.session.get(url, timeout=self.config.http_timeout_seconds)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise TransientFetchError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise TransientFetchError(f"JSON parse failed for {url}: {e}") from e

    def today(self) -> str:
        return sports_day(
            datetime.now(tz=ZoneInfo("UTC")),
            self.config.schedule_timezone,
            self.config.day_rollover_hour,
        )

    def todays_games(self, team_abbrev: str) -> List[ScheduledGame]:
        day = self.today()
        data = self._get_json(f"/club-schedule/{team_abbrev}/week/{day}")
        return parse_team_schedule(data, day)

    def game_feed(self, game_id: int) -> GameFeed:
        data = self._get_json(f"/gamecenter/{game_id}/play-by-play")
        return parse_game_feed(game_id, data)

    def check(self) -> int:
        """
        Connectivity check; returns the number of games on the first day of this week.
        """
        data = self._get_json("/schedule/now")
        week = data.get("gameWeek") or []
        return len((week[0] if week else {}).get("games") or [])
