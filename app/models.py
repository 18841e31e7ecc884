# app/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple


class GamePhase(str, Enum):
    PRE_GAME = "PRE_GAME"
    LIVE = "LIVE"
    INTERMISSION = "INTERMISSION"  # reported only, never stored on a tracker
    POST_GAME = "POST_GAME"
    IDLE = "IDLE"


# Upstream gameState codes. Anything not listed is IDLE.
_STATE_CODES = {
    "FUT": GamePhase.PRE_GAME,
    "PRE": GamePhase.PRE_GAME,
    "LIVE": GamePhase.LIVE,
    "CRIT": GamePhase.LIVE,
    "OFF": GamePhase.POST_GAME,
    "FINAL": GamePhase.POST_GAME,
}


def map_game_state(code: Optional[str]) -> GamePhase:
    return _STATE_CODES.get(code, GamePhase.IDLE)


class EventKey(NamedTuple):
    game_id: int
    event_id: int


@dataclass(frozen=True)
class TeamRef:
    id: Optional[int]
    abbrev: Optional[str]


@dataclass(frozen=True)
class RosterEntry:
    first_name: str
    last_name: str
    sweater_number: Optional[int]
    team_id: Optional[int]
    headshot: Optional[str]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class ScoringPlay:
    event_id: int
    scoring_team_id: Optional[int]
    scoring_player_id: Optional[int]
    assist_player_ids: Tuple[int, ...]
    home_score: Optional[int]
    away_score: Optional[int]
    period_number: Optional[int]
    period_type: Optional[str]  # REG, OT, SO
    time_in_period: Optional[str]


@dataclass
class GameFeed:
    game_id: int
    game_state: Optional[str]  # raw upstream code
    home: TeamRef
    away: TeamRef
    roster: Dict[int, RosterEntry] = field(default_factory=dict)
    scoring_plays: List[ScoringPlay] = field(default_factory=list)
    in_intermission: bool = False

    @property
    def phase(self) -> GamePhase:
        return map_game_state(self.game_state)

    def abbrev_for_team_id(self, team_id) -> Optional[str]:
        if team_id is None:
            return None
        if team_id == self.home.id:
            return self.home.abbrev
        if team_id == self.away.id:
            return self.away.abbrev
        return None


@dataclass(frozen=True)
class ScheduledGame:
    game_id: int
    game_date: str  # YYYY-MM-DD
    game_state: Optional[str]

    @property
    def phase(self) -> GamePhase:
        return map_game_state(self.game_state)
