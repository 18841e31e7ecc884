"""
Static NHL team directory.

Contract:
- Abbreviation and numeric NHL team id are both unique keys.
- get_team() raises KeyError if the abbreviation is unknown.
"""

from dataclasses import dataclass, asdict
from typing import Dict


LOGO_URL = "https://assets.nhle.com/logos/nhl/svg/{abbrev}_dark.svg"


@dataclass(frozen=True)
class Team:
    abbrev: str
    id: int
    name: str
    conference: str
    division: str

    def to_dict(self) -> dict:
        return asdict(self)


NHL_TEAMS = [
    # =====================
    # Eastern / Atlantic
    # =====================
    Team("BOS", 6, "Boston Bruins", "Eastern", "Atlantic"),
    Team("BUF", 7, "Buffalo Sabres", "Eastern", "Atlantic"),
    Team("DET", 17, "Detroit Red Wings", "Eastern", "Atlantic"),
    Team("FLA", 13, "Florida Panthers", "Eastern", "Atlantic"),
    Team("MTL", 8, "Montreal Canadiens", "Eastern", "Atlantic"),
    Team("OTT", 9, "Ottawa Senators", "Eastern", "Atlantic"),
    Team("TBL", 14, "Tampa Bay Lightning", "Eastern", "Atlantic"),
    Team("TOR", 10, "Toronto Maple Leafs", "Eastern", "Atlantic"),

    # =====================
    # Eastern / Metropolitan
    # =====================
    Team("CAR", 12, "Carolina Hurricanes", "Eastern", "Metropolitan"),
    Team("CBJ", 29, "Columbus Blue Jackets", "Eastern", "Metropolitan"),
    Team("NJD", 1, "New Jersey Devils", "Eastern", "Metropolitan"),
    Team("NYI", 2, "New York Islanders", "Eastern", "Metropolitan"),
    Team("NYR", 3, "New York Rangers", "Eastern", "Metropolitan"),
    Team("PHI", 4, "Philadelphia Flyers", "Eastern", "Metropolitan"),
    Team("PIT", 5, "Pittsburgh Penguins", "Eastern", "Metropolitan"),
    Team("WSH", 15, "Washington Capitals", "Eastern", "Metropolitan"),

    # =====================
    # Western / Central
    # =====================
    Team("CHI", 16, "Chicago Blackhawks", "Western", "Central"),
    Team("COL", 21, "Colorado Avalanche", "Western", "Central"),
    Team("DAL", 25, "Dallas Stars", "Western", "Central"),
    Team("MIN", 30, "Minnesota Wild", "Western", "Central"),
    Team("NSH", 18, "Nashville Predators", "Western", "Central"),
    Team("STL", 19, "St. Louis Blues", "Western", "Central"),
    Team("UTA", 59, "Utah Mammoth", "Western", "Central"),
    Team("WPG", 52, "Winnipeg Jets", "Western", "Central"),

    # =====================
    # Western / Pacific
    # =====================
    Team("ANA", 24, "Anaheim Ducks", "Western", "Pacific"),
    Team("CGY", 20, "Calgary Flames", "Western", "Pacific"),
    Team("EDM", 22, "Edmonton Oilers", "Western", "Pacific"),
    Team("LAK", 26, "Los Angeles Kings", "Western", "Pacific"),
    Team("SEA", 55, "Seattle Kraken", "Western", "Pacific"),
    Team("SJS", 28, "San Jose Sharks", "Western", "Pacific"),
    Team("VAN", 23, "Vancouver Canucks", "Western", "Pacific"),
    Team("VGK", 54, "Vegas Golden Knights", "Western", "Pacific"),
]

TEAM_BY_ABBREV: Dict[str, Team] = {t.abbrev: t for t in NHL_TEAMS}
TEAM_BY_ID: Dict[int, Team] = {t.id: t for t in NHL_TEAMS}


def get_team(abbrev: str) -> Team:
    """
    Look up a team by abbreviation.

    Raises KeyError if unmapped.
    """
    return TEAM_BY_ABBREV[abbrev]


def is_known_team(abbrev) -> bool:
    return abbrev in TEAM_BY_ABBREV


def team_logo_url(abbrev: str) -> str:
    return LOGO_URL.format(abbrev=abbrev)
