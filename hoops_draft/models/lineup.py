"""Lineup, roster and player stat models."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


# Display order matters: picks and run breakdowns are always listed PG -> C
LINEUP_SLOTS = ['PG', 'SG', 'SF', 'PF', 'C']

STATUS_DRAFTING = 'DRAFTING'
STATUS_COMPLETED = 'COMPLETED'
DRAFT_STATUSES = [STATUS_DRAFTING, STATUS_COMPLETED]

METRIC_NAMES = ['bpm', 'ws48', 'vorp', 'epm']


@dataclass(frozen=True)
class Team:
    """An NBA franchise from the reference dataset."""
    abbr: str
    name: str

    def to_dict(self):
        return {'abbr': self.abbr, 'name': self.name}


@dataclass
class RosterPlayer:
    """A player on a team roster with the lineup slots they can fill."""
    name: str
    eligible_slots: List[str] = field(default_factory=lambda: list(LINEUP_SLOTS))

    def to_dict(self):
        return {'name': self.name, 'eligible_slots': list(self.eligible_slots)}


@dataclass
class LineupPick:
    """A player locked into a single lineup slot."""
    slot: str
    player_name: str
    team_abbr: str
    team_name: str
    is_penalty: bool = False

    def to_dict(self):
        return {
            'slot': self.slot,
            'player_name': self.player_name,
            'team_abbr': self.team_abbr,
            'team_name': self.team_name,
            'is_penalty': self.is_penalty,
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create a pick from a dictionary, raising on a malformed entry."""
        slot = data['slot']
        player_name = data['player_name']
        team_abbr = data['team_abbr']
        team_name = data['team_name']
        for value in (slot, player_name, team_abbr, team_name):
            if not isinstance(value, str):
                raise TypeError(f'Lineup pick fields must be strings, got {value!r}')
        if slot not in LINEUP_SLOTS:
            raise ValueError(f'Unknown lineup slot {slot!r}')
        return cls(
            slot=slot,
            player_name=player_name,
            team_abbr=team_abbr,
            team_name=team_name,
            is_penalty=bool(data.get('is_penalty', False)),
        )


@dataclass
class PlayerStats:
    """The four advanced metrics used for scoring."""
    bpm: float = 0.0
    ws48: float = 0.0
    vorp: float = 0.0
    epm: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'bpm': self.bpm,
            'ws48': self.ws48,
            'vorp': self.vorp,
            'epm': self.epm,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            bpm=float(data.get('bpm', 0.0)),
            ws48=float(data.get('ws48', 0.0)),
            vorp=float(data.get('vorp', 0.0)),
            epm=float(data.get('epm', 0.0)),
        )


@dataclass
class StatsLookup:
    """
    Result of resolving a player's stats for a target season.

    seasons_averaged is 0 when the positional baseline was used.
    """
    key: str
    season: str
    stats: PlayerStats
    used_fallback: bool
    seasons_used: List[str] = field(default_factory=list)
    seasons_averaged: int = 0


@dataclass
class PlayerScore:
    """Scored breakdown for one pick of a lineup."""
    pick: LineupPick
    stats: PlayerStats
    used_fallback: bool
    normalized_metrics: PlayerStats
    contribution: float
    seasons_used: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'pick': self.pick.to_dict(),
            'stats': self.stats.to_dict(),
            'used_fallback': self.used_fallback,
            'normalized_metrics': self.normalized_metrics.to_dict(),
            'contribution': self.contribution,
            'seasons_used': list(self.seasons_used),
        }


@dataclass
class LineupScore:
    """Team score plus the per-player breakdown."""
    team_score: float
    player_scores: List[PlayerScore] = field(default_factory=list)
    used_fallback_stats: bool = False

    def to_dict(self):
        return {
            'team_score': self.team_score,
            'player_scores': [score.to_dict() for score in self.player_scores],
            'used_fallback_stats': self.used_fallback_stats,
        }


def ordered_picks(lineup: Dict[str, LineupPick]) -> List[LineupPick]:
    """Return the filled picks of a lineup in slot display order."""
    return [lineup[slot] for slot in LINEUP_SLOTS if lineup.get(slot) is not None]


def lineup_to_dict(lineup: Dict[str, LineupPick]) -> Dict[str, dict]:
    """Convert a lineup mapping to plain dictionaries, keeping slot order."""
    return {slot: lineup[slot].to_dict() for slot in LINEUP_SLOTS if slot in lineup}


def primary_slot(eligible_slots: Optional[List[str]], default: str = 'SF') -> str:
    """First eligible slot of a player, used to pick a positional baseline."""
    if eligible_slots:
        return eligible_slots[0]
    return default
