"""
Game configuration.

Scoring weights reflect per-possession vs. cumulative signal:
- BPM: highest impact two-way metric, broad value signal
- WS/48: per-possession win impact
- VORP: cumulative value, penalizes short careers and low minutes
- EPM: external impact proxy

Runtime-tunable values (shot clock, season, directories) live on GameConfig;
everything else is fixed for the game.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

# Draw / lineup
TOTAL_DRAWS = 5
DEFAULT_SEASON = '2024-25'
STATS_LOOKBACK_SEASONS = 3

# Shot clock
DEFAULT_SHOT_CLOCK_SECONDS = 24
SHOT_CLOCK_PENALTY_PLAYER_NAME = 'Shot Clock Violation'

# Share codes (no 0/O, 1/I)
SHARE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
SHARE_CODE_LENGTH = 6
SHARE_CODE_MAX_ATTEMPTS = 20

# Input limits
GROUP_CODE_MAX_LENGTH = 16
SEED_MAX_LENGTH = 64
PLAYER_NAME_MAX_LENGTH = 80

LEADERBOARD_LIMIT = 100

# NBA CDN team ids, used for logo URLs
TEAM_LOGO_URL_TEMPLATE = 'https://cdn.nba.com/logos/nba/{team_id}/global/L/logo.svg'
TEAM_LOGO_IDS = {
    'ATL': '1610612737',
    'BOS': '1610612738',
    'BKN': '1610612751',
    'CHA': '1610612766',
    'CHI': '1610612741',
    'CLE': '1610612739',
    'DAL': '1610612742',
    'DEN': '1610612743',
    'DET': '1610612765',
    'GSW': '1610612744',
    'HOU': '1610612745',
    'IND': '1610612754',
    'LAC': '1610612746',
    'LAL': '1610612747',
    'MEM': '1610612763',
    'MIA': '1610612748',
    'MIL': '1610612749',
    'MIN': '1610612750',
    'NOP': '1610612740',
    'NYK': '1610612752',
    'OKC': '1610612760',
    'ORL': '1610612753',
    'PHI': '1610612755',
    'PHX': '1610612756',
    'POR': '1610612757',
    'SAC': '1610612758',
    'SAS': '1610612759',
    'TOR': '1610612761',
    'UTA': '1610612762',
    'WAS': '1610612764',
}

METRIC_WEIGHTS = {
    'bpm': 0.35,
    'ws48': 0.30,
    'vorp': 0.20,
    'epm': 0.15,
}

METRIC_RANGES = {
    'bpm': {'min': -8.0, 'max': 12.0},
    'ws48': {'min': -0.05, 'max': 0.35},
    'vorp': {'min': -1.0, 'max': 8.0},
    'epm': {'min': -6.0, 'max': 8.0},
}

# Cap on the vorp multiplier for players with fewer seasons than the window
MAX_VORP_SAMPLE_MULTIPLIER = 1.6

POSITION_PROJECTION_LABEL = 'POS_PROJECTION'
DEFAULT_PRIMARY_SLOT = 'SF'

# Replacement-level production by primary slot
POSITION_BASELINES = {
    'PG': {'bpm': 0.8, 'ws48': 0.093, 'vorp': 0.7, 'epm': 0.7},
    'SG': {'bpm': 0.5, 'ws48': 0.089, 'vorp': 0.5, 'epm': 0.4},
    'SF': {'bpm': 0.6, 'ws48': 0.094, 'vorp': 0.6, 'epm': 0.5},
    'PF': {'bpm': 0.7, 'ws48': 0.102, 'vorp': 0.8, 'epm': 0.6},
    'C': {'bpm': 0.9, 'ws48': 0.109, 'vorp': 0.9, 'epm': 0.7},
}


def get_position_baseline(slot: str) -> Dict[str, float]:
    """Get baseline metrics for a slot, falling back to the center baseline."""
    return dict(POSITION_BASELINES.get(slot, POSITION_BASELINES['C']))


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


def _env_positive_float(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    if parsed != parsed or parsed <= 0 or parsed == float('inf'):
        return default
    return parsed


@dataclass(frozen=True)
class GameConfig:
    """Runtime settings for a draft game process."""
    shot_clock_seconds: float = DEFAULT_SHOT_CLOCK_SECONDS
    target_season: str = DEFAULT_SEASON
    lookback_seasons: int = STATS_LOOKBACK_SEASONS
    data_dir: Optional[Path] = None
    store_dir: Optional[Path] = None

    def resolved_data_dir(self) -> Path:
        """Directory holding the reference dataset JSON files."""
        if self.data_dir is not None:
            return Path(self.data_dir)
        return _project_root() / 'data'

    def resolved_store_dir(self) -> Path:
        """Directory holding persisted sessions and runs."""
        if self.store_dir is not None:
            return Path(self.store_dir)
        return _project_root() / 'data' / 'store'

    @classmethod
    def from_env(cls):
        """Build settings from environment variables, using defaults for anything unset."""
        data_dir = os.environ.get('HOOPS_DRAFT_DATA_DIR')
        store_dir = os.environ.get('HOOPS_DRAFT_STORE_DIR')
        return cls(
            shot_clock_seconds=_env_positive_float('SHOT_CLOCK_SECONDS', DEFAULT_SHOT_CLOCK_SECONDS),
            target_season=os.environ.get('DRAFT_TARGET_SEASON') or DEFAULT_SEASON,
            data_dir=Path(data_dir) if data_dir else None,
            store_dir=Path(store_dir) if store_dir else None,
        )
