"""Resolves a player's advanced metrics for a target season."""
import re
from typing import List, Optional, Tuple
import numpy as np
from hoops_draft.models.lineup import METRIC_NAMES, PlayerStats, StatsLookup, primary_slot
from hoops_draft.services.game_config import (
    DEFAULT_PRIMARY_SLOT,
    DEFAULT_SEASON,
    POSITION_PROJECTION_LABEL,
    STATS_LOOKBACK_SEASONS,
    get_position_baseline,
)
from hoops_draft.services.reference_data import ReferenceData

_SEASON_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


def season_start_year(season: str) -> Optional[int]:
    """Start year of a "2024-25" style season, or None if it doesn't parse."""
    match = _SEASON_PATTERN.match(season)
    if not match:
        return None
    return int(match.group(1))


def season_from_start_year(start_year: int) -> str:
    return f"{start_year}-{(start_year + 1) % 100:02d}"


def lookback_seasons(target_season: str, window: int = STATS_LOOKBACK_SEASONS) -> List[str]:
    """The target season and the seasons before it, most recent first."""
    start_year = season_start_year(target_season)
    if start_year is None:
        return [target_season]
    return [season_from_start_year(start_year - offset) for offset in range(window)]


def average_stats(stats_list: List[PlayerStats]) -> PlayerStats:
    """Per-metric arithmetic mean across seasons."""
    matrix = np.array([[getattr(stats, metric) for metric in METRIC_NAMES] for stats in stats_list])
    means = matrix.mean(axis=0)
    return PlayerStats(**{metric: float(value) for metric, value in zip(METRIC_NAMES, means)})


class StatsResolver:
    """
    Resolves stats with multi-season averaging.

    Order of preference:
    1. Seasons inside the lookback window ending at the target season
    2. The most recent seasons the player has, up to the window size
    3. A positional baseline (flagged as fallback)
    """

    def __init__(self, reference: ReferenceData, lookback_window: int = STATS_LOOKBACK_SEASONS):
        self.reference = reference
        self.lookback_window = lookback_window

    def resolve(self, player_name: str, target_season: str = DEFAULT_SEASON) -> StatsLookup:
        key = f"{player_name}|{target_season}"
        player_seasons = self.reference.get_player_seasons(player_name)

        if not player_seasons:
            return self._baseline_lookup(player_name, key, target_season)

        resolved = [
            (season, player_seasons[season])
            for season in lookback_seasons(target_season, self.lookback_window)
            if season in player_seasons
        ]
        if not resolved:
            resolved = self._most_recent_seasons(player_seasons)

        return StatsLookup(
            key=key,
            season=target_season,
            stats=average_stats([stats for _, stats in resolved]),
            used_fallback=False,
            seasons_used=[season for season, _ in resolved],
            seasons_averaged=len(resolved),
        )

    def _most_recent_seasons(self, player_seasons: dict) -> List[Tuple[str, PlayerStats]]:
        # Unparseable seasons sort as year 0, i.e. last
        ordered = sorted(
            player_seasons.items(),
            key=lambda item: season_start_year(item[0]) or 0,
            reverse=True
        )
        return ordered[:self.lookback_window]

    def _baseline_lookup(self, player_name: str, key: str, target_season: str) -> StatsLookup:
        slot = primary_slot(
            self.reference.get_recorded_positions(player_name),
            default=DEFAULT_PRIMARY_SLOT
        )
        return StatsLookup(
            key=key,
            season=target_season,
            stats=PlayerStats.from_dict(get_position_baseline(slot)),
            used_fallback=True,
            seasons_used=[POSITION_PROJECTION_LABEL],
            seasons_averaged=0,
        )
