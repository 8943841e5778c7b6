"""
Lineup scoring.

Each metric is rescaled linearly onto 0-100 inside a fixed range and clamped,
so a player's contribution (a weighted sum of the four) and the team score
(the mean of five contributions) always land in [0, 100].
"""
import math
from dataclasses import replace
from typing import Dict, List, Tuple
import numpy as np
from hoops_draft.models.lineup import (
    METRIC_NAMES,
    LineupPick,
    LineupScore,
    PlayerScore,
    PlayerStats,
    StatsLookup,
)
from hoops_draft.services.game_config import (
    DEFAULT_SEASON,
    MAX_VORP_SAMPLE_MULTIPLIER,
    METRIC_RANGES,
    METRIC_WEIGHTS,
    STATS_LOOKBACK_SEASONS,
)
from hoops_draft.services.stats_resolver import StatsResolver


def round_to_one_decimal(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def normalize_metric(metric: str, value: float) -> float:
    """Rescale a raw metric onto 0-100 using its configured range."""
    bounds = METRIC_RANGES[metric]
    low, high = bounds['min'], bounds['max']
    if high == low:
        return 50.0
    normalized = (value - low) / (high - low) * 100
    return float(np.clip(normalized, 0.0, 100.0))


def score_player(stats: PlayerStats) -> Tuple[PlayerStats, float]:
    """
    Score a single player's stats.

    Returns:
        (normalized_metrics, contribution) where contribution is rounded to one decimal
    """
    normalized: Dict[str, float] = {
        metric: normalize_metric(metric, getattr(stats, metric))
        for metric in METRIC_NAMES
    }
    contribution = sum(normalized[metric] * METRIC_WEIGHTS[metric] for metric in METRIC_NAMES)
    return PlayerStats(**normalized), round_to_one_decimal(contribution)


def adjust_stats_for_season_sample(
    stats: PlayerStats,
    lookup: StatsLookup,
    lookback_window: int = STATS_LOOKBACK_SEASONS
) -> PlayerStats:
    """
    Scale vorp up for players with a short history.

    VORP is cumulative, so a player with one or two seasons inside the window
    is penalized against veterans. The multiplier is window / seasons, capped.
    """
    seasons = lookup.seasons_averaged
    if lookup.used_fallback or seasons <= 0 or seasons >= lookback_window:
        return stats

    multiplier = min(MAX_VORP_SAMPLE_MULTIPLIER, lookback_window / seasons)
    return replace(stats, vorp=round(stats.vorp * multiplier, 3))


def _penalty_score(pick: LineupPick) -> PlayerScore:
    return PlayerScore(
        pick=pick,
        stats=PlayerStats(),
        used_fallback=False,
        normalized_metrics=PlayerStats(),
        contribution=0.0,
        seasons_used=[],
    )


class ScoringEngine:
    """Scores a finished lineup against the stats dataset."""

    def __init__(self, resolver: StatsResolver, season: str = DEFAULT_SEASON):
        self.resolver = resolver
        self.season = season

    def score_pick(self, pick: LineupPick) -> PlayerScore:
        """Score one pick; shot clock penalties skip stats resolution and score zero."""
        if pick.is_penalty:
            return _penalty_score(pick)

        lookup = self.resolver.resolve(pick.player_name, self.season)
        stats = adjust_stats_for_season_sample(
            lookup.stats,
            lookup,
            lookback_window=self.resolver.lookback_window
        )
        normalized, contribution = score_player(stats)
        return PlayerScore(
            pick=pick,
            stats=stats,
            used_fallback=lookup.used_fallback,
            normalized_metrics=normalized,
            contribution=contribution,
            seasons_used=list(lookup.seasons_used),
        )

    def score_lineup(self, picks: List[LineupPick]) -> LineupScore:
        if not picks:
            return LineupScore(team_score=0.0, player_scores=[], used_fallback_stats=False)

        player_scores = [self.score_pick(pick) for pick in picks]
        total = sum(score.contribution for score in player_scores)
        return LineupScore(
            team_score=round_to_one_decimal(total / len(player_scores)),
            player_scores=player_scores,
            used_fallback_stats=any(score.used_fallback for score in player_scores),
        )
