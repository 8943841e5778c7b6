"""
Tests for stats resolution.
"""

import pytest
from hoops_draft.services.game_config import POSITION_PROJECTION_LABEL
from hoops_draft.services.stats_resolver import StatsResolver, lookback_seasons, season_start_year


class TestSeasons:
    """Test suite for season helpers."""

    def test_lookback_window(self):
        assert lookback_seasons('2024-25', 3) == ['2024-25', '2023-24', '2022-23']

    def test_century_rollover(self):
        assert lookback_seasons('2000-01', 2) == ['2000-01', '1999-00']

    def test_unparseable_season(self):
        assert season_start_year('latest') is None
        assert lookback_seasons('latest') == ['latest']


class TestStatsResolver:
    """Test suite for StatsResolver."""

    @pytest.fixture
    def resolver(self, reference):
        return StatsResolver(reference, lookback_window=3)

    def test_averages_seasons_in_window(self, resolver):
        lookup = resolver.resolve('ATL Guard', '2024-25')
        assert not lookup.used_fallback
        assert lookup.seasons_averaged == 3
        assert lookup.seasons_used == ['2024-25', '2023-24', '2022-23']
        assert lookup.stats.bpm == pytest.approx(4.0)
        assert lookup.stats.ws48 == pytest.approx(0.15)
        assert lookup.stats.vorp == pytest.approx(2.0)
        assert lookup.key == 'ATL Guard|2024-25'

    def test_single_season(self, resolver):
        lookup = resolver.resolve('BOS Wing', '2024-25')
        assert lookup.seasons_averaged == 1
        assert lookup.stats.vorp == pytest.approx(1.2)

    def test_falls_back_to_most_recent_seasons(self, resolver):
        lookup = resolver.resolve('DEN Big', '2024-25')
        assert not lookup.used_fallback
        assert lookup.seasons_used == ['2019-20', '2018-19']
        assert lookup.stats.bpm == pytest.approx(2.0)

    def test_unknown_player_uses_small_forward_baseline(self, resolver):
        lookup = resolver.resolve('Nobody Special', '2024-25')
        assert lookup.used_fallback
        assert lookup.seasons_used == [POSITION_PROJECTION_LABEL]
        assert lookup.seasons_averaged == 0
        assert lookup.stats.bpm == pytest.approx(0.6)

    def test_player_without_stats_uses_position_baseline(self, resolver):
        lookup = resolver.resolve('ATL Big', '2024-25')
        assert lookup.used_fallback
        assert lookup.stats.ws48 == pytest.approx(0.109)

    def test_earlier_target_season(self, resolver):
        lookup = resolver.resolve('ATL Guard', '2023-24')
        assert lookup.seasons_used == ['2023-24', '2022-23']
        assert lookup.stats.bpm == pytest.approx(3.0)
