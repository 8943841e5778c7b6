"""Pytest configuration and fixtures for tests."""
import random
from datetime import datetime, timedelta, timezone
import pytest
from hoops_draft.models.lineup import Team
from hoops_draft.services.draft_service import DraftService
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.game_config import GameConfig
from hoops_draft.services.reference_data import ReferenceData
from hoops_draft.services.run_service import RunService

T0 = datetime(2025, 1, 15, 20, 0, 0, tzinfo=timezone.utc)

TEST_TEAMS = [
    Team('ATL', 'Atlanta Hawks'),
    Team('BOS', 'Boston Celtics'),
    Team('CHI', 'Chicago Bulls'),
    Team('DAL', 'Dallas Mavericks'),
    Team('DEN', 'Denver Nuggets'),
    Team('GSW', 'Golden State Warriors'),
    Team('MIL', 'Milwaukee Bucks'),
]


class FakeClock:
    """Controllable clock; call it to get the current time."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def random(self):
        return self.value


def utility_player(team_abbr: str) -> str:
    """Name of the team's player with no recorded position (eligible everywhere)."""
    return f'{team_abbr} Utility'


def build_test_reference() -> ReferenceData:
    """
    Seven teams, four players each.

    Every team has a guard (PG/SG), a wing (SF/PF), a big (C) and a utility
    player with no recorded position. Only a few players have stats.
    """
    rosters = {}
    positions = {}
    for team in TEST_TEAMS:
        guard = f'{team.abbr} Guard'
        wing = f'{team.abbr} Wing'
        big = f'{team.abbr} Big'
        rosters[team.abbr] = [guard, wing, big, utility_player(team.abbr)]
        positions[guard] = ['PG', 'SG']
        positions[wing] = ['SF', 'PF']
        positions[big] = ['C']

    stats = {
        'ATL Guard|2022-23': {'bpm': 2.0, 'ws48': 0.100, 'vorp': 1.0, 'epm': 1.0},
        'ATL Guard|2023-24': {'bpm': 4.0, 'ws48': 0.150, 'vorp': 2.0, 'epm': 2.0},
        'ATL Guard|2024-25': {'bpm': 6.0, 'ws48': 0.200, 'vorp': 3.0, 'epm': 3.0},
        'BOS Wing|2024-25': {'bpm': 5.0, 'ws48': 0.180, 'vorp': 1.2, 'epm': 2.5},
        'DEN Big|2019-20': {'bpm': 3.0, 'ws48': 0.120, 'vorp': 2.0, 'epm': 1.5},
        'DEN Big|2018-19': {'bpm': 1.0, 'ws48': 0.080, 'vorp': 1.0, 'epm': 0.5},
    }
    return ReferenceData(TEST_TEAMS, rosters, player_positions=positions, stats=stats)


@pytest.fixture
def reference():
    """Synthetic reference dataset."""
    return build_test_reference()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config(tmp_path):
    """Game settings pointing the store at a temporary directory."""
    return GameConfig(shot_clock_seconds=24, store_dir=tmp_path / 'store')


@pytest.fixture
def store(config):
    return DraftStore(config.resolved_store_dir())


@pytest.fixture
def draft_service(reference, store, config, clock):
    """Draft service with a fake clock and a deterministic random source."""
    return DraftService(reference, store, config=config, clock=clock, rng=random.Random(1234))


@pytest.fixture
def run_service(store):
    return RunService(store)
