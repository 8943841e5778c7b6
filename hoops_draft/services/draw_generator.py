"""Team draws for a draft session."""
from typing import List, Optional
from hoops_draft.models.lineup import Team
from hoops_draft.services.errors import CapacityError
from hoops_draft.services.game_config import TOTAL_DRAWS
from hoops_draft.services.rng import RandomSource, SeededRandom, system_random


def shuffle_teams(teams: List[Team], rng: RandomSource) -> List[Team]:
    """Fisher-Yates shuffle of a copy of the team list."""
    shuffled = list(teams)
    for i in range(len(shuffled) - 1, 0, -1):
        swap_index = int(rng.random() * (i + 1))
        shuffled[i], shuffled[swap_index] = shuffled[swap_index], shuffled[i]
    return shuffled


def draw_teams(
    teams: List[Team],
    count: int = TOTAL_DRAWS,
    seed: Optional[str] = None,
    rng: Optional[RandomSource] = None
) -> List[Team]:
    """
    Draw distinct teams in order.

    Args:
        teams: Pool to draw from
        count: Number of teams to draw
        seed: When set, the draw is reproducible for this seed
        rng: Source for unseeded draws (defaults to the system source)

    Returns:
        The first `count` teams of a shuffled copy of the pool
    """
    if count <= 0:
        return []

    if count > len(teams):
        raise CapacityError(f'Cannot draw {count} teams from {len(teams)}')

    if seed:
        source = SeededRandom(seed)
    else:
        source = rng if rng is not None else system_random()

    return shuffle_teams(teams, source)[:count]


def build_draw_sequence(
    teams: List[Team],
    seed: Optional[str] = None,
    rng: Optional[RandomSource] = None
) -> List[str]:
    """Team abbreviations for a full five-draw session."""
    return [team.abbr for team in draw_teams(teams, TOTAL_DRAWS, seed=seed, rng=rng)]
