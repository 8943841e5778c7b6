"""Share codes for finished runs and normalization of player-entered codes."""
import re
from typing import Callable, Optional
from hoops_draft.services.errors import ExhaustionError
from hoops_draft.services.game_config import (
    GROUP_CODE_MAX_LENGTH,
    SEED_MAX_LENGTH,
    SHARE_ALPHABET,
    SHARE_CODE_LENGTH,
    SHARE_CODE_MAX_ATTEMPTS,
)
from hoops_draft.services.rng import RandomSource, choose, system_random

_GROUP_CODE_STRIP = re.compile(r'[^A-Z0-9_-]')


def generate_share_code(
    length: int = SHARE_CODE_LENGTH,
    rng: Optional[RandomSource] = None
) -> str:
    """Random code drawn from an alphabet without look-alike characters."""
    source = rng if rng is not None else system_random()
    return ''.join(choose(source, SHARE_ALPHABET) for _ in range(length))


def issue_unique_share_code(
    exists: Callable[[str], bool],
    rng: Optional[RandomSource] = None,
    length: int = SHARE_CODE_LENGTH,
    max_attempts: int = SHARE_CODE_MAX_ATTEMPTS
) -> str:
    """
    Generate a share code not already taken.

    Args:
        exists: Returns True when a code is already used by a stored run
        rng: Random source (defaults to the system source)
        length: Code length
        max_attempts: Collisions tolerated before giving up

    Raises:
        ExhaustionError: if every attempt collided
    """
    source = rng if rng is not None else system_random()
    for _ in range(max_attempts):
        code = generate_share_code(length, source)
        if not exists(code):
            return code
    raise ExhaustionError('Could not generate a unique share code.')


def normalize_group_code(raw: Optional[str]) -> Optional[str]:
    """Uppercase, keep only A-Z, 0-9, '_' and '-', truncate; None when nothing is left."""
    if not raw:
        return None
    cleaned = _GROUP_CODE_STRIP.sub('', raw.strip().upper())
    if not cleaned:
        return None
    return cleaned[:GROUP_CODE_MAX_LENGTH]


def normalize_seed(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    return cleaned[:SEED_MAX_LENGTH]


def normalize_share_code(raw: Optional[str]) -> str:
    return (raw or '').strip().upper()
