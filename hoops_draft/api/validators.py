"""Request body validation for the API."""
from typing import Optional, Tuple
from hoops_draft.models.lineup import LINEUP_SLOTS
from hoops_draft.services.errors import ValidationError
from hoops_draft.services.game_config import (
    GROUP_CODE_MAX_LENGTH,
    PLAYER_NAME_MAX_LENGTH,
    SEED_MAX_LENGTH,
)


def _optional_string(data: dict, key: str, max_length: int, label: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{label} must be a string.')
    if len(value) > max_length:
        raise ValidationError(f'{label} must be at most {max_length} characters.')
    return value


def validate_start_request(data: Optional[dict]) -> Tuple[Optional[str], Optional[str]]:
    """Return (group_code, seed) from a start-game body; both optional."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    group_code = _optional_string(data, 'group_code', GROUP_CODE_MAX_LENGTH, 'Group code')
    seed = _optional_string(data, 'seed', SEED_MAX_LENGTH, 'Seed')
    return group_code, seed


def validate_pick_request(data: Optional[dict]) -> Tuple[str, str]:
    """Return (player_name, slot) from a pick body."""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')

    player_name = data.get('player_name')
    if not isinstance(player_name, str) or not player_name:
        raise ValidationError('Player name is required.')
    if len(player_name) > PLAYER_NAME_MAX_LENGTH:
        raise ValidationError(f'Player name must be at most {PLAYER_NAME_MAX_LENGTH} characters.')

    slot = data.get('slot')
    if slot not in LINEUP_SLOTS:
        raise ValidationError(f"Slot must be one of: {', '.join(LINEUP_SLOTS)}")

    return player_name, slot
