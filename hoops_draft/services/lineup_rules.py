"""Slot locking and pick eligibility rules."""
from dataclasses import dataclass
from typing import Dict, List, Optional
from hoops_draft.models.lineup import LINEUP_SLOTS, LineupPick
from hoops_draft.services.errors import StateError


@dataclass
class PickValidation:
    """Outcome of validating a pick; message is set when rejected."""
    valid: bool
    message: Optional[str] = None


def get_open_slots(lineup: Dict[str, LineupPick]) -> List[str]:
    return [slot for slot in LINEUP_SLOTS if not lineup.get(slot)]


def is_slot_open(lineup: Dict[str, LineupPick], slot: str) -> bool:
    return not lineup.get(slot)


def can_draft_more(lineup: Dict[str, LineupPick]) -> bool:
    return len(get_open_slots(lineup)) > 0


def validate_pick(
    lineup: Dict[str, LineupPick],
    slot: str,
    player_name: str,
    current_team_roster: List[str],
    chosen_players: List[str],
    player_eligible_slots: List[str]
) -> PickValidation:
    """
    Check a pick against the lineup and the drawn team.

    Checks run in order and the first failure is returned:
    full lineup, locked slot, roster membership, slot eligibility, repeat pick.
    """
    if not can_draft_more(lineup):
        return PickValidation(False, 'All lineup slots are already filled.')

    if not is_slot_open(lineup, slot):
        return PickValidation(False, f'Slot {slot} is already locked for this round.')

    if player_name not in current_team_roster:
        return PickValidation(False, f'{player_name} is not on the current team roster.')

    if slot not in player_eligible_slots:
        eligible = ', '.join(player_eligible_slots)
        return PickValidation(
            False,
            f'{player_name} cannot be assigned to {slot}. Eligible positions: {eligible}'
        )

    if player_name in chosen_players:
        return PickValidation(False, f'{player_name} has already been selected in this round.')

    return PickValidation(True)


def apply_pick_to_lineup(lineup: Dict[str, LineupPick], pick: LineupPick) -> Dict[str, LineupPick]:
    """Return a new lineup with the pick's slot filled. The slot must be open."""
    if lineup.get(pick.slot):
        raise StateError(f'Slot {pick.slot} is already filled.')

    updated = dict(lineup)
    updated[pick.slot] = pick
    return updated
