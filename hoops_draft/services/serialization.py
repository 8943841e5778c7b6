"""
Decoding of JSON blobs stored on session records.

Session records keep the lineup, draw sequence and chosen players as JSON
text. A blob that fails to parse or has the wrong shape is replaced by its
documented default (empty lineup, empty list, DRAFTING, now) and a warning
is logged; a bad blob never fails a request.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from hoops_draft.models.lineup import DRAFT_STATUSES, STATUS_DRAFTING, LineupPick, lineup_to_dict

logger = logging.getLogger(__name__)


def safe_parse_json(value: Any, fallback: Any) -> Any:
    """Parse JSON text, returning fallback on any decode failure."""
    if not isinstance(value, (str, bytes, bytearray)):
        return fallback
    try:
        return json.loads(value)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return fallback


def to_json_string(value: Any) -> str:
    return json.dumps(value)


def decode_string_list(raw: Any, field_name: str = 'list') -> List[str]:
    """Decode a JSON array of strings; anything else becomes []."""
    parsed = safe_parse_json(raw, None)
    if isinstance(parsed, list) and all(isinstance(item, str) for item in parsed):
        return parsed
    logger.warning("Malformed %s blob on session record; using empty list", field_name)
    return []


def decode_lineup(raw: Any) -> Dict[str, LineupPick]:
    """Decode a lineup blob keyed by slot; any malformed entry resets the whole lineup."""
    parsed = safe_parse_json(raw, None)
    if not isinstance(parsed, dict):
        logger.warning("Malformed lineup blob on session record; using empty lineup")
        return {}

    lineup = {}
    for slot, entry in parsed.items():
        try:
            pick = LineupPick.from_dict(entry)
        except (KeyError, TypeError, ValueError):
            logger.warning("Malformed lineup entry for slot %s; using empty lineup", slot)
            return {}
        if pick.slot != slot:
            logger.warning("Lineup entry stored under %s claims slot %s; using empty lineup", slot, pick.slot)
            return {}
        lineup[slot] = pick
    return lineup


def encode_lineup(lineup: Dict[str, LineupPick]) -> str:
    return to_json_string(lineup_to_dict(lineup))


def parse_draft_status(raw: Any) -> str:
    if raw in DRAFT_STATUSES:
        return raw
    return STATUS_DRAFTING


def parse_timestamp(raw: Any, default: Optional[datetime] = None) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    fallback = default if default is not None else datetime.now(timezone.utc)
    if not isinstance(raw, str):
        return fallback
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Malformed timestamp %r on stored record", raw)
        return fallback
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
