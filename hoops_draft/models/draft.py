"""Draft session state and finished run records."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional
from hoops_draft.models.lineup import (
    STATUS_COMPLETED,
    STATUS_DRAFTING,
    LINEUP_SLOTS,
    LineupPick,
    PlayerScore,
    PlayerStats,
    lineup_to_dict,
)
from hoops_draft.services.game_config import TOTAL_DRAWS
from hoops_draft.services.serialization import (
    decode_lineup,
    decode_string_list,
    encode_lineup,
    format_timestamp,
    parse_draft_status,
    parse_timestamp,
    to_json_string,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DraftSession:
    """A single five-draw game in progress or completed."""
    id: str
    session_token: str
    draw_sequence: List[str]
    draw_started_at: datetime
    group_code: Optional[str] = None
    seed: Optional[str] = None
    current_draw_index: int = 0
    lineup: Dict[str, LineupPick] = field(default_factory=dict)
    chosen_players: List[str] = field(default_factory=list)
    status: str = STATUS_DRAFTING
    run_id: Optional[str] = None
    run_share_code: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @property
    def current_team_abbr(self) -> Optional[str]:
        if 0 <= self.current_draw_index < len(self.draw_sequence):
            return self.draw_sequence[self.current_draw_index]
        return None

    def remaining_teams(self) -> List[str]:
        if self.is_completed:
            return []
        return self.draw_sequence[self.current_draw_index:]

    def to_record(self) -> dict:
        """Convert to a store record; collection fields are stored as JSON text."""
        return {
            'id': self.id,
            'session_token': self.session_token,
            'group_code': self.group_code,
            'seed': self.seed,
            'draw_sequence_json': to_json_string(self.draw_sequence),
            'remaining_teams_json': to_json_string(self.remaining_teams()),
            'current_draw_index': self.current_draw_index,
            'lineup_json': encode_lineup(self.lineup),
            'chosen_players_json': to_json_string(self.chosen_players),
            'draw_started_at': format_timestamp(self.draw_started_at),
            'status': self.status,
            'run_id': self.run_id,
            'run_share_code': self.run_share_code,
            'created_at': format_timestamp(self.created_at),
            'updated_at': format_timestamp(self.updated_at),
        }

    @classmethod
    def from_record(cls, record: dict):
        """Create a session from a store record, substituting defaults for bad blobs."""
        lineup = decode_lineup(record.get('lineup_json'))
        current_draw_index = record.get('current_draw_index')
        if not isinstance(current_draw_index, int) or isinstance(current_draw_index, bool):
            # Each draw fills exactly one slot
            current_draw_index = len(lineup)
        current_draw_index = max(0, min(TOTAL_DRAWS, current_draw_index))

        created_at = parse_timestamp(record.get('created_at'))
        return cls(
            id=record['id'],
            session_token=record['session_token'],
            group_code=record.get('group_code'),
            seed=record.get('seed'),
            draw_sequence=decode_string_list(record.get('draw_sequence_json'), 'draw sequence'),
            current_draw_index=current_draw_index,
            lineup=lineup,
            chosen_players=decode_string_list(record.get('chosen_players_json'), 'chosen players'),
            draw_started_at=parse_timestamp(record.get('draw_started_at'), default=created_at),
            status=parse_draft_status(record.get('status')),
            run_id=record.get('run_id'),
            run_share_code=record.get('run_share_code'),
            created_at=created_at,
            updated_at=parse_timestamp(record.get('updated_at'), default=created_at),
        )


@dataclass
class DraftView:
    """What a player sees for their session after shot clock catch-up."""
    id: str
    session_token: str
    status: str
    group_code: Optional[str]
    seed: Optional[str]
    draw_sequence: List[str]
    current_draw_index: int
    current_team_abbr: Optional[str]
    current_team_name: Optional[str]
    current_roster: List[dict]
    remaining_teams: List[str]
    lineup: Dict[str, LineupPick]
    open_slots: List[str]
    chosen_players: List[str]
    shot_clock_deadline: Optional[datetime]
    shot_clock_seconds: float
    linked_run_share_code: Optional[str] = None
    current_team_logo_url: Optional[str] = None

    def to_dict(self):
        return {
            'id': self.id,
            'status': self.status,
            'group_code': self.group_code,
            'seed': self.seed,
            'draw_sequence': list(self.draw_sequence),
            'current_draw_index': self.current_draw_index,
            'current_team_abbr': self.current_team_abbr,
            'current_team_name': self.current_team_name,
            'current_team_logo_url': self.current_team_logo_url,
            'current_roster': list(self.current_roster),
            'remaining_teams': list(self.remaining_teams),
            'lineup': lineup_to_dict(self.lineup),
            'open_slots': list(self.open_slots),
            'chosen_players': list(self.chosen_players),
            'shot_clock_deadline': format_timestamp(self.shot_clock_deadline),
            'shot_clock_seconds': self.shot_clock_seconds,
            'linked_run_share_code': self.linked_run_share_code,
        }


@dataclass
class PickResult:
    """Result of a pick submission."""
    completed: bool
    share_code: Optional[str] = None

    def to_dict(self):
        return {'completed': self.completed, 'share_code': self.share_code}


@dataclass
class RunPick:
    """A scored pick stored on a finished run."""
    slot: str
    player_name: str
    team_abbr: str
    team_name: str
    bpm: float
    ws48: float
    vorp: float
    epm: float
    contribution: float
    used_fallback: bool = False
    is_penalty: bool = False
    normalized_metrics: Dict[str, float] = field(default_factory=dict)
    seasons_used: List[str] = field(default_factory=list)

    @classmethod
    def from_player_score(cls, score: PlayerScore):
        return cls(
            slot=score.pick.slot,
            player_name=score.pick.player_name,
            team_abbr=score.pick.team_abbr,
            team_name=score.pick.team_name,
            bpm=score.stats.bpm,
            ws48=score.stats.ws48,
            vorp=score.stats.vorp,
            epm=score.stats.epm,
            contribution=score.contribution,
            used_fallback=score.used_fallback,
            is_penalty=score.pick.is_penalty,
            normalized_metrics=score.normalized_metrics.to_dict(),
            seasons_used=list(score.seasons_used),
        )

    @property
    def stats(self) -> PlayerStats:
        return PlayerStats(bpm=self.bpm, ws48=self.ws48, vorp=self.vorp, epm=self.epm)

    def to_dict(self):
        return {
            'slot': self.slot,
            'player_name': self.player_name,
            'team_abbr': self.team_abbr,
            'team_name': self.team_name,
            'bpm': self.bpm,
            'ws48': self.ws48,
            'vorp': self.vorp,
            'epm': self.epm,
            'contribution': self.contribution,
            'used_fallback': self.used_fallback,
            'is_penalty': self.is_penalty,
            'normalized_metrics': dict(self.normalized_metrics),
            'seasons_used': list(self.seasons_used),
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(**data)


@dataclass
class Run:
    """A finished, scored lineup identified by its share code."""
    id: str
    share_code: str
    team_score: float
    used_fallback_stats: bool
    picks: List[RunPick]
    created_at: datetime
    group_code: Optional[str] = None
    seed: Optional[str] = None
    session_id: Optional[str] = None

    def sorted_picks(self) -> List[RunPick]:
        order = {slot: index for index, slot in enumerate(LINEUP_SLOTS)}
        return sorted(self.picks, key=lambda pick: order.get(pick.slot, 99))

    def to_dict(self):
        return {
            'id': self.id,
            'share_code': self.share_code,
            'group_code': self.group_code,
            'seed': self.seed,
            'session_id': self.session_id,
            'team_score': self.team_score,
            'used_fallback_stats': self.used_fallback_stats,
            'created_at': format_timestamp(self.created_at),
            'picks': [pick.to_dict() for pick in self.sorted_picks()],
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            id=data['id'],
            share_code=data['share_code'],
            group_code=data.get('group_code'),
            seed=data.get('seed'),
            session_id=data.get('session_id'),
            team_score=float(data['team_score']),
            used_fallback_stats=bool(data.get('used_fallback_stats', False)),
            created_at=parse_timestamp(data.get('created_at')),
            picks=[RunPick.from_dict(pick) for pick in data.get('picks', [])],
        )
