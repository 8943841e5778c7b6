"""Service for running draft sessions."""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional
from hoops_draft.models.draft import DraftSession, DraftView, PickResult, Run, RunPick
from hoops_draft.models.lineup import (
    LINEUP_SLOTS,
    STATUS_COMPLETED,
    STATUS_DRAFTING,
    LineupPick,
    ordered_picks,
)
from hoops_draft.services.draft_store import DraftStore, StoreTransaction
from hoops_draft.services.draw_generator import build_draw_sequence
from hoops_draft.services.errors import NotFoundError, StateError, ValidationError
from hoops_draft.services.game_config import (
    SHOT_CLOCK_PENALTY_PLAYER_NAME,
    TOTAL_DRAWS,
    GameConfig,
)
from hoops_draft.services.lineup_rules import apply_pick_to_lineup, get_open_slots, validate_pick
from hoops_draft.services.reference_data import ReferenceData
from hoops_draft.services.rng import RandomSource, SeededRandom, choose, system_random
from hoops_draft.services.scoring import ScoringEngine
from hoops_draft.services.share_code import (
    issue_unique_share_code,
    normalize_group_code,
    normalize_seed,
)
from hoops_draft.services.stats_resolver import StatsResolver

logger = logging.getLogger(__name__)

SHOT_CLOCK_EXPIRED_MESSAGE = 'Shot clock expired. A random open slot was assigned 0 points.'


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DraftService:
    """
    Drives a session through its five draws.

    There is no background timer. Expired shot clocks are caught up lazily
    whenever a session is read or picked against: each expired draw gets a
    zero-point penalty pick in a random open slot and the next draw starts
    exactly one shot clock after the previous one.
    """

    def __init__(
        self,
        reference: ReferenceData,
        store: DraftStore,
        config: Optional[GameConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[RandomSource] = None
    ):
        self.reference = reference
        self.store = store
        self.config = config if config is not None else GameConfig()
        self.clock = clock if clock is not None else _utcnow
        self.rng = rng if rng is not None else system_random()
        self.scoring = ScoringEngine(
            StatsResolver(reference, lookback_window=self.config.lookback_seasons),
            season=self.config.target_season
        )

    @property
    def shot_clock(self) -> timedelta:
        return timedelta(seconds=self.config.shot_clock_seconds)

    def create_session(self, group_code: Optional[str] = None, seed: Optional[str] = None) -> DraftSession:
        """Start a new session with a freshly drawn team sequence."""
        group_code = normalize_group_code(group_code)
        seed = normalize_seed(seed)
        draw_sequence = build_draw_sequence(self.reference.get_all_teams(), seed=seed, rng=self.rng)
        now = self.clock()

        session = DraftSession(
            id=str(uuid.uuid4()),
            session_token=str(uuid.uuid4()),
            group_code=group_code,
            seed=seed,
            draw_sequence=draw_sequence,
            current_draw_index=0,
            lineup={},
            chosen_players=[],
            draw_started_at=now,
            status=STATUS_DRAFTING,
            created_at=now,
            updated_at=now,
        )
        with self.store.transaction() as txn:
            txn.save_session(session)

        logger.info(
            "Created draft session %s (group=%s, seeded=%s): %s",
            session.id,
            group_code,
            seed is not None,
            ', '.join(draw_sequence)
        )
        return session

    def get_view(self, session_token: str) -> Optional[DraftView]:
        """Current view of a session after shot clock catch-up, or None if unknown."""
        now = self.clock()
        with self.store.transaction() as txn:
            session = txn.get_session_by_token(session_token)
            if session is None:
                return None
            if self._apply_shot_clock_timeouts(txn, session, now):
                txn.save_session(session)
            return self._build_view(session)

    def submit_pick(self, session_token: str, player_name: str, slot: str) -> PickResult:
        """
        Lock a player from the current team into a slot.

        Raises:
            NotFoundError: unknown session token
            ValidationError: the pick breaks a lineup rule, or the shot clock
                ran out on the draw it targeted (the forfeit is still saved)
            StateError: the session cannot accept picks
        """
        now = self.clock()
        with self.store.transaction() as txn:
            session = txn.get_session_by_token(session_token)
            if session is None:
                raise NotFoundError('Draft session not found. Start a new game.')

            forfeited = self._apply_shot_clock_timeouts(txn, session, now)
            if forfeited:
                txn.save_session(session)

            if session.is_completed:
                return PickResult(completed=True, share_code=session.run_share_code)

            if not forfeited:
                return self._apply_pick(txn, session, player_name, slot, now)

        # Catch-up consumed the draw this pick was aimed at; it is committed above
        raise ValidationError(SHOT_CLOCK_EXPIRED_MESSAGE)

    def _apply_pick(
        self,
        txn: StoreTransaction,
        session: DraftSession,
        player_name: str,
        slot: str,
        now: datetime
    ) -> PickResult:
        index = session.current_draw_index
        if index >= TOTAL_DRAWS or index >= len(session.draw_sequence):
            raise StateError('The round is already complete.')

        team = self.reference.get_team_by_abbr(session.draw_sequence[index])
        if team is None:
            raise StateError('Current team is invalid. Start a new game.')

        if slot not in LINEUP_SLOTS:
            raise ValidationError(f'Unknown lineup slot: {slot}')

        validation = validate_pick(
            session.lineup,
            slot,
            player_name,
            self.reference.get_roster_names(team.abbr),
            session.chosen_players,
            self.reference.get_player_eligible_slots(player_name)
        )
        if not validation.valid:
            raise ValidationError(validation.message)

        pick = LineupPick(slot=slot, player_name=player_name, team_abbr=team.abbr, team_name=team.name)
        session.lineup = apply_pick_to_lineup(session.lineup, pick)
        session.chosen_players = session.chosen_players + [player_name]
        session.current_draw_index = index + 1
        session.draw_started_at = now
        session.updated_at = now

        share_code = None
        if self._is_round_complete(session):
            share_code = self._complete_round(txn, session, now).share_code
        txn.save_session(session)
        return PickResult(completed=session.is_completed, share_code=share_code)

    def _apply_shot_clock_timeouts(self, txn: StoreTransaction, session: DraftSession, now: datetime) -> int:
        """Forfeit every draw whose shot clock has run out; returns the number forfeited."""
        forfeited = 0
        while self._shot_clock_expired(session, now):
            index = session.current_draw_index
            team_abbr = session.draw_sequence[index]
            team = self.reference.get_team_by_abbr(team_abbr)
            slot = self._choose_timeout_slot(session, get_open_slots(session.lineup))

            penalty = LineupPick(
                slot=slot,
                player_name=SHOT_CLOCK_PENALTY_PLAYER_NAME,
                team_abbr=team_abbr,
                team_name=team.name if team is not None else team_abbr,
                is_penalty=True,
            )
            session.lineup = apply_pick_to_lineup(session.lineup, penalty)
            session.current_draw_index = index + 1
            session.draw_started_at = session.draw_started_at + self.shot_clock
            forfeited += 1
            logger.debug("Session %s forfeited draw %d (%s) into %s", session.id, index, team_abbr, slot)

        if forfeited:
            session.updated_at = now
            if self._is_round_complete(session):
                self._complete_round(txn, session, now)
        return forfeited

    def _shot_clock_expired(self, session: DraftSession, now: datetime) -> bool:
        if session.status != STATUS_DRAFTING:
            return False
        if self._is_round_complete(session):
            return False
        return now >= session.draw_started_at + self.shot_clock

    def _choose_timeout_slot(self, session: DraftSession, open_slots: List[str]) -> str:
        if len(open_slots) == 1:
            return open_slots[0]
        if session.seed:
            source = SeededRandom(f"{session.seed}:shotclock:{session.id}:{session.current_draw_index}")
        else:
            source = self.rng
        return choose(source, open_slots)

    @staticmethod
    def _is_round_complete(session: DraftSession) -> bool:
        return (
            session.current_draw_index >= TOTAL_DRAWS
            or session.current_draw_index >= len(session.draw_sequence)
            or not get_open_slots(session.lineup)
        )

    def _complete_round(self, txn: StoreTransaction, session: DraftSession, now: datetime) -> Run:
        """Score the full lineup, store it as a run and close the session."""
        picks = ordered_picks(session.lineup)
        if len(picks) != TOTAL_DRAWS:
            raise StateError('Cannot finish a round without a full lineup.')

        lineup_score = self.scoring.score_lineup(picks)
        run = Run(
            id=str(uuid.uuid4()),
            share_code=issue_unique_share_code(txn.run_exists, rng=self.rng),
            group_code=session.group_code,
            seed=session.seed,
            session_id=session.id,
            team_score=lineup_score.team_score,
            used_fallback_stats=lineup_score.used_fallback_stats,
            created_at=now,
            picks=[RunPick.from_player_score(score) for score in lineup_score.player_scores],
        )
        txn.save_run(run)

        session.status = STATUS_COMPLETED
        session.run_id = run.id
        session.run_share_code = run.share_code
        session.updated_at = now
        logger.info(
            "Session %s completed: run %s scored %.1f",
            session.id,
            run.share_code,
            run.team_score
        )
        return run

    def _build_view(self, session: DraftSession) -> DraftView:
        drafting = not session.is_completed
        team_abbr = session.current_team_abbr if drafting else None
        team = self.reference.get_team_by_abbr(team_abbr) if team_abbr else None

        current_roster = []
        shot_clock_deadline = None
        if team is not None:
            current_roster = [player.to_dict() for player in self.reference.get_roster_by_team(team.abbr)]
            shot_clock_deadline = session.draw_started_at + self.shot_clock

        return DraftView(
            id=session.id,
            session_token=session.session_token,
            status=session.status,
            group_code=session.group_code,
            seed=session.seed,
            draw_sequence=list(session.draw_sequence),
            current_draw_index=session.current_draw_index,
            current_team_abbr=team_abbr,
            current_team_name=team.name if team is not None else None,
            current_roster=current_roster,
            remaining_teams=session.remaining_teams(),
            lineup=dict(session.lineup),
            open_slots=get_open_slots(session.lineup),
            chosen_players=list(session.chosen_players),
            shot_clock_deadline=shot_clock_deadline,
            shot_clock_seconds=self.config.shot_clock_seconds,
            linked_run_share_code=session.run_share_code,
            current_team_logo_url=self.reference.get_team_logo_url(team.abbr) if team is not None else None,
        )
