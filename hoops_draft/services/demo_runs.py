"""Sample runs so a fresh install has something on the leaderboard."""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from hoops_draft.models.draft import Run, RunPick
from hoops_draft.models.lineup import LineupPick
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.game_config import GameConfig
from hoops_draft.services.reference_data import ReferenceData
from hoops_draft.services.scoring import ScoringEngine
from hoops_draft.services.stats_resolver import StatsResolver

logger = logging.getLogger(__name__)

DEMO_GROUP_CODE = 'DEMO'

DEMO_RUNS = [
    {
        'share_code': 'DEMO01',
        'seed': 'friends-night-1',
        'picks': [
            ('PG', 'Luka Doncic', 'DAL', 'Dallas Mavericks'),
            ('SG', 'Stephen Curry', 'GSW', 'Golden State Warriors'),
            ('SF', 'Jayson Tatum', 'BOS', 'Boston Celtics'),
            ('PF', 'Giannis Antetokounmpo', 'MIL', 'Milwaukee Bucks'),
            ('C', 'Nikola Jokic', 'DEN', 'Denver Nuggets'),
        ],
    },
    {
        'share_code': 'DEMO02',
        'seed': 'friends-night-2',
        'picks': [
            ('PG', 'Tyrese Haliburton', 'IND', 'Indiana Pacers'),
            ('SG', 'Donovan Mitchell', 'CLE', 'Cleveland Cavaliers'),
            ('SF', 'LeBron James', 'LAL', 'Los Angeles Lakers'),
            ('PF', 'Kevin Durant', 'PHX', 'Phoenix Suns'),
            ('C', 'Joel Embiid', 'PHI', 'Philadelphia 76ers'),
        ],
    },
]


def seed_demo_runs(
    reference: ReferenceData,
    store: DraftStore,
    config: Optional[GameConfig] = None,
    now: Optional[datetime] = None
) -> List[Run]:
    """Score and store the demo runs, replacing earlier copies with the same codes."""
    config = config if config is not None else GameConfig()
    created_at = now if now is not None else datetime.now(timezone.utc)
    engine = ScoringEngine(
        StatsResolver(reference, lookback_window=config.lookback_seasons),
        season=config.target_season
    )

    runs = []
    with store.transaction() as txn:
        for demo in DEMO_RUNS:
            picks = [
                LineupPick(slot=slot, player_name=name, team_abbr=abbr, team_name=team_name)
                for slot, name, abbr, team_name in demo['picks']
            ]
            lineup_score = engine.score_lineup(picks)
            run = Run(
                id=str(uuid.uuid4()),
                share_code=demo['share_code'],
                group_code=DEMO_GROUP_CODE,
                seed=demo['seed'],
                team_score=lineup_score.team_score,
                used_fallback_stats=lineup_score.used_fallback_stats,
                created_at=created_at,
                picks=[RunPick.from_player_score(score) for score in lineup_score.player_scores],
            )
            txn.save_run(run, replace=True)
            runs.append(run)
            logger.info("Seeded demo run %s (%.1f)", run.share_code, run.team_score)
    return runs
