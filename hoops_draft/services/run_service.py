"""Lookup of finished runs and group leaderboards."""
from typing import List, Optional
from hoops_draft.models.draft import Run
from hoops_draft.services.draft_store import DraftStore
from hoops_draft.services.game_config import LEADERBOARD_LIMIT
from hoops_draft.services.share_code import normalize_group_code, normalize_share_code


class RunService:
    """Read-only access to runs."""

    def __init__(self, store: DraftStore):
        self.store = store

    def get_run_by_share_code(self, share_code: str) -> Optional[Run]:
        code = normalize_share_code(share_code)
        if not code:
            return None
        return self.store.load_run(code)

    def list_leaderboard(self, group_code: Optional[str] = None, limit: int = LEADERBOARD_LIMIT) -> List[Run]:
        """
        Runs ranked by team score, newest first among ties.

        Args:
            group_code: When set, only runs from this group (normalized like on creation)
            limit: Maximum number of runs returned
        """
        runs = self.store.list_runs()
        group = normalize_group_code(group_code)
        if group is not None:
            runs = [run for run in runs if run.group_code == group]

        runs.sort(key=lambda run: run.created_at, reverse=True)
        runs.sort(key=lambda run: run.team_score, reverse=True)
        return runs[:max(0, limit)]
