"""Read-only team, roster, position and stats tables."""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional
from hoops_draft.models.lineup import LINEUP_SLOTS, PlayerStats, RosterPlayer, Team
from hoops_draft.services.game_config import TEAM_LOGO_IDS, TEAM_LOGO_URL_TEMPLATE

logger = logging.getLogger(__name__)


class ReferenceData:
    """
    Static reference tables produced by the data sync job.

    Loaded once and never mutated, so it can be shared across requests
    without locking. Tests build it directly from small synthetic mappings.
    """

    TEAMS_FILE = 'teams.json'
    ROSTERS_FILE = 'rosters.json'
    POSITIONS_FILE = 'player_positions.json'
    STATS_FILE = 'stats.json'

    def __init__(
        self,
        teams: List[Team],
        rosters: Dict[str, List[str]],
        player_positions: Optional[Dict[str, List[str]]] = None,
        stats: Optional[Dict[str, Dict[str, float]]] = None
    ):
        self._teams = list(teams)
        self._team_by_abbr = {team.abbr: team for team in self._teams}
        self._rosters = {abbr: list(names) for abbr, names in rosters.items()}
        self._player_positions = {
            name: [slot for slot in slots if slot in LINEUP_SLOTS]
            for name, slots in (player_positions or {}).items()
        }
        self._stats_by_player = self._index_stats(stats or {})

    @staticmethod
    def _index_stats(stats: Dict[str, Dict[str, float]]) -> Dict[str, Dict[str, PlayerStats]]:
        """Split "Player Name|2024-25" keys into player -> season -> stats."""
        by_player: Dict[str, Dict[str, PlayerStats]] = {}
        for key, values in stats.items():
            divider = key.rfind('|')
            if divider == -1:
                continue
            player_name = key[:divider]
            season = key[divider + 1:]
            try:
                player_stats = PlayerStats.from_dict(values)
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed stats entry %s", key)
                continue
            by_player.setdefault(player_name, {})[season] = player_stats
        return by_player

    @classmethod
    def from_directory(cls, data_dir: Path):
        """Load the four JSON tables from a directory; missing files give empty tables."""
        data_dir = Path(data_dir)
        teams_data = cls._load_json(data_dir / cls.TEAMS_FILE, [])
        teams = [
            Team(abbr=entry['abbr'], name=entry['name'])
            for entry in teams_data
            if isinstance(entry, dict) and entry.get('abbr') and entry.get('name')
        ]
        reference = cls(
            teams=teams,
            rosters=cls._load_json(data_dir / cls.ROSTERS_FILE, {}),
            player_positions=cls._load_json(data_dir / cls.POSITIONS_FILE, {}),
            stats=cls._load_json(data_dir / cls.STATS_FILE, {}),
        )
        logger.info(
            "Loaded reference data: %d teams, %d players with stats",
            len(reference._teams),
            len(reference._stats_by_player)
        )
        return reference

    @staticmethod
    def _load_json(path: Path, default):
        if not path.exists():
            logger.warning("Reference file not found at %s", path)
            return default
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, type(default)):
            logger.warning("Reference file %s has unexpected shape; ignoring it", path)
            return default
        return data

    def get_all_teams(self) -> List[Team]:
        return list(self._teams)

    def get_team_by_abbr(self, team_abbr: str) -> Optional[Team]:
        return self._team_by_abbr.get(team_abbr)

    def get_team_logo_url(self, team_abbr: str) -> Optional[str]:
        """NBA CDN logo for a team, or None for an unknown abbreviation."""
        team_id = TEAM_LOGO_IDS.get(team_abbr)
        if team_id is None:
            return None
        return TEAM_LOGO_URL_TEMPLATE.format(team_id=team_id)

    def get_roster_names(self, team_abbr: str) -> List[str]:
        return list(self._rosters.get(team_abbr, []))

    def get_player_eligible_slots(self, player_name: str) -> List[str]:
        """Slots a player may fill; players without a recorded position can play anywhere."""
        positions = self._player_positions.get(player_name)
        if not positions:
            return list(LINEUP_SLOTS)
        return list(positions)

    def get_recorded_positions(self, player_name: str) -> List[str]:
        """Positions from the dataset only; empty when none were recorded."""
        return list(self._player_positions.get(player_name, []))

    def get_roster_by_team(self, team_abbr: str) -> List[RosterPlayer]:
        return [
            RosterPlayer(name=name, eligible_slots=self.get_player_eligible_slots(name))
            for name in self.get_roster_names(team_abbr)
        ]

    def is_player_on_team(self, team_abbr: str, player_name: str) -> bool:
        return player_name in self._rosters.get(team_abbr, [])

    def get_player_seasons(self, player_name: str) -> Dict[str, PlayerStats]:
        """All recorded seasons for a player, keyed by season string."""
        return dict(self._stats_by_player.get(player_name, {}))
