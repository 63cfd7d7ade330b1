"""External player values from Sleeper season fantasy points, with caching."""

import asyncio
import json
import logging
import threading
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Optional, Union

import requests

from ..config.valuation import ScoringType
from ..models.league import Player
from ..utils.rounding import round_half_up

logger = logging.getLogger(__name__)

# Sleeper API endpoints
SLEEPER_PLAYERS_URL = "https://api.sleeper.app/v1/players/nfl"
SLEEPER_SEASON_STATS_URL = "https://api.sleeper.app/v1/stats/nfl/regular/{season}"

POINTS_KEYS = {
    ScoringType.STANDARD: "pts_std",
    ScoringType.PPR: "pts_ppr",
    ScoringType.HALF_PPR: "pts_half_ppr",
}

# Sleeper position codes that differ from roster positions
POSITION_ALIASES = {"DEF": "DST"}

MIN_VALUE = 10
SNAPSHOT_MAX_AGE = timedelta(hours=24)

# name -> {position: season points}
PointsTable = Dict[str, Dict[str, float]]


class SleeperValueOracle:
    """Async value oracle over Sleeper's player directory and season stats.

    A player's value is their season fantasy points for the configured scoring
    type, rounded and floored at 10. Players Sleeper does not know raise
    ``LookupError`` so callers fall back to their own heuristic.
    """

    def __init__(self,
                 season: int,
                 scoring_type: Union[str, ScoringType] = ScoringType.PPR,
                 cache_dir: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the oracle.

        Args:
            season: NFL season whose regular-season points are used
            scoring_type: 'standard', 'ppr' or 'half_ppr'
            cache_dir: Directory for the points snapshot
            session: HTTP session to reuse
        """
        self.season = season
        self.scoring_type = ScoringType(scoring_type)
        self.points_key = POINTS_KEYS[self.scoring_type]
        self.session = session or requests.Session()

        self.cache_dir = Path(cache_dir or "data/cache")
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.snapshot_file = (
            self.cache_dir / f"sleeper_points_{season}_{self.scoring_type.value}.json"
        )

        # Request settings
        self.timeout = 20
        self.max_retries = 2
        self.backoff_factor = 0.5

        self._points: Optional[PointsTable] = None
        self._lock = threading.Lock()

    def _fetch_json(self, url: str) -> Optional[Dict]:
        """GET a JSON object with retries and exponential backoff.

        Returns:
            Decoded payload or None if every attempt failed
        """
        for attempt in range(self.max_retries + 1):
            try:
                logger.info(f"Fetching {url} (attempt {attempt + 1})")
                response = self.session.get(url, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    logger.warning(f"Unexpected payload type from {url}: {type(data).__name__}")
                    return None
                return data

            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"Attempt {attempt + 1} failed: {e}")
                if attempt < self.max_retries:
                    time.sleep(self.backoff_factor * (2 ** attempt))

        logger.error(f"All attempts failed to fetch {url}")
        return None

    def build_points_table(self, players_raw: Dict, stats_raw: Dict) -> PointsTable:
        """Join the player directory with season stats by Sleeper player id.

        Args:
            players_raw: ``{player_id: {full_name, first_name, last_name, position}}``
            stats_raw: ``{player_id: {pts_std, pts_ppr, pts_half_ppr, ...}}``

        Returns:
            Season points keyed by display name, then position
        """
        table: PointsTable = {}
        for player_id, info in players_raw.items():
            if not isinstance(info, dict):
                continue
            stats = stats_raw.get(player_id)
            if not isinstance(stats, dict) or stats.get(self.points_key) is None:
                continue

            name = info.get('full_name') or " ".join(
                part for part in (info.get('first_name'), info.get('last_name')) if part
            )
            if not name:
                continue
            position = info.get('position') or ""
            position = POSITION_ALIASES.get(position, position)

            try:
                points = float(stats[self.points_key])
            except (TypeError, ValueError):
                continue
            table.setdefault(name, {})[position] = points

        logger.info(f"Built Sleeper points table with {len(table)} players for {self.season}")
        return table

    def _save_snapshot(self, table: PointsTable) -> None:
        try:
            with open(self.snapshot_file, 'w') as f:
                json.dump({
                    'timestamp': datetime.now().isoformat(),
                    'points': table
                }, f, indent=2)
            logger.debug(f"Saved points snapshot to {self.snapshot_file}")
        except OSError as e:
            logger.warning(f"Failed to save points snapshot: {e}")

    def _load_snapshot(self) -> Optional[PointsTable]:
        try:
            if not self.snapshot_file.exists():
                return None

            with open(self.snapshot_file, 'r') as f:
                snapshot = json.load(f)

            timestamp = datetime.fromisoformat(snapshot['timestamp'])
            if datetime.now() - timestamp > SNAPSHOT_MAX_AGE:
                logger.warning("Points snapshot is older than 24 hours")
                return None

            logger.info("Using points snapshot for fallback")
            return snapshot['points']

        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Failed to load points snapshot: {e}")
            return None

    def load_points(self) -> PointsTable:
        """Season points table, fetched once per oracle.

        Falls back to a recent snapshot when Sleeper is unreachable, and to an
        empty table when there is none.
        """
        with self._lock:
            if self._points is not None:
                return self._points

            players_raw = self._fetch_json(SLEEPER_PLAYERS_URL)
            stats_raw = None
            if players_raw is not None:
                stats_raw = self._fetch_json(SLEEPER_SEASON_STATS_URL.format(season=self.season))

            if players_raw is not None and stats_raw is not None:
                table = self.build_points_table(players_raw, stats_raw)
                self._save_snapshot(table)
            else:
                logger.warning("Fresh fetch failed, using cached points")
                table = self._load_snapshot()
                if table is None:
                    logger.error("No cached points available, external values disabled")
                    table = {}

            self._points = table
            return table

    def season_points(self, player: Player) -> float:
        """Season points for a player, preferring the entry at their position.

        Raises:
            LookupError: If Sleeper has no points for this name
        """
        by_position = self.load_points().get(player.name)
        if not by_position:
            raise LookupError(f"Player not found on Sleeper: {player.name}")
        if player.position in by_position:
            return by_position[player.position]
        return max(by_position.values())

    def value_for(self, player: Player) -> int:
        return max(MIN_VALUE, round_half_up(self.season_points(player)))

    async def __call__(self, player: Player) -> int:
        return await asyncio.to_thread(self.value_for, player)


def current_season(now: Optional[datetime] = None) -> int:
    """NFL season in progress (seasons start in September)."""
    now = now or datetime.now()
    return now.year if now.month >= 9 else now.year - 1
