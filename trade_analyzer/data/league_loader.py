"""League provider backed by JSON files."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from ..exceptions import LeagueDataError
from ..models.league import League

logger = logging.getLogger(__name__)

MOCK_LEAGUE_FILE = Path(__file__).with_name("mock_league.json")


def load_league(path: Union[str, Path]) -> League:
    """Load a fully populated league from a JSON file.

    Args:
        path: File holding ``{"teams": [{"teamId", "name", "roster": [...]}]}``

    Returns:
        Validated league

    Raises:
        LeagueDataError: If the file is missing, unreadable or invalid
    """
    league_path = Path(path)
    if not league_path.exists():
        raise LeagueDataError(f"League file not found: {league_path}")

    try:
        with open(league_path, 'r') as f:
            data = json.load(f)
        league = League.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Failed to load league from {league_path}: {e}")
        raise LeagueDataError(f"Invalid league data in {league_path}: {e}") from e

    player_count = sum(len(t.roster) for t in league.teams)
    logger.info(f"Loaded {len(league.teams)} teams and {player_count} players from {league_path}")
    return league


def load_mock_league() -> League:
    """Bundled league for local development."""
    return load_league(MOCK_LEAGUE_FILE)


def load_league_or_mock(path: Optional[Union[str, Path]] = None) -> League:
    return load_league(path) if path else load_mock_league()
