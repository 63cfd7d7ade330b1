"""Errors surfaced to callers of the trade analyzer."""

from typing import Iterable


class TradeAnalyzerError(Exception):
    """Base class for trade analyzer failures."""


class InvalidTeamReference(TradeAnalyzerError, ValueError):
    """A requested team id does not exist in the league (or is reused)."""

    def __init__(self, team_ids: Iterable[int], message: str = "Invalid team ids for trade analysis"):
        self.team_ids = list(team_ids)
        super().__init__(f"{message}: {self.team_ids}")


class LeagueDataError(TradeAnalyzerError):
    """League data could not be read or failed validation."""
