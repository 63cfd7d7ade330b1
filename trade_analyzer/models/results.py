"""Evaluation results handed to the presentation layer."""

from enum import Enum
from typing import Dict, Tuple

from ..config.valuation import ValueSourceType
from .league import FrozenModel, Player, ValuedPlayer


class Verdict(str, Enum):
    """Trade outcome from the proposing team's point of view."""
    FAIR = "Fair"
    USER_GAINS_VALUE = "User gains value"
    USER_LOSES_VALUE = "User loses value"


class PositionScore(FrozenModel):
    starter_score: int = 0
    depth_score: int = 0
    count: int = 0


class RosterEvaluation(FrozenModel):
    """Aggregate strength of one roster."""
    players: Tuple[ValuedPlayer, ...]
    total_value: int
    scores: Dict[str, PositionScore]
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]

    def uses_external(self) -> bool:
        """True if any player value came from an external source."""
        return any(p.source == ValueSourceType.EXTERNAL for p in self.players)


class TeamSnapshot(FrozenModel):
    """One side of a trade before and after the players move."""
    id: int
    name: str
    before: RosterEvaluation
    after: RosterEvaluation


class ValuationSources(FrozenModel):
    uses_external: bool = False


class TradeResult(FrozenModel):
    offer_from_value: int
    offer_to_value: int
    value_delta: int
    threshold: int
    verdict: Verdict
    rationale: Tuple[str, ...]
    from_team: TeamSnapshot
    to_team: TeamSnapshot
    offer_from_players: Tuple[Player, ...]
    offer_to_players: Tuple[Player, ...]
    valuation_sources: ValuationSources = ValuationSources()


class TeamInsights(FrozenModel):
    team_id: int
    name: str
    evaluation: RosterEvaluation
    valuation_source: str = "fallback"
