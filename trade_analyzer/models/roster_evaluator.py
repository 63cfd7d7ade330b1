"""Roster aggregation into positional starter and depth scores."""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..config.valuation import Position, ValuationConfig
from ..utils.rounding import mean, round_half_up
from .league import Player, ValuedPlayer
from .player_valuator import PlayerValuator
from .results import PositionScore, RosterEvaluation
from .value_source import ValueSource

logger = logging.getLogger(__name__)


class RosterEvaluator:
    """Turns a roster into total value, positional scores, strengths and weaknesses."""

    def __init__(self,
                 config: Optional[ValuationConfig] = None,
                 value_source: Optional[ValueSource] = None):
        """Initialize the evaluator.

        Args:
            config: Valuation constants. Defaults to the bundled configuration.
            value_source: Used by ``evaluate_async`` to value players. Defaults
                to a heuristic-only source sharing ``config``. A source whose
                heuristic uses other tables is rebound to this ``config``.
        """
        if config is None:
            config = value_source.valuator.config if value_source else ValuationConfig.default()
        self.config = config
        self.valuator = PlayerValuator(self.config)
        if value_source is None:
            value_source = ValueSource(valuator=self.valuator)
        elif value_source.valuator.config != self.config:
            # Fallback values must follow the same tables as the sync path
            value_source = value_source.with_valuator(self.valuator)
        self.value_source = value_source

    def evaluate(self, roster: Iterable[Player]) -> RosterEvaluation:
        """Evaluate a roster with heuristic values only.

        Players that already carry a value keep it.
        """
        valued = [
            p if isinstance(p, ValuedPlayer) else self.valuator.valued(p)
            for p in roster
        ]
        return self.aggregate(valued)

    async def evaluate_async(self, roster: Iterable[Player]) -> RosterEvaluation:
        """Evaluate a roster, valuing unvalued players through the value source."""
        roster = list(roster)
        pending = [p for p in roster if not isinstance(p, ValuedPlayer)]
        resolved = iter(await self.value_source.resolve_many(pending))
        valued = [
            p if isinstance(p, ValuedPlayer) else next(resolved)
            for p in roster
        ]
        return self.aggregate(valued)

    def aggregate(self, players: List[ValuedPlayer]) -> RosterEvaluation:
        """Build the evaluation from already valued players."""
        by_position: Dict[str, List[int]] = defaultdict(list)
        for player in players:
            by_position[player.position or ""].append(player.value)

        scores = {}
        for position in Position:
            need = self.config.starter_needs.get(position.value, 1)
            values = sorted(by_position.get(position.value, []), reverse=True)
            starters = values[:need]
            depth = values[need:need + self.config.depth_slots]
            scores[position.value] = PositionScore(
                starter_score=round_half_up(mean(starters)),
                depth_score=round_half_up(mean(depth)),
                count=len(values),
            )

        strengths = []
        weaknesses = []
        for position, score in scores.items():
            need = self.config.starter_needs.get(position, 1)
            if score.starter_score >= self.config.strength_threshold:
                strengths.append(position)
            if score.starter_score < self.config.weakness_threshold or score.count < need:
                weaknesses.append(position)

        total_value = sum(p.value for p in players)
        logger.debug(
            f"Evaluated roster of {len(players)} players: total={total_value}, "
            f"strengths={strengths}, weaknesses={weaknesses}"
        )

        return RosterEvaluation(
            players=players,
            total_value=total_value,
            scores=scores,
            strengths=strengths,
            weaknesses=weaknesses,
        )
