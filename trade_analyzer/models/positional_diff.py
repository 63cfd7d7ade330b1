"""Positional swing notes between two evaluations of the same team."""

from typing import List, Optional

from ..config.valuation import ValuationConfig
from ..utils.rounding import round_half_up
from .results import PositionScore, RosterEvaluation


def describe_positional_changes(before: RosterEvaluation,
                                after: RosterEvaluation,
                                config: Optional[ValuationConfig] = None) -> List[str]:
    """Describe meaningful starter and depth swings, position by position.

    Positions are visited in the order they appear in ``before.scores``; a
    position missing from ``after`` counts as all zeros.

    Args:
        before: Evaluation prior to the change
        after: Evaluation after the change
        config: Shift thresholds. Defaults to the standard configuration.

    Returns:
        Human readable notes, possibly empty
    """
    config = config or ValuationConfig()
    notes = []
    for position, was in before.scores.items():
        now = after.scores.get(position, PositionScore())
        starter_diff = round_half_up(now.starter_score - was.starter_score)
        depth_diff = round_half_up(now.depth_score - was.depth_score)

        if starter_diff >= config.starter_shift_threshold:
            notes.append(f"Starter {position} improves (+{starter_diff}).")
        if starter_diff <= -config.starter_shift_threshold:
            notes.append(f"Starter {position} weakens ({starter_diff}).")
        if depth_diff >= config.depth_shift_threshold:
            notes.append(f"Depth at {position} improves (+{depth_diff}).")
        if depth_diff <= -config.depth_shift_threshold:
            notes.append(f"Depth at {position} drops ({depth_diff}).")
    return notes
