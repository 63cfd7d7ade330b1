"""Trade evaluation: before/after roster snapshots, value delta, verdict and rationale."""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config.valuation import ValuationConfig
from ..exceptions import InvalidTeamReference
from ..utils.rounding import round_half_up
from .league import League, Player, Team
from .positional_diff import describe_positional_changes
from .results import (
    RosterEvaluation,
    TeamInsights,
    TeamSnapshot,
    TradeResult,
    ValuationSources,
    Verdict,
)
from .roster_evaluator import RosterEvaluator
from .value_source import ValueSource

logger = logging.getLogger(__name__)

NO_SHIFTS_NOTE = "No big lineup shifts detected."


def apply_trade(team: Team, outgoing_ids: Iterable[int], incoming: Iterable[Player]) -> Team:
    """New view of ``team`` with outgoing ids removed and incoming players appended."""
    outgoing = set(outgoing_ids)
    remaining = [p for p in team.roster if p.player_id not in outgoing]
    return team.with_roster(remaining + list(incoming))


def fairness_threshold(offer_from_value: float, offer_to_value: float,
                       config: ValuationConfig) -> int:
    """Delta needed before a trade stops being fair; grows with deal size."""
    largest = max(offer_from_value, offer_to_value, 1)
    return max(config.fairness_floor, round_half_up(config.fairness_ratio * largest))


def decide_verdict(value_delta: int, threshold: int) -> Verdict:
    """Inclusive at the boundary: a delta equal to the threshold is not fair."""
    if value_delta >= threshold:
        return Verdict.USER_GAINS_VALUE
    if value_delta <= -threshold:
        return Verdict.USER_LOSES_VALUE
    return Verdict.FAIR


def describe_value_delta(verdict: Verdict, value_delta: int, threshold: int) -> str:
    if verdict == Verdict.USER_GAINS_VALUE:
        return f"You gain about {value_delta} in net value (threshold ~{threshold})."
    if verdict == Verdict.USER_LOSES_VALUE:
        return (f"You are giving up about {abs(value_delta)} more value than you "
                f"receive (threshold ~{threshold}).")
    return "Value looks roughly even."


class TradeEvaluator:
    """Judges whether a proposed trade favors the proposing team."""

    def __init__(self,
                 config: Optional[ValuationConfig] = None,
                 value_source: Optional[ValueSource] = None):
        """Initialize the trade evaluator.

        Args:
            config: Valuation constants. Defaults to the bundled configuration.
            value_source: External-aware value source for the async paths.
                Defaults to a heuristic-only source. Its heuristic is rebound
                to ``config`` so sync and async paths value players alike.
        """
        self.roster_evaluator = RosterEvaluator(config, value_source)
        self.config = self.roster_evaluator.config
        self.valuator = self.roster_evaluator.valuator
        self.value_source = self.roster_evaluator.value_source

    def analyze_trade(self,
                      league: League,
                      from_team_id: int,
                      to_team_id: int,
                      offer_from_ids: Sequence[int] = (),
                      offer_to_ids: Sequence[int] = ()) -> TradeResult:
        """Analyze a trade using heuristic values only.

        Args:
            league: League holding both teams
            from_team_id: Proposing team; the verdict is from its point of view
            to_team_id: Receiving team
            offer_from_ids: Player ids leaving the proposing team
            offer_to_ids: Player ids leaving the receiving team

        Returns:
            Complete trade result

        Raises:
            InvalidTeamReference: If either team is missing or both ids match
        """
        from_team, to_team = self._resolve_teams(league, from_team_id, to_team_id)
        offer_from, offer_to = self._resolve_offers(league, offer_from_ids, offer_to_ids)

        before_a = self.roster_evaluator.evaluate(from_team.roster)
        before_b = self.roster_evaluator.evaluate(to_team.roster)
        after_a = self.roster_evaluator.evaluate(
            apply_trade(from_team, offer_from_ids, offer_to).roster)
        after_b = self.roster_evaluator.evaluate(
            apply_trade(to_team, offer_to_ids, offer_from).roster)

        offer_from_value = sum(self.valuator.value(p) for p in offer_from)
        offer_to_value = sum(self.valuator.value(p) for p in offer_to)

        return self._build_result(
            from_team, to_team, offer_from, offer_to,
            offer_from_value, offer_to_value,
            (before_a, after_a), (before_b, after_b),
            uses_external=False,
        )

    async def analyze_trade_async(self,
                                  league: League,
                                  from_team_id: int,
                                  to_team_id: int,
                                  offer_from_ids: Sequence[int] = (),
                                  offer_to_ids: Sequence[int] = ()) -> TradeResult:
        """Analyze a trade valuing players through the value source.

        Offered players are valued on their own, not read back from the roster
        evaluations. Same arguments and errors as :meth:`analyze_trade`.
        """
        from_team, to_team = self._resolve_teams(league, from_team_id, to_team_id)
        offer_from, offer_to = self._resolve_offers(league, offer_from_ids, offer_to_ids)

        before_a = await self.roster_evaluator.evaluate_async(from_team.roster)
        before_b = await self.roster_evaluator.evaluate_async(to_team.roster)
        after_a = await self.roster_evaluator.evaluate_async(
            apply_trade(from_team, offer_from_ids, offer_to).roster)
        after_b = await self.roster_evaluator.evaluate_async(
            apply_trade(to_team, offer_to_ids, offer_from).roster)

        offer_from_values = await self.value_source.resolve_many(offer_from)
        offer_to_values = await self.value_source.resolve_many(offer_to)

        return self._build_result(
            from_team, to_team, offer_from, offer_to,
            sum(p.value for p in offer_from_values),
            sum(p.value for p in offer_to_values),
            (before_a, after_a), (before_b, after_b),
            uses_external=self.value_source.uses_external,
        )

    def get_team_insights(self, league: League, team_id: int) -> TeamInsights:
        """Heuristic strengths and weaknesses for one team.

        Raises:
            InvalidTeamReference: If the team does not exist
        """
        team = self._resolve_team(league, team_id)
        return self._insights(team, self.roster_evaluator.evaluate(team.roster))

    async def get_team_insights_async(self, league: League, team_id: int) -> TeamInsights:
        team = self._resolve_team(league, team_id)
        return self._insights(team, await self.roster_evaluator.evaluate_async(team.roster))

    def _insights(self, team: Team, evaluation: RosterEvaluation) -> TeamInsights:
        return TeamInsights(
            team_id=team.team_id,
            name=team.name,
            evaluation=evaluation,
            valuation_source="external+fallback" if evaluation.uses_external() else "fallback",
        )

    def _resolve_team(self, league: League, team_id: int) -> Team:
        team = league.find_team(team_id)
        if team is None:
            logger.warning(f"Team {team_id} not found in league")
            raise InvalidTeamReference([team_id], "Invalid team id")
        return team

    def _resolve_teams(self, league: League, from_team_id: int,
                       to_team_id: int) -> Tuple[Team, Team]:
        from_team = league.find_team(from_team_id)
        to_team = league.find_team(to_team_id)
        missing = [tid for tid, team in ((from_team_id, from_team), (to_team_id, to_team))
                   if team is None]
        if missing:
            logger.warning(f"Trade references unknown teams: {missing}")
            raise InvalidTeamReference(missing)
        if from_team_id == to_team_id:
            raise InvalidTeamReference([from_team_id], "Trade teams must differ")
        return from_team, to_team

    def _resolve_offers(self, league: League, offer_from_ids: Sequence[int],
                        offer_to_ids: Sequence[int]) -> Tuple[List[Player], List[Player]]:
        offer_from = league.find_players(offer_from_ids)
        offer_to = league.find_players(offer_to_ids)
        found = {p.player_id for p in offer_from + offer_to}
        dropped = [pid for pid in list(offer_from_ids) + list(offer_to_ids) if pid not in found]
        if dropped:
            logger.warning(f"Dropping unknown player ids from trade: {dropped}")
        return offer_from, offer_to

    def _build_result(self,
                      from_team: Team,
                      to_team: Team,
                      offer_from: List[Player],
                      offer_to: List[Player],
                      offer_from_value: int,
                      offer_to_value: int,
                      side_a: Tuple[RosterEvaluation, RosterEvaluation],
                      side_b: Tuple[RosterEvaluation, RosterEvaluation],
                      uses_external: bool) -> TradeResult:
        # Positive delta: the proposing team receives more than it sends
        value_delta = round_half_up(offer_to_value - offer_from_value)
        threshold = fairness_threshold(offer_from_value, offer_to_value, self.config)
        verdict = decide_verdict(value_delta, threshold)

        rationale = [describe_value_delta(verdict, value_delta, threshold)]
        shifts = describe_positional_changes(side_a[0], side_a[1], self.config)
        rationale.extend(shifts)
        if not shifts:
            rationale.append(NO_SHIFTS_NOTE)

        logger.info(
            f"Trade {from_team.team_id}->{to_team.team_id}: "
            f"sent={offer_from_value}, received={offer_to_value}, "
            f"delta={value_delta}, threshold={threshold}, verdict={verdict.value}"
        )

        return TradeResult(
            offer_from_value=offer_from_value,
            offer_to_value=offer_to_value,
            value_delta=value_delta,
            threshold=threshold,
            verdict=verdict,
            rationale=rationale,
            from_team=TeamSnapshot(id=from_team.team_id, name=from_team.name,
                                   before=side_a[0], after=side_a[1]),
            to_team=TeamSnapshot(id=to_team.team_id, name=to_team.name,
                                 before=side_b[0], after=side_b[1]),
            offer_from_players=offer_from,
            offer_to_players=offer_to,
            valuation_sources=ValuationSources(uses_external=uses_external),
        )
