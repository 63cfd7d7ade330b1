"""Fantasy Football Trade Analyzer

Player valuation, roster strength and trade verdicts for fantasy leagues.
"""

__version__ = "0.1.0"
__author__ = "Fantasy Football Analytics"

from .config.valuation import CuratedNames, Position, ValuationConfig, ValueSourceType
from .exceptions import InvalidTeamReference, LeagueDataError, TradeAnalyzerError
from .models.league import League, Player, Team, ValuedPlayer
from .models.player_valuator import PlayerValuator
from .models.results import RosterEvaluation, TeamInsights, TradeResult, Verdict
from .models.roster_evaluator import RosterEvaluator
from .models.trade_evaluator import TradeEvaluator
from .models.value_source import ValueCache, ValueSource

__all__ = [
    "CuratedNames",
    "Position",
    "ValuationConfig",
    "ValueSourceType",
    "InvalidTeamReference",
    "LeagueDataError",
    "TradeAnalyzerError",
    "League",
    "Player",
    "Team",
    "ValuedPlayer",
    "PlayerValuator",
    "RosterEvaluation",
    "TeamInsights",
    "TradeResult",
    "Verdict",
    "RosterEvaluator",
    "TradeEvaluator",
    "ValueCache",
    "ValueSource",
]
