"""Heuristic player valuation from position and curated name tables."""

from typing import Optional

from ..config.valuation import ValuationConfig, ValueSourceType
from .league import Player, ValuedPlayer


class PlayerValuator:
    """Deterministic, I/O free player value heuristic."""

    def __init__(self, config: Optional[ValuationConfig] = None):
        """Initialize the valuator.

        Args:
            config: Valuation constants and curated names. Defaults to the
                bundled configuration.
        """
        self.config = config or ValuationConfig.default()

    def base_value(self, position: Optional[str]) -> int:
        """Base value for a position; unknown or missing uses the default."""
        return self.config.position_base_values.get(
            position or "", self.config.default_base_value
        )

    def bonus(self, name: str) -> int:
        """Name based adjustment.

        Elite and breakout bonuses are exclusive (elite wins); the risk
        penalty stacks with either.
        """
        names = self.config.names
        bonus = 0
        if name in names.elite:
            bonus += self.config.elite_bonus
        elif name in names.breakout:
            bonus += self.config.breakout_bonus
        if name in names.risk:
            bonus -= self.config.risk_penalty
        return bonus

    def value(self, player: Player) -> int:
        """Heuristic value of a player, never below the configured floor."""
        return max(
            self.config.value_floor,
            self.base_value(player.position) + self.bonus(player.name),
        )

    def valued(self, player: Player) -> ValuedPlayer:
        """Attach the heuristic value to a player."""
        return ValuedPlayer.from_player(player, self.value(player), ValueSourceType.FALLBACK)
