"""Player value resolution: external oracle first, heuristic fallback."""

import asyncio
import logging
import math
from decimal import Decimal
from numbers import Real
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from ..config.valuation import ValueSourceType
from ..utils.rounding import round_half_up
from .league import Player, ValuedPlayer
from .player_valuator import PlayerValuator

logger = logging.getLogger(__name__)

# Caller supplied async lookup; may raise or return junk
ValueOracle = Callable[[Player], Awaitable[Any]]


class ValueCache:
    """Best-effort side table of external values keyed by player name.

    Only external results are stored. Writes are last-write-wins and nothing
    depends on an entry being present.
    """

    def __init__(self):
        self._values: Dict[str, int] = {}

    def get(self, name: str) -> Optional[int]:
        return self._values.get(name)

    def set(self, name: str, value: int) -> None:
        self._values[name] = value

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)


def coerce_external_value(raw: Any) -> Optional[int]:
    """Validate an oracle result.

    Returns:
        A positive integer value, or None if the result is unusable
    """
    if isinstance(raw, bool) or not isinstance(raw, (Real, Decimal)):
        return None
    raw = float(raw)
    if not math.isfinite(raw) or raw <= 0:
        return None
    return max(1, round_half_up(raw))


class ValueSource:
    """Resolves a player's value, preferring an injected external oracle."""

    def __init__(self,
                 oracle: Optional[ValueOracle] = None,
                 valuator: Optional[PlayerValuator] = None,
                 cache: Optional[ValueCache] = None,
                 timeout: Optional[float] = None):
        """Initialize the value source.

        Args:
            oracle: Async function returning a positive number for a player
            valuator: Heuristic used whenever the oracle cannot answer
            cache: Optional shared cache of external values
            timeout: Seconds to wait for a single oracle call
        """
        self.oracle = oracle
        self.valuator = valuator or PlayerValuator()
        self.cache = cache
        self.timeout = timeout
        self._inflight: Dict[str, "asyncio.Future[Optional[int]]"] = {}

    def with_valuator(self, valuator: PlayerValuator) -> "ValueSource":
        """Copy of this source sharing oracle, cache and timeout with another heuristic."""
        return ValueSource(oracle=self.oracle, valuator=valuator,
                           cache=self.cache, timeout=self.timeout)

    @property
    def uses_external(self) -> bool:
        return self.oracle is not None

    async def resolve_value(self, player: Player) -> ValuedPlayer:
        """Value one player, degrading to the heuristic on any oracle failure."""
        value = await self._external_value(player)
        if value is not None:
            return ValuedPlayer.from_player(player, value, ValueSourceType.EXTERNAL)
        return self.valuator.valued(player)

    async def resolve_many(self, players: Iterable[Player]) -> List[ValuedPlayer]:
        """Value several players concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.resolve_value(p) for p in players)))

    async def _external_value(self, player: Player) -> Optional[int]:
        if self.oracle is None:
            logger.debug(f"No value oracle configured, using heuristic for {player.name}")
            return None

        if self.cache is not None:
            cached = self.cache.get(player.name)
            if cached is not None:
                logger.debug(f"Value cache hit for {player.name}")
                return cached

        pending = self._inflight.get(player.name)
        if pending is not None:
            return await pending

        task = asyncio.ensure_future(self._call_oracle(player))
        self._inflight[player.name] = task
        try:
            value = await task
        finally:
            self._inflight.pop(player.name, None)

        if value is not None and self.cache is not None:
            self.cache.set(player.name, value)
        return value

    async def _call_oracle(self, player: Player) -> Optional[int]:
        try:
            if self.timeout is not None:
                raw = await asyncio.wait_for(self.oracle(player), timeout=self.timeout)
            else:
                raw = await self.oracle(player)
        except asyncio.TimeoutError:
            logger.warning(f"External valuation timed out for {player.name} after {self.timeout}s")
            return None
        except Exception as e:
            logger.warning(f"External valuation failed for {player.name}: {e}")
            return None

        value = coerce_external_value(raw)
        if value is None:
            logger.warning(f"External valuation returned invalid value for {player.name}: {raw!r}")
        return value
