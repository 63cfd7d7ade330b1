"""Valuation constants, curated name tables and enum types."""

import json
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict

DEFAULT_NAMES_FILE = Path(__file__).with_name("curated_names.json")


class Position(str, Enum):
    """Roster positions, in table declaration order."""
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    DST = "DST"
    K = "K"


class ValueSourceType(str, Enum):
    """Where a player's value came from."""
    EXTERNAL = "external"
    FALLBACK = "fallback"


class ScoringType(str, Enum):
    """Supported fantasy scoring systems for external season points."""
    STANDARD = "standard"
    PPR = "ppr"
    HALF_PPR = "half_ppr"


class CuratedNames(BaseModel):
    """Name tables that adjust the heuristic value.

    Matching is exact and case-sensitive. A name in both ``elite`` and
    ``breakout`` only receives the elite bonus.
    """
    model_config = ConfigDict(frozen=True)

    elite: FrozenSet[str] = frozenset()
    breakout: FrozenSet[str] = frozenset()
    risk: FrozenSet[str] = frozenset()

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CuratedNames":
        """Load curated names from a JSON file with elite/breakout/risk lists."""
        with open(path, 'r') as f:
            return cls.model_validate(json.load(f))

    @classmethod
    def default(cls) -> "CuratedNames":
        """Load the bundled name tables."""
        return cls.from_file(DEFAULT_NAMES_FILE)


class ValuationConfig(BaseModel):
    """Heuristic, roster and trade thresholds."""
    model_config = ConfigDict(frozen=True)

    # Heuristic player value
    position_base_values: Dict[str, int] = {
        "QB": 40, "RB": 80, "WR": 75, "TE": 40, "DST": 10, "K": 10,
    }
    default_base_value: int = 40
    value_floor: int = 10
    elite_bonus: int = 20
    breakout_bonus: int = 12
    risk_penalty: int = 8
    names: CuratedNames = CuratedNames()

    # Roster aggregation
    starter_needs: Dict[str, int] = {
        "QB": 1, "RB": 2, "WR": 3, "TE": 1, "DST": 1, "K": 1,
    }
    depth_slots: int = 2
    strength_threshold: int = 75  # starter score at or above
    weakness_threshold: int = 60  # starter score below

    # Trade verdict
    fairness_floor: int = 20
    fairness_ratio: float = 0.12

    # Positional shift notes
    starter_shift_threshold: int = 8
    depth_shift_threshold: int = 10

    @classmethod
    def default(cls, names: Optional[CuratedNames] = None) -> "ValuationConfig":
        """Default thresholds with the bundled (or given) curated names."""
        return cls(names=names if names is not None else CuratedNames.default())

    @classmethod
    def with_names_file(cls, path: Union[str, Path]) -> "ValuationConfig":
        """Default thresholds with curated names read from ``path``."""
        return cls.default(names=CuratedNames.from_file(path))
