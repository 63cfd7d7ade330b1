"""League data model: players, valued players, teams and leagues."""

from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..config.valuation import ValueSourceType


class FrozenModel(BaseModel):
    """Immutable model serialised with camelCase keys."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Player(FrozenModel):
    """A rostered player. Value is always derived, never stored here."""
    player_id: int
    name: str
    # QB, RB, WR, TE, DST or K; anything else gets the default base value
    position: Optional[str] = None


class ValuedPlayer(Player):
    """A player plus the value derived for one evaluation pass."""
    value: int = Field(gt=0)
    source: ValueSourceType

    @classmethod
    def from_player(cls, player: Player, value: int,
                    source: ValueSourceType) -> "ValuedPlayer":
        return cls(
            player_id=player.player_id,
            name=player.name,
            position=player.position,
            value=value,
            source=source,
        )


class Team(FrozenModel):
    team_id: int
    name: str
    roster: Tuple[Player, ...] = ()

    def player_ids(self) -> List[int]:
        return [p.player_id for p in self.roster]

    def with_roster(self, roster: Iterable[Player]) -> "Team":
        """Return a copy of this team holding ``roster``."""
        return Team(team_id=self.team_id, name=self.name, roster=tuple(roster))


class League(FrozenModel):
    """A read-only set of teams with unique ids."""
    teams: Tuple[Team, ...] = ()

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "League":
        seen_teams = set()
        seen_players = set()
        for team in self.teams:
            if team.team_id in seen_teams:
                raise ValueError(f"Duplicate team id {team.team_id}")
            seen_teams.add(team.team_id)
            for player in team.roster:
                if player.player_id in seen_players:
                    raise ValueError(f"Duplicate player id {player.player_id}")
                seen_players.add(player.player_id)
        return self

    def find_team(self, team_id: int) -> Optional[Team]:
        for team in self.teams:
            if team.team_id == team_id:
                return team
        return None

    def player_pool(self) -> Dict[int, Player]:
        """All rostered players keyed by id."""
        return {p.player_id: p for team in self.teams for p in team.roster}

    def find_players(self, player_ids: Iterable[int]) -> List[Player]:
        """Resolve ids against every roster in the league.

        Unknown ids are skipped and repeated ids are returned once, in the
        order first requested.
        """
        pool = self.player_pool()
        found = []
        seen = set()
        for player_id in player_ids:
            if player_id in seen or player_id not in pool:
                continue
            seen.add(player_id)
            found.append(pool[player_id])
        return found
