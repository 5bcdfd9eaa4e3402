"""Variable resolution.

A variable reference is (scope, variable_id) plus, for area scope, the area
it belongs to. Resolution looks the id up in the game's static definitions
and yields a qualifier naming the storage slot:

    global                      → "global"
    area "Area 1"               → "area.area_1"

The qualified id stored in the variable store is qualifier + "." + id.
Unknown ids resolve to None ("not applicable here"), never an error.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from forking_paths.errors import GameError
from forking_paths.models import Area, Game, Scope, Variable

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild


class ResolvedVariable(BaseModel):
    qualifier: str
    variable: Variable

    @property
    def qualified_id(self) -> str:
        return f"{self.qualifier}.{self.variable.id}"


def normalize_name(name: str) -> str:
    """"Area 1" → "area_1"; every run of non-word characters becomes one underscore."""
    return re.sub(r"\W+", "_", name.lower())


def area_qualifier(area: Area) -> str:
    return f"area.{normalize_name(area.name)}"


def resolve_variable(
    game: Game, scope: Scope, variable_id: str, area: Area | None = None
) -> ResolvedVariable | None:
    if scope == "global":
        variable = game.global_variables.get(variable_id)
        return ResolvedVariable(qualifier="global", variable=variable) if variable else None
    if scope == "area":
        if area is None:
            raise ValueError(f"Resolving area variable {variable_id!r} requires an area")
        variable = area.variables.get(variable_id)
        return ResolvedVariable(qualifier=area_qualifier(area), variable=variable) if variable else None
    raise ValueError(f"Unknown variable scope {scope!r}")


def all_resolved_variables(game: Game) -> list[ResolvedVariable]:
    """Every storable variable slot in the game: globals first, then each area's."""
    resolved = [
        resolve_variable(game, "global", variable_id) for variable_id in game.global_variables
    ]
    for area in game.areas.values():
        resolved.extend(
            resolve_variable(game, "area", variable_id, area) for variable_id in area.variables
        )
    return [r for r in resolved if r is not None]


def _resolve_or_raise(
    game: Game, scope: Scope, variable_id: str, area: Area | None
) -> ResolvedVariable:
    resolved = resolve_variable(game, scope, variable_id, area)
    if resolved is None:
        raise GameError(f'Could not resolve variable "{variable_id}" with scope "{scope}"')
    return resolved


def get_variable_values(
    guild: ManagedGuild, scope: Scope, variable_ids: list[str], area: Area | None = None
) -> list[Any]:
    resolved = [_resolve_or_raise(guild.game, scope, vid, area) for vid in variable_ids]
    return guild.storage.get_variable_values(guild.guild_id, [r.qualified_id for r in resolved])


def get_variable_value(
    guild: ManagedGuild, scope: Scope, variable_id: str, area: Area | None = None
) -> Any:
    return get_variable_values(guild, scope, [variable_id], area)[0]


def set_variable_value(
    guild: ManagedGuild, scope: Scope, variable_id: str, value: Any, area: Area | None = None
) -> None:
    resolved = _resolve_or_raise(guild.game, scope, variable_id, area)
    guild.storage.set_variable_value(guild.guild_id, resolved.qualified_id, value)
