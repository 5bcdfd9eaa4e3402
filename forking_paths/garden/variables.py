"""The eight timeline choice variables.

Every inner area gets its own copy of these; choice values are single
letters A to P and unique across all eight variables, so a letter alone
identifies both the variable and the choice.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from forking_paths.models import Area, Choice, Variable
from forking_paths.variables import get_variable_values, set_variable_value

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild

BARBARA_SPOUSE = "barbaraSpouse"
BARBARA_CHEATED = "barbaraCheated"
SPOUSE_CHEATED = "spouseCheated"
DIVORCE = "divorce"
VIRGINIA_NURSING_HOME = "virginiaNursingHome"
BROTHER_LENT_MONEY = "brotherLentMoney"
DRUNK_DRIVING_CONSEQUENCES = "drunkDrivingConsequences"
ACCEPT_ZACH = "acceptZach"

TIMELINE_VARIABLES: list[tuple[str, list[tuple[str, str]]]] = [
    (BARBARA_SPOUSE, [
        ("A", "Barbara married Charles."),
        ("B", "Barbara married William."),
    ]),
    (BARBARA_CHEATED, [
        ("C", "She cheated."),
        ("D", "She did not cheat."),
    ]),
    (SPOUSE_CHEATED, [
        ("E", "He cheated."),
        ("F", "He did not cheat."),
    ]),
    (DIVORCE, [
        ("G", "They got a divorce."),
        ("H", "They stayed married."),
    ]),
    (VIRGINIA_NURSING_HOME, [
        ("I", "They put Virginia in a nursing home."),
        ("J", "They took care of Virginia at home."),
    ]),
    (BROTHER_LENT_MONEY, [
        ("K", "The brother lent money."),
        ("L", "The brother did not lend money."),
    ]),
    (DRUNK_DRIVING_CONSEQUENCES, [
        ("M", "They went easy on Stephanie after her drunk driving."),
        ("N", "They came down hard on Stephanie for driving drunk."),
    ]),
    (ACCEPT_ZACH, [
        ("O", "Zach was accepted into the family."),
        ("P", "The family rejected Zach."),
    ]),
]


def build_timeline_variables() -> dict[str, Variable]:
    """A fresh set of area-scoped variables for one inner area."""
    return {
        variable_id: Variable(
            id=variable_id,
            scope="area",
            choices=[Choice(value=value, label=label) for value, label in choices],
        )
        for variable_id, choices in TIMELINE_VARIABLES
    }


def get_garden_vars(guild: ManagedGuild, area: Area, variable_ids: list[str]) -> list[Any]:
    return get_variable_values(guild, "area", variable_ids, area)


def get_garden_var(guild: ManagedGuild, area: Area, variable_id: str) -> Any:
    return get_garden_vars(guild, area, [variable_id])[0]


def set_garden_var(guild: ManagedGuild, area: Area, variable_id: str, value: Any) -> None:
    set_variable_value(guild, "area", variable_id, value, area)
