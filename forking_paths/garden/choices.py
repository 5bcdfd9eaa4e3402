"""Which choices players can make in each inner scene, and recording them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from forking_paths.errors import GameError
from forking_paths.garden.areas import is_inner_area
from forking_paths.garden.scenes import is_inner_scene
from forking_paths.garden.variables import (
    ACCEPT_ZACH,
    BARBARA_CHEATED,
    BARBARA_SPOUSE,
    BROTHER_LENT_MONEY,
    DIVORCE,
    DRUNK_DRIVING_CONSEQUENCES,
    SPOUSE_CHEATED,
    VIRGINIA_NURSING_HOME,
    get_garden_var,
    set_garden_var,
)
from forking_paths.models import Area, Character, Choice, Scene, Variable
from forking_paths.platform import Member

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild

SCENE_CHOICES: dict[str, list[str]] = {
    "Act I Scene 1": [BARBARA_SPOUSE],
    "Act I Scene 2": [BARBARA_CHEATED],
    "Act I Scene 3": [DIVORCE],
    "Act I Scene 4": [VIRGINIA_NURSING_HOME],
    "Act II Scene 1": [BROTHER_LENT_MONEY],
    "Act II Scene 2": [DRUNK_DRIVING_CONSEQUENCES],
    "Act II Scene 3": [ACCEPT_ZACH],
    "Act II Scene 4": [],
}


class MemberState(BaseModel):
    scene: Scene
    characters: list[Character]
    primary_character: Character
    area: Area | None


class AvailableChoice(BaseModel):
    variable: Variable
    choice: Choice


def get_scene_choices(guild: ManagedGuild, scene: Scene, area: Area) -> list[Variable]:
    """The variables whose choices are offered in scene for area."""
    variable_ids = list(SCENE_CHOICES.get(scene.name, []))
    if scene.name == "Act I Scene 2" and get_garden_var(guild, area, BARBARA_SPOUSE) == "A":
        # only Charles can cheat
        variable_ids.append(SPOUSE_CHEATED)
    return [area.variables[variable_id] for variable_id in variable_ids]


def get_state_for_member(guild: ManagedGuild, member: Member) -> MemberState:
    scene = guild.current_scene()
    if scene is None:
        raise GameError("Choices can only be made in a scene, and the game currently isn't in one")

    characters = guild.member_characters(member)
    primary = next((c for c in characters if c.type.primary), None)
    if primary is None:
        raise GameError(
            "You don't have a primary character assigned, so you can't make choices.  "
            "This is probably a mistake, please ask the GM about this."
        )
    return MemberState(
        scene=scene,
        characters=characters,
        primary_character=primary,
        area=scene.area_for_primary_character(primary),
    )


def get_available_choices(guild: ManagedGuild, scene: Scene, area: Area) -> list[AvailableChoice]:
    return [
        AvailableChoice(variable=variable, choice=choice)
        for variable in get_scene_choices(guild, scene, area)
        for choice in variable.choices
    ]


def make_choice(guild: ManagedGuild, member: Member, args: str) -> Choice:
    state = get_state_for_member(guild, member)
    area = state.area
    if area is None or not is_inner_scene(state.scene) or not is_inner_area(area):
        raise GameError("You don't have any choices available right now.")

    available = get_available_choices(guild, state.scene, area)
    if not available:
        raise GameError("You don't have any choices available right now.")

    choice_help = (
        "Here are your options:\n"
        + "\n".join(f"{a.choice.value}: {a.choice.label}" for a in available)
        + f"\n\nTo choose one, say something like `!choose {available[0].choice.value}`."
    )
    if not args:
        raise GameError(f"Please specify a choice.  {choice_help}")

    for a in available:
        if a.choice.value.lower() == args.lower():
            set_garden_var(guild, area, a.variable.id, a.choice.value)
            return a.choice
    raise GameError(f"{args} is not a valid choice right now.  {choice_help}")


def set_area_choice(guild: ManagedGuild, area: Area, value: str) -> Choice:
    """Record value for whichever of area's variables offers it, in any scene."""
    for variable in area.variables.values():
        choice = variable.find_choice(value)
        if choice is not None:
            set_garden_var(guild, area, variable.id, choice.value)
            return choice
    raise GameError(f"{value} is not a valid choice value.")
