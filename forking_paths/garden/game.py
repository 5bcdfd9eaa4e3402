"""Assembles the complete Garden of Forking Paths game definition."""

from __future__ import annotations

from forking_paths.commands import COMMON_COMMANDS
from forking_paths.garden.areas import build_areas
from forking_paths.garden.characters import (
    FRAME_CHARACTER_TYPE,
    INNER_CHARACTER_TYPE,
    build_characters,
    build_default_secondaries,
)
from forking_paths.garden.commands import GARDEN_COMMANDS
from forking_paths.garden.hooks import post_prep_garden_scene, pre_prep_garden_scene
from forking_paths.garden.scenes import build_scenes
from forking_paths.models import Game

TITLE = "A Garden of Forking Paths"


def build_garden_game(gm_role_name: str = "GM") -> Game:
    """Build and validate the game; raises ConfigurationError if inconsistent."""
    areas = build_areas()
    characters = build_characters()
    default_secondaries = build_default_secondaries(characters)
    game = Game(
        title=TITLE,
        areas=list(areas.values()),
        character_types=[FRAME_CHARACTER_TYPE, INNER_CHARACTER_TYPE],
        characters=list(characters.values()),
        scenes=build_scenes(areas, characters, default_secondaries),
        default_secondaries=default_secondaries,
        gm_role_name=gm_role_name,
        command_handlers={**COMMON_COMMANDS, **GARDEN_COMMANDS},
        pre_prep_scene=pre_prep_garden_scene,
        post_prep_scene=post_prep_garden_scene,
    )
    game.validate()
    return game
