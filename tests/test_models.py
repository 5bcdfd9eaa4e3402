import pytest

from forking_paths.errors import ConfigurationError
from forking_paths.garden.characters import FRAME_CHARACTER_TYPE, INNER_CHARACTER_TYPE, build_characters
from forking_paths.garden.scenes import build_scene
from forking_paths.models import (
    Area,
    AreaSetup,
    Character,
    Choice,
    Game,
    Placement,
    Scene,
    Variable,
    build_default_pairings,
)


# ── Variable ────────────────────────────────────────────────


def test_find_choice_is_case_insensitive():
    variable = Variable(id="v", scope="area", choices=[Choice(value="A", label="Alpha")])
    assert variable.find_choice("a").label == "Alpha"
    assert variable.find_choice("b") is None


def test_describe():
    variable = Variable(id="v", scope="area", choices=[Choice(value="A", label="Alpha")])
    assert variable.describe("A") == "A: Alpha"
    assert variable.describe("Z") == "Z: Unrecognized choice value"


# ── Default pairings ────────────────────────────────────────


def test_garden_default_pairings(game):
    assert game.default_secondaries["Kathy"] == "Barbara"
    assert game.default_secondaries["Rick"] == "William"
    assert game.default_secondary_for(game.characters["Noah"]).name == "Charles"
    assert "Stephanie" not in game.default_secondaries.values()


def test_primary_with_two_defaults_is_rejected():
    characters = build_characters()
    with pytest.raises(ConfigurationError, match="Kathy"):
        build_default_pairings(characters, {"Barbara": ["Kathy"], "Virginia": ["Kathy"]})


def test_pairing_with_unknown_primary_is_rejected():
    characters = build_characters()
    with pytest.raises(ConfigurationError):
        build_default_pairings(characters, {"Barbara": ["Nobody"]})


def test_pairing_secondary_must_be_secondary():
    characters = build_characters()
    with pytest.raises(ConfigurationError):
        build_default_pairings(characters, {"Kathy": ["Rick"]})


# ── Game definition ─────────────────────────────────────────


def test_garden_game_shape(game):
    assert game.scene_names[0] == "Prologue"
    assert game.scene_names[5] == "Intermission"
    assert game.scene_names[-1] == "Epilogue"
    assert len(game.scenes) == 11
    assert set(game.command_handlers) >= {
        "help", "prep", "get", "set", "resetgame", "restorenicknames",
        "choose", "setchoice", "collapse",
    }


def test_inner_scene_uses_default_and_explicit_secondaries(game):
    scene = game.get_scene("Act II Scene 3")
    area_1 = scene.area_setups[0]
    pairs = {p.primary_character.name: p.secondary_character.name for p in area_1.placements}
    assert pairs == {"Kathy": "Barbara", "Milo": "Zach", "Larry": "Charles", "Paula": "Stephanie"}


def test_frame_scene_has_no_secondaries(game):
    prologue = game.get_scene("Prologue")
    assert prologue.areas == [game.areas["The Funeral Home"]]
    assert all(p.secondary_character is None for p in prologue.area_setups[0].placements)


def test_area_for_primary_character(game):
    scene = game.get_scene("Act I Scene 1")
    assert scene.area_for_primary_character(game.characters["Kathy"]).name == "Area 2"
    assert scene.area_for_primary_character(game.characters["Barbara"]) is None


def test_scene_with_undefined_character_is_rejected(game):
    with pytest.raises(ConfigurationError, match="Nobody"):
        build_scene(
            "Broken", INNER_CHARACTER_TYPE, {"Area 1": ["Nobody"]},
            game.areas, game.characters, game.default_secondaries,
        )


def _tiny_game(scenes: list[Scene], areas: list[Area]) -> Game:
    return Game(
        title="Tiny",
        areas=areas,
        character_types=[FRAME_CHARACTER_TYPE, INNER_CHARACTER_TYPE],
        characters=list(build_characters().values()),
        scenes=scenes,
    )


def test_validate_rejects_duplicate_scene_names():
    area = Area(name="Room", text_channel_name="room", voice_channel_name="Room")
    scene = Scene(name="One", character_type=FRAME_CHARACTER_TYPE)
    with pytest.raises(ConfigurationError, match="Duplicate scene name One"):
        _tiny_game([scene, scene], [area]).validate()


def test_validate_rejects_undefined_area():
    area = Area(name="Room", text_channel_name="room", voice_channel_name="Room")
    kathy = Character(name="Kathy", type=FRAME_CHARACTER_TYPE)
    scene = Scene(
        name="One",
        character_type=FRAME_CHARACTER_TYPE,
        area_setups=[AreaSetup(area=area, placements=[Placement(primary_character=kathy)])],
    )
    with pytest.raises(ConfigurationError, match="undefined area Room"):
        _tiny_game([scene], []).validate()


def test_validate_rejects_primary_placed_twice():
    area = Area(name="Room", text_channel_name="room", voice_channel_name="Room")
    kathy = Character(name="Kathy", type=FRAME_CHARACTER_TYPE)
    scene = Scene(
        name="One",
        character_type=FRAME_CHARACTER_TYPE,
        area_setups=[AreaSetup(area=area, placements=[
            Placement(primary_character=kathy),
            Placement(primary_character=kathy),
        ])],
    )
    with pytest.raises(ConfigurationError, match="places Kathy twice"):
        _tiny_game([scene], [area]).validate()


def test_validate_rejects_inner_character_as_primary():
    area = Area(name="Room", text_channel_name="room", voice_channel_name="Room")
    barbara = Character(name="Barbara", type=INNER_CHARACTER_TYPE)
    scene = Scene(
        name="One",
        character_type=FRAME_CHARACTER_TYPE,
        area_setups=[AreaSetup(area=area, placements=[Placement(primary_character=barbara)])],
    )
    with pytest.raises(ConfigurationError, match="places Barbara as a primary character"):
        _tiny_game([scene], [area]).validate()
