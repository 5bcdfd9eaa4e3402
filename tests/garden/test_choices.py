import pytest

from forking_paths.errors import GameError
from forking_paths.garden.choices import (
    get_scene_choices,
    get_state_for_member,
    make_choice,
    set_area_choice,
)
from forking_paths.garden.variables import get_garden_var, set_garden_var


def test_scene_choices(guild):
    game = guild.game
    area = game.areas["Area 1"]
    assert [v.id for v in get_scene_choices(guild, game.get_scene("Act I Scene 1"), area)] == [
        "barbaraSpouse"
    ]
    assert [v.id for v in get_scene_choices(guild, game.get_scene("Act I Scene 2"), area)] == [
        "barbaraCheated"
    ]
    assert get_scene_choices(guild, game.get_scene("Act II Scene 4"), area) == []
    assert get_scene_choices(guild, game.get_scene("Prologue"), game.areas["The Funeral Home"]) == []


def test_charles_timeline_offers_spouse_cheated(guild):
    area = guild.game.areas["Area 1"]
    set_garden_var(guild, area, "barbaraSpouse", "A")
    choices = get_scene_choices(guild, guild.game.get_scene("Act I Scene 2"), area)
    assert [v.id for v in choices] == ["barbaraCheated", "spouseCheated"]


def test_state_for_member(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 1")
    guild.platform.members["p-kathy"].roles.add("Barbara")

    state = get_state_for_member(guild, player("Kathy"))

    assert state.scene.name == "Act I Scene 1"
    assert state.primary_character.name == "Kathy"
    assert [c.name for c in state.characters] == ["Barbara", "Kathy"]
    assert state.area.name == "Area 2"


def test_state_without_scene(guild, player):
    with pytest.raises(GameError, match="the game currently isn't in one"):
        get_state_for_member(guild, player("Kathy"))


def test_state_without_primary_character(guild, gm):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 1")
    with pytest.raises(GameError, match="You don't have a primary character assigned"):
        get_state_for_member(guild, gm)


def test_make_choice_records_canonical_value(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 1")

    choice = make_choice(guild, player("Kathy"), "b")

    assert choice.label == "Barbara married William."
    assert get_garden_var(guild, guild.game.areas["Area 2"], "barbaraSpouse") == "B"
    assert get_garden_var(guild, guild.game.areas["Area 1"], "barbaraSpouse") is None


def test_make_choice_without_argument_lists_options(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 1")
    with pytest.raises(GameError) as exc:
        make_choice(guild, player("Kathy"), "")
    assert str(exc.value) == (
        "Please specify a choice.  Here are your options:\n"
        "A: Barbara married Charles.\n"
        "B: Barbara married William.\n\n"
        "To choose one, say something like `!choose A`."
    )


def test_make_choice_rejects_value_from_another_scene(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 1")
    with pytest.raises(GameError, match="C is not a valid choice right now."):
        make_choice(guild, player("Kathy"), "C")


def test_no_choices_in_frame_scene(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Prologue")
    with pytest.raises(GameError, match="You don't have any choices available right now."):
        make_choice(guild, player("Kathy"), "A")


def test_no_choices_in_final_inner_scene(guild, player):
    guild.storage.set_scene_name(guild.guild_id, "Act II Scene 4")
    with pytest.raises(GameError, match="You don't have any choices available right now."):
        make_choice(guild, player("Kathy"), "A")


def test_set_area_choice_finds_owning_variable(guild):
    area = guild.game.areas["Area 3"]
    choice = set_area_choice(guild, area, "n")
    assert choice.value == "N"
    assert get_garden_var(guild, area, "drunkDrivingConsequences") == "N"


def test_set_area_choice_rejects_unknown_value(guild):
    with pytest.raises(GameError, match="Z is not a valid choice value."):
        set_area_choice(guild, guild.game.areas["Area 3"], "Z")
