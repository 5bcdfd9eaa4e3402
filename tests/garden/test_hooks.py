import logging

from forking_paths.garden.hooks import (
    build_scene_materials,
    character_packet_paths,
    post_prep_garden_scene,
    scene_filename_portion,
)
from forking_paths.garden.variables import set_garden_var


def write(path, text=""):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_filename_portion(guild):
    area = guild.game.areas["Area 1"]
    set_garden_var(guild, area, "barbaraSpouse", "A")
    assert scene_filename_portion(guild, guild.game.get_scene("Act I Scene 1"), area) == "Act I Scene 1"
    assert scene_filename_portion(guild, guild.game.get_scene("Act I Scene 2"), area) == "Act I Scene 2 (A)"


def test_character_packet_paths(content_dir):
    assert character_packet_paths(content_dir, "Act I Scene 2 (B)", ["Barbara"]) == [
        content_dir / "inner-character-packets" / "Barbara" / "Barbara - Act I Scene 2 (B).pdf"
    ]


def test_scene_materials(guild, content_dir, caplog):
    area = guild.game.areas["Area 1"]
    for variable_id, value in [("barbaraSpouse", "A"), ("barbaraCheated", "C"), ("spouseCheated", "E")]:
        set_garden_var(guild, area, variable_id, value)
    write(content_dir / "scene-intros" / "Act I Scene 3 (ACE).md", "Years later...\n")
    packets = [
        write(content_dir / "inner-character-packets" / name / f"{name} - Act I Scene 3 (ACE).pdf")
        for name in ("Barbara", "Charles")
    ]

    with caplog.at_level(logging.WARNING):
        content, files = build_scene_materials(guild, guild.game.get_scene("Act I Scene 3"), area)

    assert content == (
        "**Act I Scene 3**\n\n"
        "Years later...\n\n"
        "**Choices so far**\n"
        "_A: Barbara married Charles._\n"
        "_C: She cheated._\n"
        "_E: He cheated._\n\n"
        "**Choices for this scene**\n"
        "G: They got a divorce.\n"
        "H: They stayed married."
    )
    assert files == packets
    assert "William - Act I Scene 3 (ACE).pdf" in caplog.text
    assert "Virginia - Act I Scene 3 (ACE).pdf" in caplog.text


def test_materials_without_content_dir(guild):
    guild.content_dir = None
    content, files = build_scene_materials(
        guild, guild.game.get_scene("Act I Scene 1"), guild.game.areas["Area 2"]
    )
    assert content.startswith("**Act I Scene 1**\n\n**Choices for this scene**\nA: ")
    assert files == []


async def test_post_prep_sends_only_to_inner_areas(guild, platform):
    await post_prep_garden_scene(guild, guild.game.get_scene("Prologue"), guild.game.areas["The Funeral Home"])
    assert platform.sent == []

    await post_prep_garden_scene(guild, guild.game.get_scene("Act I Scene 1"), guild.game.areas["Area 3"])
    [message] = platform.messages_in("area-3")
    assert message.content.startswith("**Act I Scene 1**")
