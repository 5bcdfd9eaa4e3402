"""A game walked through chat commands, from the prologue into Act I Scene 3."""


async def test_walkthrough_to_act_one_scene_three(say, gm, player, guild, platform, content_dir):
    intro = content_dir / "scene-intros" / "Act I Scene 3 (ACE).md"
    intro.parent.mkdir(parents=True)
    intro.write_text("The spring of 1962.")

    assert (await say(gm, "!prep first")).startswith("Prepped Prologue")
    assert (await say(gm, "!prep next")).startswith("Prepped Act I Scene 1")

    # Area 1: Faith, Jessica, Larry, Milo / Area 2: Devon, Kathy, Lily, Patrick
    # Area 3: Lindsay, Noah, Paula, Rick
    await say(player("Faith"), "!choose A")
    await say(player("Kathy"), "!choose A")
    await say(player("Rick"), "!choose B")

    assert (await say(gm, "!prep next")).startswith("Prepped Act I Scene 2")
    assert player("Noah").voice_channel == "Area 1"

    # Area 1: Noah, Jessica, Kathy, Milo / Area 2: Devon, Larry, Lily, Lindsay
    # Area 3: Patrick, Faith, Paula, Rick
    await say(player("Noah"), "!choose C")
    await say(player("Jessica"), "!choose E")
    await say(player("Lily"), "!choose D")
    await say(player("Larry"), "!choose F")

    blocked = await say(gm, "!prep next")
    assert blocked == (
        "Can't prep Act I Scene 3:\n"
        "Area 3 has no value for barbaraCheated (C: She cheated. / D: She did not cheat.)"
    )
    assert guild.current_scene().name == "Act I Scene 2"

    # William never cheats, so Area 3 only decides about Barbara
    await say(player("Paula"), "!choose C")
    assert (await say(gm, "!prep next")).startswith("Prepped Act I Scene 3")

    area_1 = platform.messages_in("area-1")
    assert area_1[-2].content == "__**Act I Scene 3**__"
    assert "The spring of 1962." in area_1[-1].content
    assert "_E: He cheated._" in area_1[-1].content
    assert "_F: He did not cheat._" not in platform.messages_in("area-3")[-1].content

    # nobody has decided about the divorce yet
    blocked = await say(gm, "!prep next")
    assert blocked.startswith("Can't prep Act I Scene 4:\nArea 1 has no value for divorce")
    assert guild.current_scene().name == "Act I Scene 3"
