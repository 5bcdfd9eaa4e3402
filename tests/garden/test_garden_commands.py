from forking_paths.garden.variables import get_garden_var, set_garden_var


async def test_choose(say, gm, player, guild):
    await say(gm, "!prep Act I Scene 1")
    reply = await say(player("Noah"), "!choose a")
    assert reply == "Thank you.  Choice recorded: Barbara married Charles."
    assert get_garden_var(guild, guild.game.areas["Area 3"], "barbaraSpouse") == "A"


async def test_choose_invalid(say, gm, player):
    await say(gm, "!prep Act I Scene 1")
    reply = await say(player("Noah"), "!choose x")
    assert reply.startswith("x is not a valid choice right now.  Here are your options:")


async def test_setchoice(say, gm, guild):
    reply = await say(gm, "!setchoice 2 o")
    assert reply == "Area 2 choice recorded: O: Zach was accepted into the family."
    assert get_garden_var(guild, guild.game.areas["Area 2"], "acceptZach") == "O"


async def test_setchoice_needs_gm(say, player, guild):
    assert await say(player("Noah"), "!setchoice 2 O") == "Sorry, only GMs can do that."
    assert get_garden_var(guild, guild.game.areas["Area 2"], "acceptZach") is None


async def test_setchoice_bad_arguments(say, gm):
    assert (await say(gm, "!setchoice 2")).startswith("To set a choice, say")
    assert (await say(gm, "!setchoice 7 A")).startswith("There is no Area 7.")
    assert await say(gm, "!setchoice 1 Q") == "Q is not a valid choice value."


async def test_collapse_dry_run_then_confirm(say, gm, guild):
    guild.storage.set_scene_name(guild.guild_id, "Act I Scene 3")
    for area_name, (spouse, divorce) in {"Area 1": ("A", "G"), "Area 2": ("B", "H")}.items():
        area = guild.game.areas[area_name]
        set_garden_var(guild, area, "barbaraSpouse", spouse)
        set_garden_var(guild, area, "divorce", divorce)

    dry_run = await say(gm, "!collapse")
    assert dry_run == (
        "Timelines for Act I Scene 4:\n"
        "Area 1: unchanged (AG)\n"
        "Area 2: unchanged (BH)\n"
        "Area 3: can't determine yet, missing barbaraSpouse, divorce\n"
        "No timelines need collapsing."
    )


async def test_collapse_repairs_on_confirm(say, gm, guild):
    guild.storage.set_scene_name(guild.guild_id, "Intermission")
    area = guild.game.areas["Area 1"]
    for variable_id, value in {
        "barbaraSpouse": "A", "barbaraCheated": "D", "spouseCheated": "F",
        "divorce": "H", "virginiaNursingHome": "I",
    }.items():
        set_garden_var(guild, area, variable_id, value)

    dry_run = await say(gm, "!collapse")
    assert "Area 1: ADFHI -> ACFHI (barbaraCheated = C)" in dry_run
    assert dry_run.endswith("To apply these changes, say `!collapse confirm`.")
    assert get_garden_var(guild, area, "barbaraCheated") == "D"

    confirmed = await say(gm, "!collapse confirm")
    assert confirmed.endswith("Timelines collapsed.")
    assert get_garden_var(guild, area, "barbaraCheated") == "C"
    assert get_garden_var(guild, area, "spouseCheated") == "F"


async def test_collapse_without_scene(say, gm):
    assert await say(gm, "!collapse") == "There is no active scene right now."
