"""Garden-specific chat commands: choose, setchoice and collapse."""

from __future__ import annotations

import logging

from forking_paths.commands import Command, assert_gm
from forking_paths.errors import GameError
from forking_paths.garden.areas import INNER_AREA_NAMES
from forking_paths.garden.choices import make_choice, set_area_choice
from forking_paths.garden.timeline import apply_collapse, format_collapse_plan, plan_collapse
from forking_paths.guild import ManagedGuild
from forking_paths.platform import Member

logger = logging.getLogger(__name__)


async def choose_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    choice = make_choice(guild, member, args)
    logger.info("guild=%s %s chose %s", guild.guild_id, member.tag, choice.value)
    return f"Thank you.  Choice recorded: {choice.label}"


async def setchoice_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    usage = "To set a choice, say `!setchoice <area number> <choice>`, e.g. `!setchoice 1 A`."
    parts = args.split()
    if len(parts) != 2:
        raise GameError(usage)
    number, value = parts
    area = guild.game.areas.get(f"Area {number}")
    if area is None or area.name not in INNER_AREA_NAMES:
        raise GameError(f"There is no Area {number}.  {usage}")

    choice = set_area_choice(guild, area, value)
    return f"{area.name} choice recorded: {choice.value}: {choice.label}"


async def collapse_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    plan = plan_collapse(guild)
    summary = format_collapse_plan(plan)
    if not plan.repairs:
        return f"{summary}\nNo timelines need collapsing."
    if args != "confirm":
        return f"{summary}\n\nTo apply these changes, say `!collapse confirm`."

    apply_collapse(guild, plan)
    return f"{summary}\n\nTimelines collapsed."


GARDEN_COMMANDS: dict[str, Command] = {
    "choose": Command(choose_handler, mutates=True, usage="<choice>"),
    "setchoice": Command(setchoice_handler, mutates=True, usage="<area number> <choice>"),
    "collapse": Command(collapse_handler, mutates=True, usage="[confirm]"),
}
