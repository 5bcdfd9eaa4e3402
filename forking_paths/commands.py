"""Chat command parsing and dispatch.

A command is a chat message of the form "!name args" (or ".name args").
handle_command() is the single boundary that turns exceptions into reply
text: GameError messages are shown verbatim, anything else is logged with
its traceback and the user sees only the message.

Commands marked `mutates` run under the guild's lock, so a prep, a choice
and a reset for the same guild never interleave. Read-only commands skip
the lock.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Awaitable, Callable, NamedTuple

from forking_paths.errors import GameError, PermissionDenied
from forking_paths.guild import ManagedGuild
from forking_paths.platform import Member
from forking_paths.scenes import find_scene, format_prep_warnings, prep_scene
from forking_paths.variables import all_resolved_variables

logger = logging.getLogger(__name__)

CommandHandler = Callable[[ManagedGuild, Member, str], Awaitable[str]]

_COMMAND_RE = re.compile(r"^[.!]\s*(\w+)(?:\s+(.*))?$", re.DOTALL)


class Command(NamedTuple):
    handler: CommandHandler
    mutates: bool = False
    usage: str = ""


def parse_command(text: str) -> tuple[str, str] | None:
    """Split "!Prep next" into ("prep", "next"); None if text isn't a command."""
    match = _COMMAND_RE.match(text.strip())
    if not match:
        return None
    return match.group(1).lower(), (match.group(2) or "").strip()


def assert_gm(guild: ManagedGuild, member: Member) -> None:
    if not guild.is_gm(member):
        raise PermissionDenied("Sorry, only GMs can do that.")


# ---------------------------------------------------------------------------
# Common handlers
# ---------------------------------------------------------------------------

async def help_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    lines = []
    for name in sorted(guild.game.command_handlers):
        usage = guild.game.command_handlers[name].usage
        lines.append(f"!{name} {usage}".rstrip())
    return "Available commands:\n" + "\n".join(lines)


async def prep_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    if not args:
        options = "\n".join(f"!prep {name}" for name in guild.game.scene_names)
        raise GameError(
            "To prep a scene, you can say:\n!prep next (for the next scene)\n" + options
        )

    scene = find_scene(guild, args)
    results = await prep_scene(guild, scene)
    lines = [f"Prepped {results.scene.name}", *format_prep_warnings(results)]
    for line in lines:
        logger.info(line)
    return "\n".join(lines)


async def get_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    if args:
        qualified_ids = args.split()
    else:
        qualified_ids = [r.qualified_id for r in all_resolved_variables(guild.game)]
    if not qualified_ids:
        return "No variables defined."
    values = guild.storage.get_variable_values(guild.guild_id, qualified_ids)
    return "\n".join(f"{qid} = {json.dumps(value)}" for qid, value in zip(qualified_ids, values))


async def set_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    variable_id, _, value_json = args.partition(" ")
    if not variable_id:
        raise GameError("Please provide a variable ID to set.")
    value_json = value_json.strip()
    if not value_json:
        raise GameError("Please provide a value in JSON format.")
    try:
        value = json.loads(value_json)
    except json.JSONDecodeError as e:
        raise GameError(f"Please provide a value in JSON format. ({e.msg})") from e

    guild.storage.set_variable_value(guild.guild_id, variable_id, value)
    return f"Set {variable_id} to {json.dumps(value)}"


async def resetgame_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    if args != "confirm":
        return "Are you sure?  If so, use `!resetgame confirm` to reset."
    guild.storage.delete_game_data(guild.guild_id)
    logger.info("guild=%s game data reset", guild.guild_id)
    return "Game data reset."


async def restorenicknames_handler(guild: ManagedGuild, member: Member, args: str) -> str:
    assert_gm(guild, member)
    originals = guild.storage.get_original_nicknames(guild.guild_id)
    restored = 0
    failures: list[str] = []
    for member_id, nickname in originals.items():
        target = await guild.platform.get_member(member_id)
        if target is None:
            failures.append(f"Member {member_id} is no longer in the guild")
            continue
        try:
            await guild.platform.set_nickname(target, nickname)
            restored += 1
        except Exception as e:
            failures.append(f"Member {target.tag} nickname not restored: {e}")
    return "\n".join([f"Restored {restored} nickname(s).", *failures])


COMMON_COMMANDS: dict[str, Command] = {
    "help": Command(help_handler),
    "prep": Command(prep_handler, mutates=True, usage="<next|previous|first|last|scene name>"),
    "get": Command(get_handler, usage="[variable id ...]"),
    "set": Command(set_handler, mutates=True, usage="<variable id> <json value>"),
    "resetgame": Command(resetgame_handler, mutates=True, usage="confirm"),
    "restorenicknames": Command(restorenicknames_handler, mutates=True),
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

async def handle_command(guild: ManagedGuild, member: Member, name: str, args: str) -> str:
    try:
        missing = await guild.platform.missing_resources(guild.game)
        if missing:
            return "\n".join([*missing, "Can't start game until these errors are fixed."])

        command = guild.game.command_handlers.get(name)
        if command is None:
            return f"Unknown command: {name}.  To see available commands, say `!help`."

        if command.mutates:
            async with guild.lock:
                return await command.handler(guild, member, args)
        return await command.handler(guild, member, args)
    except GameError as e:
        logger.info("guild=%s !%s refused: %s", guild.guild_id, name, e)
        return str(e)
    except Exception as e:
        logger.exception("guild=%s !%s failed", guild.guild_id, name)
        return str(e)


async def handle_message(guild: ManagedGuild, member: Member, text: str) -> str | None:
    """Parse and dispatch one chat message; None when it isn't a command."""
    parsed = parse_command(text)
    if parsed is None:
        logger.debug("Ignoring non-command message")
        return None
    logger.info(">> %s: %s", member.tag, text)
    name, args = parsed
    return await handle_command(guild, member, name, args)
