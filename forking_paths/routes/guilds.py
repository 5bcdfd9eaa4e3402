"""Per-guild endpoints: commands, state, members and sent messages."""

from fastapi import APIRouter, HTTPException, Request

from forking_paths.commands import handle_message
from forking_paths.guild import GuildRegistry, ManagedGuild
from forking_paths.platform import MemoryPlatform, Member
from forking_paths.variables import all_resolved_variables

from .models import CommandBody, CommandReply, UpsertMember

router = APIRouter()


def _registry(request: Request) -> GuildRegistry:
    return request.app.state.registry


def _memory_platform(guild: ManagedGuild) -> MemoryPlatform:
    if not isinstance(guild.platform, MemoryPlatform):
        raise HTTPException(501, "Guild is not backed by the in-memory platform")
    return guild.platform


@router.post("/guilds/{guild_id}/commands", response_model=CommandReply)
async def run_command(guild_id: str, body: CommandBody, request: Request):
    """Run one chat command as the given member and return the reply."""
    guild = _registry(request).get(guild_id)
    member = await guild.platform.get_member(body.member_id)
    if member is None:
        raise HTTPException(404, "Member not found")
    reply = await handle_message(guild, member, body.text)
    if reply is None:
        raise HTTPException(400, "Not a command")
    return CommandReply(reply=reply)


@router.get("/guilds/{guild_id}/state")
async def get_state(guild_id: str, request: Request):
    """Current scene name and every stored variable value."""
    guild = _registry(request).get(guild_id)
    scene = guild.current_scene()
    qualified_ids = [r.qualified_id for r in all_resolved_variables(guild.game)]
    values = guild.storage.get_variable_values(guild_id, qualified_ids)
    return {
        "scene": scene.name if scene else None,
        "variables": dict(zip(qualified_ids, values)),
    }


@router.put("/guilds/{guild_id}/members/{member_id}")
async def upsert_member(guild_id: str, member_id: str, body: UpsertMember, request: Request):
    """Add or replace a member of the in-memory guild."""
    platform = _memory_platform(_registry(request).get(guild_id))
    unknown = [role for role in body.roles if role not in platform.roles]
    if unknown:
        raise HTTPException(422, f"Unknown roles: {', '.join(unknown)}")
    member = platform.add_member(Member(
        id=member_id,
        tag=body.tag,
        nickname=body.nickname,
        roles=set(body.roles),
        voice_channel=body.voice_channel,
    ))
    return member.model_dump(mode="json")


@router.get("/guilds/{guild_id}/messages")
async def list_messages(guild_id: str, request: Request):
    """Messages the game has sent, grouped by text channel."""
    platform = _memory_platform(_registry(request).get(guild_id))
    grouped: dict[str, list[dict]] = {}
    for message in platform.sent:
        grouped.setdefault(message.channel, []).append(
            message.model_dump(include={"content", "files"})
        )
    return grouped
