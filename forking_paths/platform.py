"""Chat platform adapter.

The engine drives the chat platform through the protocol below. Every
operation is async; a failure is raised as an exception and the caller
decides whether it aborts the operation or is collected as a warning.

    class GuildPlatform(Protocol):
        async def members_with_role(self, role_name: str) -> list[Member]: ...
        ...

Two things implement it:

    MemoryPlatform: in-process guild: members, roles, channel visibility
                     and sent messages live in dicts. Used by the HTTP
                     service and the tests; no chat network involved.
    (your adapter): a real client wrapping a chat platform SDK. Production
                     deployments inject one into GuildRegistry.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, Sequence

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from forking_paths.models import Area, Game

logger = logging.getLogger(__name__)


class Member(BaseModel):
    """A guild member as seen by the engine."""

    id: str
    tag: str
    nickname: str | None = None
    roles: set[str] = Field(default_factory=set)
    voice_channel: str | None = None  # None when not connected to voice


class SentMessage(BaseModel):
    channel: str
    content: str
    files: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Protocol: every platform adapter must match these signatures
# ---------------------------------------------------------------------------

class GuildPlatform(Protocol):
    async def members_with_role(self, role_name: str) -> list[Member]: ...

    async def get_member(self, member_id: str) -> Member | None: ...

    async def add_role(self, member: Member, role_name: str) -> None: ...

    async def remove_role(self, member: Member, role_name: str) -> None: ...

    async def set_nickname(self, member: Member, nickname: str | None) -> None: ...

    async def move_to_voice(self, member: Member, area: Area) -> None: ...

    async def restrict_area(self, area: Area, visible_roles: Sequence[str]) -> None: ...

    async def lock_area(self, area: Area) -> None: ...

    async def send(self, area: Area, content: str, files: Sequence[Path] = ()) -> None: ...

    async def missing_resources(self, game: Game) -> list[str]: ...


# ---------------------------------------------------------------------------
# MemoryPlatform
# ---------------------------------------------------------------------------

class MemoryPlatform:
    """An in-memory guild.

    Channel visibility is stored per channel name: a list of role names that
    may view it, where an empty list means locked from general view.
    Channels that were never restricted are absent from the map.
    """

    def __init__(self, roles: Sequence[str] = (), channels: Sequence[str] = ()) -> None:
        self.members: dict[str, Member] = {}
        self.roles: set[str] = set(roles)
        self.channels: set[str] = set(channels)
        self.visibility: dict[str, list[str]] = {}
        self.sent: list[SentMessage] = []

    def provision(self, game: Game) -> None:
        """Create every channel and role the game needs."""
        for area in game.areas.values():
            self.channels.add(area.text_channel_name)
            self.channels.add(area.voice_channel_name)
        self.roles.update(game.characters)
        self.roles.add(game.gm_role_name)

    def add_member(self, member: Member) -> Member:
        self.members[member.id] = member
        return member

    def messages_in(self, channel: str) -> list[SentMessage]:
        return [m for m in self.sent if m.channel == channel]

    def _require_role(self, role_name: str) -> None:
        if role_name not in self.roles:
            raise RuntimeError(f"Unknown role {role_name}")

    def _require_channel(self, channel: str) -> None:
        if channel not in self.channels:
            raise RuntimeError(f"Unknown channel {channel}")

    async def members_with_role(self, role_name: str) -> list[Member]:
        self._require_role(role_name)
        return [m for m in self.members.values() if role_name in m.roles]

    async def get_member(self, member_id: str) -> Member | None:
        return self.members.get(member_id)

    async def add_role(self, member: Member, role_name: str) -> None:
        self._require_role(role_name)
        member.roles.add(role_name)

    async def remove_role(self, member: Member, role_name: str) -> None:
        member.roles.discard(role_name)

    async def set_nickname(self, member: Member, nickname: str | None) -> None:
        member.nickname = nickname

    async def move_to_voice(self, member: Member, area: Area) -> None:
        self._require_channel(area.voice_channel_name)
        if member.voice_channel is None:
            raise RuntimeError("Target user is not connected to voice.")
        member.voice_channel = area.voice_channel_name

    async def restrict_area(self, area: Area, visible_roles: Sequence[str]) -> None:
        for channel in (area.text_channel_name, area.voice_channel_name):
            self._require_channel(channel)
            self.visibility[channel] = list(visible_roles)

    async def lock_area(self, area: Area) -> None:
        await self.restrict_area(area, [])

    async def send(self, area: Area, content: str, files: Sequence[Path] = ()) -> None:
        self._require_channel(area.text_channel_name)
        self.sent.append(SentMessage(
            channel=area.text_channel_name,
            content=content,
            files=[str(f) for f in files],
        ))
        logger.debug("sent to %s len=%d files=%d", area.text_channel_name, len(content), len(files))

    async def missing_resources(self, game: Game) -> list[str]:
        errors: list[str] = []
        areas = list(game.areas.values())
        missing_text = [a.name for a in areas if a.text_channel_name not in self.channels]
        missing_voice = [a.name for a in areas if a.voice_channel_name not in self.channels]
        missing_roles = [name for name in game.characters if name not in self.roles]
        if missing_text:
            errors.append(f"Missing text channels for {', '.join(missing_text)}!")
        if missing_voice:
            errors.append(f"Missing voice channels for {', '.join(missing_voice)}!")
        if missing_roles:
            errors.append(f"Missing roles for {', '.join(missing_roles)}!")
        if game.gm_role_name not in self.roles:
            errors.append("Missing GM role")
        return errors
