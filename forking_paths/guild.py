"""Per-guild game state.

A ManagedGuild bundles everything a command needs for one instance of the
game: its id, the static Game, the store, the platform adapter and a lock
that serialises state-mutating commands. It is passed explicitly through
every call; GuildRegistry hands them out by guild id.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

from forking_paths.models import Character, Game, Scene
from forking_paths.platform import GuildPlatform, Member
from forking_paths.storage import Storage

logger = logging.getLogger(__name__)


class ManagedGuild:
    def __init__(
        self,
        guild_id: str,
        game: Game,
        storage: Storage,
        platform: GuildPlatform,
        content_dir: Path | None = None,
    ) -> None:
        self.guild_id = guild_id
        self.game = game
        self.storage = storage
        self.platform = platform
        self.content_dir = content_dir
        self.lock = asyncio.Lock()

    def current_scene(self) -> Scene | None:
        name = self.storage.get_scene_name(self.guild_id)
        if name is None:
            return None
        scene = self.game.get_scene(name)
        if scene is None:
            logger.warning("guild=%s stored scene %r is not part of %s", self.guild_id, name, self.game.title)
        return scene

    def member_characters(self, member: Member) -> list[Character]:
        return [self.game.characters[r] for r in sorted(member.roles) if r in self.game.characters]

    def primary_character(self, member: Member) -> Character | None:
        for character in self.member_characters(member):
            if character.type.primary:
                return character
        return None

    def is_gm(self, member: Member) -> bool:
        return self.game.gm_role_name in member.roles


class GuildRegistry:
    """Creates and caches one ManagedGuild per guild id."""

    def __init__(
        self,
        game: Game,
        storage: Storage,
        platform_factory: Callable[[str], GuildPlatform],
        content_dir: Path | None = None,
    ) -> None:
        self._game = game
        self._storage = storage
        self._platform_factory = platform_factory
        self._content_dir = content_dir
        self._guilds: dict[str, ManagedGuild] = {}

    def get(self, guild_id: str) -> ManagedGuild:
        guild = self._guilds.get(guild_id)
        if guild is None:
            guild = ManagedGuild(
                guild_id,
                self._game,
                self._storage,
                self._platform_factory(guild_id),
                self._content_dir,
            )
            self._guilds[guild_id] = guild
            logger.info("Managing guild %s", guild_id)
        return guild

    def __contains__(self, guild_id: str) -> bool:
        return guild_id in self._guilds
