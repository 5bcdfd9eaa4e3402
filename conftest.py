from pathlib import Path

import pytest

from forking_paths.commands import handle_message
from forking_paths.garden.characters import FRAME_CHARACTER_NAMES
from forking_paths.garden.game import build_garden_game
from forking_paths.guild import ManagedGuild
from forking_paths.platform import MemoryPlatform, Member
from forking_paths.storage import Storage

GUILD_ID = "guild-1"


@pytest.fixture
def game():
    return build_garden_game()


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    return Storage(tmp_path / "data")


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def platform(game) -> MemoryPlatform:
    """A provisioned guild: one connected player per frame character, plus a GM."""
    platform = MemoryPlatform()
    platform.provision(game)
    for name in FRAME_CHARACTER_NAMES:
        platform.add_member(Member(
            id=f"p-{name.lower()}",
            tag=f"{name}#0001",
            nickname=name.lower(),
            roles={name},
            voice_channel="Lobby",
        ))
    platform.add_member(Member(id="gm", tag="Gamemaster#0001", roles={"GM"}))
    return platform


@pytest.fixture
def guild(game, storage, platform, content_dir) -> ManagedGuild:
    return ManagedGuild(GUILD_ID, game, storage, platform, content_dir)


@pytest.fixture
def gm(platform) -> Member:
    return platform.members["gm"]


@pytest.fixture
def player(platform):
    """Look up the player holding a frame character: player("Kathy")."""
    def lookup(name: str) -> Member:
        return platform.members[f"p-{name.lower()}"]
    return lookup


@pytest.fixture
def say(guild):
    """Send one chat message to the guild and return the reply."""
    async def send(member: Member, text: str) -> str | None:
        return await handle_message(guild, member, text)
    return send
