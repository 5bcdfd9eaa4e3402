"""Scene sequencing and scene preparation.

Scenes form a fixed linear sequence; all narrative branching lives in
variable state. Preparing a scene runs in phases:

  1. Pre-check: game.pre_prep_scene runs once per active area, all
     concurrently. Any failure aborts before anything is written; every
     failure message is reported, prefixed with the scene name.
  2. Commit: the guild's current-scene pointer is stored.
  3. Area setup: concurrently for every active area: restrict its channels
     to the primary roles placed there, then for every member holding one
     of those roles grant the secondary role, strip stale secondary roles,
     rename and move them to the area's voice channel. Unused areas are
     locked. Failures here are captured per operation and reported as
     warnings; they never abort the transition.
  4. Announce: the scene title is posted in each active area.
  5. Post-hook: game.post_prep_scene runs once per active area.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel, Field

from forking_paths.errors import GameError, PrepBlocked, SceneNotFound
from forking_paths.guild import ManagedGuild
from forking_paths.models import Area, AreaSetup, Character, Placement, Scene
from forking_paths.platform import Member

logger = logging.getLogger(__name__)


class PlacementResult(BaseModel):
    member: Member
    nickname_changed: bool = False
    nickname_change_error: str | None = None
    nickname_record_error: str | None = None
    voice_channel_joined: bool = False
    voice_channel_join_error: str | None = None
    role_error: str | None = None


class AreaSetupResult(BaseModel):
    area: Area
    placement_results: list[PlacementResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class PrepSceneResults(BaseModel):
    scene: Scene
    area_setup_results: list[AreaSetupResult] = Field(default_factory=list)
    lock_errors: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Scene lookup
# ---------------------------------------------------------------------------

def find_scene(guild: ManagedGuild, identifier: str) -> Scene:
    """Resolve "next", "previous", "first", "last" or a scene name."""
    game = guild.game
    ident = identifier.strip().lower()
    if not game.scenes:
        raise GameError(f"{game.title} has no scenes.")

    if ident in ("next", "previous"):
        current = guild.current_scene()
        if current is None:
            raise GameError("There is no active scene right now.")
        index = game.scene_index(current)
        target = index + (1 if ident == "next" else -1)
        if target < 0:
            raise GameError("This is the first scene in the game.")
        if target >= len(game.scenes):
            raise GameError("This is the last scene in the game.")
        return game.scenes[target]

    if ident == "first":
        return game.scenes[0]
    if ident == "last":
        return game.scenes[-1]

    for scene in game.scenes:
        if scene.name.lower() == ident:
            return scene
    raise SceneNotFound(
        f'Scene not found: "{identifier}". Valid scenes are:\n' + "\n".join(game.scene_names)
    )


# ---------------------------------------------------------------------------
# Preparation
# ---------------------------------------------------------------------------

async def prep_scene(guild: ManagedGuild, scene: Scene) -> PrepSceneResults:
    game = guild.game
    active_areas = scene.areas
    active_names = {area.name for area in active_areas}
    unused_areas = [area for area in game.areas.values() if area.name not in active_names]

    if game.pre_prep_scene is not None:
        outcomes = await asyncio.gather(
            *(game.pre_prep_scene(guild, scene, area) for area in active_areas),
            return_exceptions=True,
        )
        errors = [str(o) for o in outcomes if isinstance(o, Exception)]
        if errors:
            raise PrepBlocked(f"Can't prep {scene.name}:\n" + "\n".join(errors))

    guild.storage.set_scene_name(guild.guild_id, scene.name)
    logger.info("guild=%s scene -> %s", guild.guild_id, scene.name)

    setup_results, lock_results = await asyncio.gather(
        asyncio.gather(*(_setup_area(guild, setup) for setup in scene.area_setups)),
        asyncio.gather(*(_lock_area(guild, area) for area in unused_areas)),
    )

    await asyncio.gather(
        *(guild.platform.send(area, f"__**{scene.name}**__") for area in active_areas)
    )

    if game.post_prep_scene is not None:
        await asyncio.gather(
            *(game.post_prep_scene(guild, scene, area) for area in active_areas)
        )

    return PrepSceneResults(
        scene=scene,
        area_setup_results=list(setup_results),
        lock_errors=[error for error in lock_results if error],
    )


async def _lock_area(guild: ManagedGuild, area: Area) -> str | None:
    try:
        await guild.platform.lock_area(area)
    except Exception as e:
        return f"Could not lock {area.name}: {e}"
    return None


async def _setup_area(guild: ManagedGuild, setup: AreaSetup) -> AreaSetupResult:
    result = AreaSetupResult(area=setup.area)
    primary_roles = [p.primary_character.name for p in setup.placements]
    try:
        await guild.platform.restrict_area(setup.area, primary_roles)
    except Exception as e:
        result.errors.append(f"Could not restrict {setup.area.name}: {e}")

    outcomes = await asyncio.gather(
        *(_place_character(guild, setup.area, p) for p in setup.placements),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            result.errors.append(str(outcome))
        else:
            result.placement_results.extend(outcome)
    return result


async def _place_character(
    guild: ManagedGuild, area: Area, placement: Placement
) -> list[PlacementResult]:
    primary = placement.primary_character
    members = await guild.platform.members_with_role(primary.name)
    if not members:
        logger.debug("No player for %s", primary.name)
    return list(await asyncio.gather(
        *(_place_member(guild, area, m, primary, placement.secondary_character) for m in members)
    ))


async def _place_member(
    guild: ManagedGuild,
    area: Area,
    member: Member,
    primary: Character,
    secondary: Character | None,
) -> PlacementResult:
    platform = guild.platform
    result = PlacementResult(member=member)

    to_add = [secondary.name] if secondary and secondary.name not in member.roles else []
    to_remove = []
    for role in sorted(member.roles):
        character = guild.game.characters.get(role)
        # primary roles are never removed
        if character is None or character.type.primary:
            continue
        if secondary is None or role != secondary.name:
            to_remove.append(role)

    logger.debug(
        "Giving %s %s, moving to %s, removing %s",
        member.tag, to_add, area.voice_channel_name, to_remove,
    )
    role_outcomes = await asyncio.gather(
        *(platform.add_role(member, role) for role in to_add),
        *(platform.remove_role(member, role) for role in to_remove),
        return_exceptions=True,
    )
    role_errors = [str(o) for o in role_outcomes if isinstance(o, Exception)]
    if role_errors:
        result.role_error = "; ".join(role_errors)

    try:
        guild.storage.set_original_nickname_if_absent(guild.guild_id, member.id, member.nickname)
    except Exception as e:
        result.nickname_record_error = str(e)

    nickname = f"{secondary.name} ({primary.name})" if secondary else primary.name
    try:
        await platform.set_nickname(member, nickname)
        result.nickname_changed = True
    except Exception as e:
        result.nickname_change_error = str(e)

    try:
        await platform.move_to_voice(member, area)
        result.voice_channel_joined = True
    except Exception as e:
        result.voice_channel_join_error = str(e)

    return result


def format_prep_warnings(results: PrepSceneResults) -> list[str]:
    """Flatten every captured failure into one warning line each."""
    warnings: list[str] = []
    for area_result in results.area_setup_results:
        warnings.extend(f"{area_result.area.name}: {e}" for e in area_result.errors)
        for p in area_result.placement_results:
            if p.role_error:
                warnings.append(f"Member {p.member.tag} roles not updated: {p.role_error}")
            if p.nickname_record_error:
                warnings.append(
                    f"Member {p.member.tag} original nickname not recorded: {p.nickname_record_error}"
                )
            if not p.voice_channel_joined:
                warnings.append(
                    f"Member {p.member.tag} not joined to voice channel: {p.voice_channel_join_error}"
                )
            if not p.nickname_changed:
                warnings.append(
                    f"Member {p.member.tag} nickname not changed: {p.nickname_change_error}"
                )
    warnings.extend(results.lock_errors)
    return warnings
