"""Pre- and post-prep hooks for the garden.

Before an inner scene is entered every active area's timeline must have
material for it (see timeline.check_timeline). Afterwards each inner area
gets its scene materials: the intro for its timeline, a recap of the
choices made so far, the choices on offer, and the character packets.
Content files live under the configured content directory:

    scene-intros/<portion>.md
    inner-character-packets/<Character>/<Character> - <portion>.pdf

where portion is "Act I Scene 1" for the opening inner scene and
"<scene> (<variant code>)" for every later one.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from forking_paths.garden.areas import is_inner_area
from forking_paths.garden.choices import get_scene_choices
from forking_paths.garden.scenes import is_inner_scene
from forking_paths.garden.timeline import check_timeline, variant_for_scene
from forking_paths.garden.variables import get_garden_vars
from forking_paths.models import Area, Scene

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild

logger = logging.getLogger(__name__)

ACT_ONE_CAST = ["Barbara", "Charles", "William", "Virginia"]
ACT_TWO_EARLY_CAST = ["Barbara", "Charles", "William", "Stephanie"]
ACT_TWO_LATE_CAST = ["Barbara", "Charles", "Zach", "Stephanie"]

SCENE_CASTS: dict[str, list[str]] = {
    "Act I Scene 1": ACT_ONE_CAST,
    "Act I Scene 2": ACT_ONE_CAST,
    "Act I Scene 3": ACT_ONE_CAST,
    "Act I Scene 4": ACT_ONE_CAST,
    "Act II Scene 1": ACT_TWO_EARLY_CAST,
    "Act II Scene 2": ACT_TWO_EARLY_CAST,
    "Act II Scene 3": ACT_TWO_LATE_CAST,
    "Act II Scene 4": ACT_TWO_LATE_CAST,
}


async def pre_prep_garden_scene(guild: ManagedGuild, scene: Scene, area: Area) -> None:
    check_timeline(guild, scene, area)


def scene_filename_portion(guild: ManagedGuild, scene: Scene, area: Area) -> str:
    variant = variant_for_scene(guild, scene, area)
    if variant is None:
        return scene.name
    return f"{scene.name} ({variant})"


def character_packet_paths(content_dir: Path, portion: str, characters: list[str]) -> list[Path]:
    return [
        content_dir / "inner-character-packets" / name / f"{name} - {portion}.pdf"
        for name in characters
    ]


def _choices_so_far(guild: ManagedGuild, scene: Scene, area: Area) -> list[str]:
    scenes = guild.game.scenes[: guild.game.scene_index(scene)]
    variables = [
        variable
        for prior in scenes
        if is_inner_scene(prior)
        for variable in get_scene_choices(guild, prior, area)
    ]
    values = get_garden_vars(guild, area, [v.id for v in variables])
    return [
        f"_{variable.describe(value)}_"
        for variable, value in zip(variables, values)
        if value is not None
    ]


def build_scene_materials(
    guild: ManagedGuild, scene: Scene, area: Area
) -> tuple[str, list[Path]]:
    """Compose the materials message for one area; missing files are skipped."""
    portion = scene_filename_portion(guild, scene, area)
    parts = [f"**{scene.name}**"]
    files: list[Path] = []

    content_dir = guild.content_dir
    if content_dir is None:
        logger.warning("No content directory configured; sending %s without materials", portion)
    else:
        intro_path = content_dir / "scene-intros" / f"{portion}.md"
        if intro_path.is_file():
            parts.append(intro_path.read_text(encoding="utf-8").strip())
        else:
            logger.warning("Missing scene intro %s", intro_path)
        for path in character_packet_paths(content_dir, portion, SCENE_CASTS.get(scene.name, [])):
            if path.is_file():
                files.append(path)
            else:
                logger.warning("Missing character packet %s", path)

    so_far = _choices_so_far(guild, scene, area)
    if so_far:
        parts.append("**Choices so far**\n" + "\n".join(so_far))
    current = [
        variable.describe(choice.value)
        for variable in get_scene_choices(guild, scene, area)
        for choice in variable.choices
    ]
    if current:
        parts.append("**Choices for this scene**\n" + "\n".join(current))
    return "\n\n".join(parts), files


async def post_prep_garden_scene(guild: ManagedGuild, scene: Scene, area: Area) -> None:
    if not is_inner_scene(scene) or not is_inner_area(area):
        return
    content, files = build_scene_materials(guild, scene, area)
    await guild.platform.send(area, content, files)
