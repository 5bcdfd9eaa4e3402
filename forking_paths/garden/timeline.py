"""Timeline variants.

Every inner area follows its own timeline, spelled as a variant code: the
effective values of a scene-specific list of variables joined together,
e.g. "ACE" for barbaraSpouse=A, barbaraCheated=C, spouseCheated=E. Scene
material only exists for the codes listed in EXISTING_VARIANTS, so prepping
an inner scene is refused while any area's code falls outside that list.

Collapsing repairs such an area: the closest authored code (by Levenshtein
distance, ties broken alphabetically) becomes the target, and only the
variables that disagree with it are rewritten.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field
from rapidfuzz.distance import Levenshtein

from forking_paths.errors import PrepBlocked
from forking_paths.garden.variables import (
    ACCEPT_ZACH,
    BARBARA_CHEATED,
    BARBARA_SPOUSE,
    BROTHER_LENT_MONEY,
    DIVORCE,
    DRUNK_DRIVING_CONSEQUENCES,
    SPOUSE_CHEATED,
    TIMELINE_VARIABLES,
    VIRGINIA_NURSING_HOME,
    get_garden_vars,
    set_garden_var,
)
from forking_paths.models import Area, Scene
from forking_paths.scenes import find_scene

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild

logger = logging.getLogger(__name__)

EXISTING_VARIANTS: dict[str, list[str]] = {
    "Act I Scene 1": [],
    "Act I Scene 2": ["A", "B"],
    "Act I Scene 3": ["ACE", "ACF", "ADE", "ADF", "BCF", "BDF"],
    "Act I Scene 4": ["AG", "AH", "BG", "BH"],
    "Act II Scene 1": ["ACFHI", "ADEHJ", "BGI"],
    "Act II Scene 2": ["AHK", "AHL", "BGK", "BGL"],
    "Act II Scene 3": ["AHM", "AHN", "BGM", "BGN"],
    "Act II Scene 4": ["AHINO", "AHINP", "AHJMO", "AHJMP", "BGIMO", "BGINP"],
}

# choice value -> the variable it belongs to; values are unique per area
VALUE_OWNERS: dict[str, str] = {
    value: variable_id
    for variable_id, choices in TIMELINE_VARIABLES
    for value, _ in choices
}

_STATIC_VARIANT_IDS: dict[str, list[str]] = {
    "Act I Scene 2": [BARBARA_SPOUSE],
    "Act I Scene 3": [BARBARA_SPOUSE, BARBARA_CHEATED, SPOUSE_CHEATED],
    "Act I Scene 4": [BARBARA_SPOUSE, DIVORCE],
    "Act II Scene 2": [BARBARA_SPOUSE, DIVORCE, BROTHER_LENT_MONEY],
    "Act II Scene 3": [BARBARA_SPOUSE, DIVORCE, DRUNK_DRIVING_CONSEQUENCES],
    "Act II Scene 4": [
        BARBARA_SPOUSE, DIVORCE, VIRGINIA_NURSING_HOME, DRUNK_DRIVING_CONSEQUENCES, ACCEPT_ZACH,
    ],
}

# choices that must be recorded before each scene; spouseCheated reads as set
# under the William override, so it only has to be chosen when Barbara married Charles
_REQUIRED_IDS: dict[str, list[str]] = {
    "Act I Scene 2": [BARBARA_SPOUSE],
    "Act I Scene 3": [BARBARA_SPOUSE, BARBARA_CHEATED, SPOUSE_CHEATED],
    "Act I Scene 4": [BARBARA_SPOUSE, DIVORCE],
    "Act II Scene 1": [BARBARA_SPOUSE, BARBARA_CHEATED, DIVORCE, VIRGINIA_NURSING_HOME],
    "Act II Scene 2": [
        BARBARA_SPOUSE, BARBARA_CHEATED, DIVORCE, VIRGINIA_NURSING_HOME, BROTHER_LENT_MONEY,
    ],
    "Act II Scene 3": [
        BARBARA_SPOUSE, BARBARA_CHEATED, DIVORCE, VIRGINIA_NURSING_HOME, BROTHER_LENT_MONEY,
        DRUNK_DRIVING_CONSEQUENCES,
    ],
    "Act II Scene 4": [
        BARBARA_SPOUSE, BARBARA_CHEATED, DIVORCE, VIRGINIA_NURSING_HOME, BROTHER_LENT_MONEY,
        DRUNK_DRIVING_CONSEQUENCES, ACCEPT_ZACH,
    ],
}


# ---------------------------------------------------------------------------
# Variant codes
# ---------------------------------------------------------------------------

def apply_overrides(values: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of values with story-logic overrides applied.

    William never cheats: when Barbara married him, spouseCheated reads as F
    whatever was recorded.
    """
    effective = dict(values)
    if effective.get(BARBARA_SPOUSE) == "B":
        effective[SPOUSE_CHEATED] = "F"
    return effective


def effective_values(guild: ManagedGuild, area: Area, variable_ids: list[str]) -> list[Any]:
    fetch_ids = list(dict.fromkeys([BARBARA_SPOUSE, *variable_ids]))
    raw = dict(zip(fetch_ids, get_garden_vars(guild, area, fetch_ids)))
    effective = apply_overrides(raw)
    return [effective[variable_id] for variable_id in variable_ids]


def variant_code(guild: ManagedGuild, area: Area, variable_ids: list[str]) -> str | None:
    """Join the effective values; None while any of them is unset."""
    values = effective_values(guild, area, variable_ids)
    if any(value is None for value in values):
        return None
    return "".join(str(value) for value in values)


def variant_variable_ids_for_scene(
    guild: ManagedGuild, scene: Scene, area: Area
) -> list[str] | None:
    if scene.name == "Act II Scene 1":
        [barbara_spouse] = effective_values(guild, area, [BARBARA_SPOUSE])
        if barbara_spouse == "B":
            # the cheating choices are moot in the William timeline
            return [BARBARA_SPOUSE, DIVORCE, VIRGINIA_NURSING_HOME]
        return [BARBARA_SPOUSE, BARBARA_CHEATED, SPOUSE_CHEATED, DIVORCE, VIRGINIA_NURSING_HOME]
    ids = _STATIC_VARIANT_IDS.get(scene.name)
    return list(ids) if ids is not None else None


def variant_for_scene(guild: ManagedGuild, scene: Scene, area: Area) -> str | None:
    variable_ids = variant_variable_ids_for_scene(guild, scene, area)
    if variable_ids is None:
        return None
    return variant_code(guild, area, variable_ids)


def closest_variant(code: str, candidates: list[str]) -> str | None:
    """The candidate nearest to code by edit distance, ties alphabetically."""
    if not candidates:
        return None
    return min(candidates, key=lambda candidate: (Levenshtein.distance(code, candidate), candidate))


def find_closest_variant(scene_name: str, code: str) -> str | None:
    return closest_variant(code, EXISTING_VARIANTS.get(scene_name, []))


# ---------------------------------------------------------------------------
# Validation gate
# ---------------------------------------------------------------------------

def _describe_missing(area: Area, variable_id: str) -> str:
    variable = area.variables[variable_id]
    options = " / ".join(f"{c.value}: {c.label}" for c in variable.choices)
    return f"{variable_id} ({options})"


def missing_variable_ids(guild: ManagedGuild, area: Area, variable_ids: list[str]) -> list[str]:
    values = effective_values(guild, area, variable_ids)
    return [variable_id for variable_id, value in zip(variable_ids, values) if value is None]


def required_variable_ids_for_scene(
    guild: ManagedGuild, scene: Scene, area: Area
) -> list[str]:
    """Every choice that must be recorded before scene: all earlier ones plus the variant's."""
    variant_ids = variant_variable_ids_for_scene(guild, scene, area) or []
    return list(dict.fromkeys([*_REQUIRED_IDS.get(scene.name, []), *variant_ids]))


def check_timeline(guild: ManagedGuild, scene: Scene, area: Area) -> None:
    """Refuse to enter scene unless area's timeline has material for it."""
    variable_ids = variant_variable_ids_for_scene(guild, scene, area)
    if variable_ids is None or scene.name not in EXISTING_VARIANTS:
        return

    missing = missing_variable_ids(guild, area, required_variable_ids_for_scene(guild, scene, area))
    if missing:
        raise PrepBlocked(
            f"{area.name} has no value for "
            + ", ".join(_describe_missing(area, variable_id) for variable_id in missing)
        )

    code = variant_code(guild, area, variable_ids)
    if code not in EXISTING_VARIANTS[scene.name]:
        raise PrepBlocked(
            f"{area.name} is in timeline {code}, which has no material for {scene.name}. "
            "Use !collapse to find the closest timeline."
        )


# ---------------------------------------------------------------------------
# Collapse
# ---------------------------------------------------------------------------

class CollapseEntry(BaseModel):
    area: Area
    status: Literal["unchanged", "undetermined", "repair"]
    current: str | None = None
    target: str | None = None
    missing: list[str] = Field(default_factory=list)
    updates: dict[str, str] = Field(default_factory=dict)

    def describe(self) -> str:
        if self.status == "undetermined":
            return f"{self.area.name}: can't determine yet, missing {', '.join(self.missing)}"
        if self.status == "repair":
            changes = ", ".join(f"{k} = {v}" for k, v in self.updates.items())
            return f"{self.area.name}: {self.current} -> {self.target} ({changes})"
        if self.current:
            return f"{self.area.name}: unchanged ({self.current})"
        return f"{self.area.name}: unchanged"


class CollapsePlan(BaseModel):
    scene: Scene
    entries: list[CollapseEntry] = Field(default_factory=list)

    @property
    def repairs(self) -> list[CollapseEntry]:
        return [entry for entry in self.entries if entry.status == "repair"]


def repair_updates(raw_values: dict[str, Any], target: str) -> dict[str, str]:
    """Variable writes that make the effective timeline spell target.

    Runs twice because changing barbaraSpouse can lift or impose the
    spouseCheated override.
    """
    updates: dict[str, str] = {}
    for _ in range(2):
        effective = apply_overrides({**raw_values, **updates})
        for value in target:
            variable_id = VALUE_OWNERS[value]
            if effective.get(variable_id) != value:
                updates[variable_id] = value
    return updates


def plan_area_collapse(guild: ManagedGuild, scene: Scene, area: Area) -> CollapseEntry:
    variable_ids = variant_variable_ids_for_scene(guild, scene, area)
    if variable_ids is None or not EXISTING_VARIANTS.get(scene.name):
        return CollapseEntry(area=area, status="unchanged")

    missing = missing_variable_ids(guild, area, variable_ids)
    if missing:
        return CollapseEntry(area=area, status="undetermined", missing=missing)

    code = variant_code(guild, area, variable_ids)
    if code in EXISTING_VARIANTS[scene.name]:
        return CollapseEntry(area=area, status="unchanged", current=code)

    target = find_closest_variant(scene.name, code)
    all_ids = [variable_id for variable_id, _ in TIMELINE_VARIABLES]
    raw = dict(zip(all_ids, get_garden_vars(guild, area, all_ids)))
    return CollapseEntry(
        area=area,
        status="repair",
        current=code,
        target=target,
        updates=repair_updates(raw, target),
    )


def plan_collapse(guild: ManagedGuild) -> CollapsePlan:
    """Plan repairs for every area of the scene after the current one."""
    scene = find_scene(guild, "next")
    return CollapsePlan(
        scene=scene,
        entries=[plan_area_collapse(guild, scene, area) for area in scene.areas],
    )


def apply_collapse(guild: ManagedGuild, plan: CollapsePlan) -> list[CollapseEntry]:
    for entry in plan.repairs:
        for variable_id, value in entry.updates.items():
            set_garden_var(guild, entry.area, variable_id, value)
        logger.info(
            "guild=%s %s collapsed %s -> %s for %s",
            guild.guild_id, entry.area.name, entry.current, entry.target, plan.scene.name,
        )
    return plan.repairs


def format_collapse_plan(plan: CollapsePlan) -> str:
    lines = [f"Timelines for {plan.scene.name}:"]
    lines.extend(entry.describe() for entry in plan.entries)
    return "\n".join(lines)
