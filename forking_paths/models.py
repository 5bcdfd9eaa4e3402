"""Static game definition types.

A Game is built once at startup from static data (see forking_paths.garden)
and never mutated afterwards. Pydantic models describe the serialisable
pieces (variables, areas, characters, scenes); Game itself is a plain
container because it also carries hook callables and command handlers.

Default pairings replace the old practice of mutating character objects
while building them: a primary character maps to at most one default
secondary character, and placements in secondary-character scenes that
don't name a secondary character fall back to that map.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal

from pydantic import BaseModel, Field

from forking_paths.errors import ConfigurationError

if TYPE_CHECKING:
    from forking_paths.guild import ManagedGuild

Scope = Literal["global", "area"]


class Choice(BaseModel):
    value: str  # single-character code, unique within an area
    label: str


class Variable(BaseModel):
    """A variable definition. Values live in the store, never here."""

    id: str
    type: Literal["choice"] = "choice"
    scope: Scope
    choices: list[Choice] = Field(default_factory=list)

    def find_choice(self, value: str) -> Choice | None:
        """Case-insensitive lookup of one of this variable's choices."""
        for choice in self.choices:
            if choice.value.lower() == value.lower():
                return choice
        return None

    def describe(self, value: Any) -> str:
        choice = self.find_choice(value) if isinstance(value, str) else None
        if choice is None:
            return f"{value}: Unrecognized choice value"
        return f"{choice.value}: {choice.label}"


class Area(BaseModel):
    name: str
    text_channel_name: str
    voice_channel_name: str
    variables: dict[str, Variable] = Field(default_factory=dict)


class CharacterType(BaseModel):
    name: str
    primary: bool


class Character(BaseModel):
    name: str
    type: CharacterType


class Placement(BaseModel):
    """One row of "who occupies this area in this scene"."""

    primary_character: Character
    secondary_character: Character | None = None


class AreaSetup(BaseModel):
    area: Area
    placements: list[Placement]


class Scene(BaseModel):
    name: str
    character_type: CharacterType
    area_setups: list[AreaSetup] = Field(default_factory=list)

    @property
    def areas(self) -> list[Area]:
        return [setup.area for setup in self.area_setups]

    def area_for_primary_character(self, character: Character) -> Area | None:
        for setup in self.area_setups:
            if any(p.primary_character.name == character.name for p in setup.placements):
                return setup.area
        return None


PrepHook = Callable[["ManagedGuild", Scene, Area], Awaitable[None]]


def build_default_pairings(
    characters: dict[str, Character],
    default_primaries: dict[str, list[str]],
) -> dict[str, str]:
    """Build the primary -> secondary default pairing map.

    default_primaries maps each secondary character name to the primary
    characters it is played by unless a scene says otherwise. A primary
    listed under two secondaries is a configuration error.
    """
    pairings: dict[str, str] = {}
    for secondary_name, primary_names in default_primaries.items():
        secondary = characters.get(secondary_name)
        if secondary is None or secondary.type.primary:
            raise ConfigurationError(f"{secondary_name} is not a secondary character")
        for primary_name in primary_names:
            primary = characters.get(primary_name)
            if primary is None or not primary.type.primary:
                raise ConfigurationError(
                    f"Default pairing for {secondary_name} names unknown primary character {primary_name}"
                )
            if primary_name in pairings:
                raise ConfigurationError(
                    f"{primary_name} is the default for both {pairings[primary_name]} and {secondary_name}"
                )
            pairings[primary_name] = secondary_name
    return pairings


class Game:
    """The complete static definition of one game."""

    def __init__(
        self,
        *,
        title: str,
        areas: list[Area],
        character_types: list[CharacterType],
        characters: list[Character],
        scenes: list[Scene],
        default_secondaries: dict[str, str] | None = None,
        global_variables: list[Variable] | None = None,
        gm_role_name: str = "GM",
        command_handlers: dict[str, Any] | None = None,
        pre_prep_scene: PrepHook | None = None,
        post_prep_scene: PrepHook | None = None,
    ) -> None:
        self.title = title
        self.areas = {area.name: area for area in areas}
        self.character_types = {t.name: t for t in character_types}
        self.characters = {c.name: c for c in characters}
        self.scenes = scenes
        self.default_secondaries = dict(default_secondaries or {})
        self.global_variables = {v.id: v for v in global_variables or []}
        self.gm_role_name = gm_role_name
        self.command_handlers = dict(command_handlers or {})
        self.pre_prep_scene = pre_prep_scene
        self.post_prep_scene = post_prep_scene

    @property
    def scene_names(self) -> list[str]:
        return [scene.name for scene in self.scenes]

    def scene_index(self, scene: Scene) -> int:
        for i, s in enumerate(self.scenes):
            if s.name == scene.name:
                return i
        return -1

    def get_scene(self, name: str) -> Scene | None:
        for scene in self.scenes:
            if scene.name == name:
                return scene
        return None

    def default_secondary_for(self, primary: Character) -> Character | None:
        name = self.default_secondaries.get(primary.name)
        return self.characters[name] if name else None

    def validate(self) -> None:
        """Check the definition graph; raise ConfigurationError on the first problem."""
        seen_scenes: set[str] = set()
        for scene in self.scenes:
            if scene.name in seen_scenes:
                raise ConfigurationError(f"Duplicate scene name {scene.name}")
            seen_scenes.add(scene.name)
            placed: set[str] = set()
            for setup in scene.area_setups:
                if setup.area.name not in self.areas:
                    raise ConfigurationError(
                        f"{scene.name} references undefined area {setup.area.name}"
                    )
                for placement in setup.placements:
                    primary = placement.primary_character
                    if primary.name not in self.characters:
                        raise ConfigurationError(
                            f"{scene.name} references undefined character {primary.name}"
                        )
                    if not primary.type.primary:
                        raise ConfigurationError(
                            f"{scene.name} places {primary.name} as a primary character"
                        )
                    if primary.name in placed:
                        raise ConfigurationError(f"{scene.name} places {primary.name} twice")
                    placed.add(primary.name)
                    secondary = placement.secondary_character
                    if secondary is None:
                        continue
                    if secondary.name not in self.characters:
                        raise ConfigurationError(
                            f"{scene.name} references undefined character {secondary.name}"
                        )
                    if secondary.type.primary:
                        raise ConfigurationError(
                            f"{scene.name} places {secondary.name} as a secondary character"
                        )
