"""The eleven scenes, in playing order.

Frame scenes gather the whole cast in the funeral home. Inner scenes split
the cast over the three breakout areas; each placement names a frame
character, optionally paired with the inner character they play in that
scene (otherwise their default pairing applies).
"""

from __future__ import annotations

from forking_paths.errors import ConfigurationError
from forking_paths.garden.characters import FRAME_CHARACTER_TYPE, INNER_CHARACTER_TYPE
from forking_paths.models import Area, AreaSetup, Character, CharacterType, Placement, Scene

INNER_SCENE_NAMES = [
    "Act I Scene 1",
    "Act I Scene 2",
    "Act I Scene 3",
    "Act I Scene 4",
    "Act II Scene 1",
    "Act II Scene 2",
    "Act II Scene 3",
    "Act II Scene 4",
]

_WHOLE_CAST = [
    "Faith", "Jessica", "Larry", "Milo", "Devon", "Kathy",
    "Lily", "Patrick", "Lindsay", "Noah", "Paula", "Rick",
]

# placement entries are a frame character name or (frame, inner) pair
SCENE_LAYOUT: list[tuple[str, CharacterType, dict[str, list]]] = [
    ("Prologue", FRAME_CHARACTER_TYPE, {"The Funeral Home": _WHOLE_CAST}),
    ("Act I Scene 1", INNER_CHARACTER_TYPE, {
        "Area 1": ["Faith", "Jessica", "Larry", "Milo"],
        "Area 2": ["Devon", "Kathy", "Lily", "Patrick"],
        "Area 3": ["Lindsay", "Noah", "Paula", "Rick"],
    }),
    ("Act I Scene 2", INNER_CHARACTER_TYPE, {
        "Area 1": ["Noah", "Jessica", "Kathy", "Milo"],
        "Area 2": ["Devon", "Larry", "Lily", "Lindsay"],
        "Area 3": ["Patrick", "Faith", "Paula", "Rick"],
    }),
    ("Act I Scene 3", INNER_CHARACTER_TYPE, {
        "Area 1": ["Noah", "Faith", "Lily", "Rick"],
        "Area 2": ["Milo", "Larry", "Kathy", "Paula"],
        "Area 3": ["Devon", "Patrick", "Jessica", "Lindsay"],
    }),
    ("Act I Scene 4", INNER_CHARACTER_TYPE, {
        "Area 1": ["Faith", "Jessica", "Patrick", "Rick"],
        "Area 2": ["Noah", "Lily", "Milo", "Kathy"],
        "Area 3": ["Larry", "Devon", "Lindsay", "Paula"],
    }),
    ("Intermission", FRAME_CHARACTER_TYPE, {"The Funeral Home": _WHOLE_CAST}),
    ("Act II Scene 1", INNER_CHARACTER_TYPE, {
        "Area 1": ["Devon", "Kathy", "Patrick", ("Lily", "Stephanie")],
        "Area 2": ["Lindsay", "Noah", "Rick", ("Paula", "Stephanie")],
        "Area 3": ["Faith", "Larry", "Milo", ("Jessica", "Stephanie")],
    }),
    ("Act II Scene 2", INNER_CHARACTER_TYPE, {
        "Area 1": ["Devon", "Larry", "Lindsay", ("Lily", "Stephanie")],
        "Area 2": ["Patrick", "Rick", "Faith", ("Paula", "Stephanie")],
        "Area 3": ["Noah", "Kathy", "Milo", ("Jessica", "Stephanie")],
    }),
    ("Act II Scene 3", INNER_CHARACTER_TYPE, {
        "Area 1": ["Kathy", ("Milo", "Zach"), "Larry", ("Paula", "Stephanie")],
        "Area 2": [("Devon", "Zach"), ("Jessica", "Stephanie"), "Lindsay", "Patrick"],
        "Area 3": [("Rick", "Zach"), "Faith", "Noah", ("Lily", "Stephanie")],
    }),
    ("Act II Scene 4", INNER_CHARACTER_TYPE, {
        "Area 1": ["Kathy", ("Milo", "Zach"), "Noah", ("Lily", "Stephanie")],
        "Area 2": [("Devon", "Zach"), "Larry", ("Paula", "Stephanie"), "Lindsay"],
        "Area 3": [("Rick", "Zach"), ("Jessica", "Stephanie"), "Faith", "Patrick"],
    }),
    ("Epilogue", FRAME_CHARACTER_TYPE, {"The Funeral Home": _WHOLE_CAST}),
]


def is_inner_scene(scene: Scene) -> bool:
    return scene.name in INNER_SCENE_NAMES


def _character(characters: dict[str, Character], scene_name: str, name: str) -> Character:
    try:
        return characters[name]
    except KeyError:
        raise ConfigurationError(f"{scene_name} references undefined character {name}") from None


def build_scene(
    name: str,
    character_type: CharacterType,
    layout: dict[str, list],
    areas: dict[str, Area],
    characters: dict[str, Character],
    default_secondaries: dict[str, str],
) -> Scene:
    area_setups = []
    for area_name, entries in layout.items():
        if area_name not in areas:
            raise ConfigurationError(f"{name} references undefined area {area_name}")
        placements = []
        for entry in entries:
            primary_name, secondary_name = entry if isinstance(entry, tuple) else (entry, None)
            if secondary_name is None and not character_type.primary:
                secondary_name = default_secondaries.get(primary_name)
            placements.append(Placement(
                primary_character=_character(characters, name, primary_name),
                secondary_character=(
                    _character(characters, name, secondary_name) if secondary_name else None
                ),
            ))
        area_setups.append(AreaSetup(area=areas[area_name], placements=placements))
    return Scene(name=name, character_type=character_type, area_setups=area_setups)


def build_scenes(
    areas: dict[str, Area],
    characters: dict[str, Character],
    default_secondaries: dict[str, str],
) -> list[Scene]:
    return [
        build_scene(name, character_type, layout, areas, characters, default_secondaries)
        for name, character_type, layout in SCENE_LAYOUT
    ]
