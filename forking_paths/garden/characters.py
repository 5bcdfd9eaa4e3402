"""Frame and inner characters.

Frame characters are the players' own roles for the whole evening (the
mourners at the funeral home). Inner characters are the family members in
the remembered story; a frame character plays one of them during inner
scenes, by default the one listed below.
"""

from __future__ import annotations

from forking_paths.models import Character, CharacterType, build_default_pairings

FRAME_CHARACTER_TYPE = CharacterType(name="Frame Character", primary=True)
INNER_CHARACTER_TYPE = CharacterType(name="Inner Character", primary=False)

FRAME_CHARACTER_NAMES = [
    "Devon", "Faith", "Jessica", "Kathy", "Larry", "Lindsay",
    "Lily", "Milo", "Noah", "Patrick", "Paula", "Rick",
]

# inner character → frame characters who play them unless a scene says otherwise
INNER_CHARACTER_DEFAULTS: dict[str, list[str]] = {
    "Barbara": ["Kathy", "Lindsay", "Faith"],
    "Virginia": ["Jessica", "Lily", "Paula"],
    "William": ["Milo", "Devon", "Rick"],
    "Charles": ["Larry", "Patrick", "Noah"],
    "Stephanie": [],
    "Zach": [],
}


def build_characters() -> dict[str, Character]:
    characters = {
        name: Character(name=name, type=FRAME_CHARACTER_TYPE) for name in FRAME_CHARACTER_NAMES
    }
    for name in INNER_CHARACTER_DEFAULTS:
        characters[name] = Character(name=name, type=INNER_CHARACTER_TYPE)
    return characters


def build_default_secondaries(characters: dict[str, Character]) -> dict[str, str]:
    return build_default_pairings(characters, INNER_CHARACTER_DEFAULTS)
