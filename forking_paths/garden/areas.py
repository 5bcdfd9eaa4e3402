"""Areas: the funeral home (frame story) and three breakout rooms."""

from __future__ import annotations

from forking_paths.garden.variables import build_timeline_variables
from forking_paths.models import Area

FRAME_AREA_NAMES = ["The Funeral Home"]
INNER_AREA_NAMES = ["Area 1", "Area 2", "Area 3"]


def is_inner_area(area: Area) -> bool:
    return area.name in INNER_AREA_NAMES


def is_frame_area(area: Area) -> bool:
    return area.name in FRAME_AREA_NAMES


def build_areas() -> dict[str, Area]:
    areas = {
        "The Funeral Home": Area(
            name="The Funeral Home",
            text_channel_name="the-funeral-home",
            voice_channel_name="The Funeral Home",
        ),
    }
    for i, name in enumerate(INNER_AREA_NAMES, start=1):
        areas[name] = Area(
            name=name,
            text_channel_name=f"area-{i}",
            voice_channel_name=name,
            variables=build_timeline_variables(),
        )
    return areas
