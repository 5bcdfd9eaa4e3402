"""JSON file storage for per-guild game state.

All state is stored in flat JSON files under a configurable base directory.
There is no database; reads and writes go through plain helper methods
that load and dump JSON. Writes are last-write-wins.

Directory layout:

    {base}/
      guilds/
        {guild_id}/
          variables.json      ← {qualified_variable_id: value}
          state.json          ← {"scene_name": ...}
          nicknames.json      ← {member_id: original_nickname}

Qualified variable ids look like "global.foo" or "area.area_1.barbaraSpouse"
(see forking_paths.variables).
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any
from urllib.parse import quote

logger = logging.getLogger(__name__)


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._guild_root = base_path / "guilds"
        self._guild_root.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _guild_dir(self, guild_id: str) -> Path:
        # percent-encoding keeps distinct ids in distinct directories; dots
        # are encoded too, and the empty id gets a name quote never produces,
        # so no id can name the guild root or its parent
        safe = quote(str(guild_id), safe="").replace(".", "%2E") or "%"
        return self._guild_root / safe

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        return json.loads(path.read_text())

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def get_variable_values(self, guild_id: str, qualified_ids: list[str]) -> list[Any]:
        """Return values in the order requested; None for ids never set."""
        stored = self._read_json(self._guild_dir(guild_id) / "variables.json", {})
        return [stored.get(qualified_id) for qualified_id in qualified_ids]

    def get_variable_value(self, guild_id: str, qualified_id: str) -> Any:
        return self.get_variable_values(guild_id, [qualified_id])[0]

    def set_variable_value(self, guild_id: str, qualified_id: str, value: Any) -> None:
        """Upsert one value. The value must be JSON-serialisable."""
        path = self._guild_dir(guild_id) / "variables.json"
        stored = self._read_json(path, {})
        stored[qualified_id] = value
        self._write_json(path, stored)
        logger.debug("set guild=%s %s=%r", guild_id, qualified_id, value)

    # ------------------------------------------------------------------
    # Scene pointer
    # ------------------------------------------------------------------

    def get_scene_name(self, guild_id: str) -> str | None:
        state = self._read_json(self._guild_dir(guild_id) / "state.json", {})
        return state.get("scene_name")

    def set_scene_name(self, guild_id: str, scene_name: str | None) -> None:
        self._write_json(self._guild_dir(guild_id) / "state.json", {"scene_name": scene_name})

    # ------------------------------------------------------------------
    # Original member nicknames (restored by !restorenicknames)
    # ------------------------------------------------------------------

    def get_original_nicknames(self, guild_id: str) -> dict[str, str | None]:
        return self._read_json(self._guild_dir(guild_id) / "nicknames.json", {})

    def set_original_nickname_if_absent(
        self, guild_id: str, member_id: str, nickname: str | None
    ) -> bool:
        """Record a member's nickname the first time the game renames them."""
        path = self._guild_dir(guild_id) / "nicknames.json"
        stored = self._read_json(path, {})
        if member_id in stored:
            return False
        stored[member_id] = nickname
        self._write_json(path, stored)
        return True

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def delete_game_data(self, guild_id: str) -> bool:
        """Remove every variable, the scene pointer and nicknames for one guild."""
        guild_dir = self._guild_dir(guild_id)
        if not guild_dir.is_dir():
            return False
        shutil.rmtree(guild_dir)
        return True
