"""Service settings, read from the environment (and .env, if present)."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

ROOT = Path(__file__).parent.parent


class Settings(BaseModel):
    data_dir: Path = Path("data")
    content_dir: Path = Path("content")
    gm_role_name: str = "GM"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 13013


def load_settings() -> Settings:
    load_dotenv(ROOT / ".env")
    return Settings(
        data_dir=Path(os.getenv("DATA_DIR", "data")),
        content_dir=Path(os.getenv("CONTENT_DIR", "content")),
        gm_role_name=os.getenv("GM_ROLE_NAME", "GM"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "13013")),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
