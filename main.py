"""A Garden of Forking Paths: game master service launcher."""

import argparse
import os
from pathlib import Path

import uvicorn

from forking_paths.config import configure_logging, load_settings


def main():
    settings = load_settings()

    parser = argparse.ArgumentParser(description="A Garden of Forking Paths game master service")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help=f"Game state directory (default: {settings.data_dir})")
    parser.add_argument("--content-dir", type=Path, default=None,
                        help=f"Scene intros and character packets (default: {settings.content_dir})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    # uvicorn imports forking_paths.app in-process, which reads the same env
    if args.data_dir:
        os.environ["DATA_DIR"] = str(args.data_dir.resolve())
    if args.content_dir:
        os.environ["CONTENT_DIR"] = str(args.content_dir.resolve())

    print(f"Starting game master on http://localhost:{settings.port} ...")
    uvicorn.run("forking_paths.app:app", host=settings.host, port=settings.port,
                reload=args.reload, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
