"""
Image Random – random image server (FastAPI + Pillow)

Quick start
-----------
1) python -m venv .venv && source .venv/bin/activate  # or .venv\\Scripts\\activate on Windows
2) pip install -e .
3) python app.py  # writes config.json and ./images/{pc,mp,thumbnails} on first run
4) Drop photos into images/pc or images/mp, restart, open http://127.0.0.1:8080

Notes
-----
• On startup every jpg/jpeg/png is converted to webp in place and the original removed.
• Thumbnails (max 200x200) are cached under <image_folder>/thumbnails/ by file name.
• Uploads: POST /api/images/{pc|mp} with "Authorization: Bearer <base64 of pwd>".
"""

import argparse
import logging
import sys
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from catalog import Catalog
from config import DEFAULT_CONFIG_PATH, Config, load_config
from errors import FolderStructureError
from ingest import run_ingestion
from routes import (
    get_image,
    get_list,
    get_thumbnail,
    index,
    random_image,
    upload_image,
)

logger = logging.getLogger(__name__)


def create_app(config: Config, catalog: Catalog) -> FastAPI:
    """Build the app around an already ingested catalog."""
    app = FastAPI(title="Image Random")
    app.state.config = config
    app.state.catalog = catalog

    # Routes
    app.get("/", response_class=HTMLResponse)(index)
    app.get("/api/image/{filename}")(get_image)
    app.get("/api/list/{subfolder}")(get_list)
    app.get("/api/images/{subfolder}")(random_image)
    app.post("/api/images/{subfolder}")(upload_image)
    app.get("/api/thumbnail/{filename}")(get_thumbnail)
    return app


def ask_create_folder() -> bool:
    """Ask the operator whether to create the missing image folder."""
    if not sys.stdin.isatty():
        return False
    answer = input("Do you want to create the folder? (y/n) ")
    return answer.strip().lower() == "y"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Random image server")
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to config.json"
    )
    parser.add_argument(
        "--create-folders",
        action="store_true",
        help="Create the image folder structure if it is missing",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    config = load_config(args.config)
    logger.info("Config: host=%s port=%s image_folder=%s", config.host, config.port, config.image_folder)

    try:
        catalog = run_ingestion(config.root, create_missing=args.create_folders)
    except FolderStructureError as e:
        logger.error("Failed to validate image folder: %s", e)
        if not ask_create_folder():
            return 1
        catalog = run_ingestion(config.root, create_missing=True)

    import uvicorn

    logger.info("Server running at http://%s:%s", config.host, config.port)
    uvicorn.run(create_app(config, catalog), host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
