"""Image root layout: validation and bootstrap."""
import logging
from pathlib import Path

from errors import InvalidLayoutError, MissingRootError
from models import THUMBNAILS_DIRNAME, Category

logger = logging.getLogger(__name__)

REQUIRED_SUBFOLDERS = tuple(c.value for c in Category.concrete()) + (THUMBNAILS_DIRNAME,)


def thumbnails_dir(root: Path) -> Path:
    return Path(root) / THUMBNAILS_DIRNAME


def validate_folder(root: Path) -> None:
    """Check that root holds the pc/, mp/ and thumbnails/ subfolders."""
    root = Path(root)
    if not root.exists():
        raise MissingRootError(root)
    missing = [name for name in REQUIRED_SUBFOLDERS if not (root / name).is_dir()]
    if missing:
        raise InvalidLayoutError(root, missing)


def create_folder_structure(root: Path) -> None:
    """Create root and its required subfolders. Safe to call repeatedly."""
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)
    for name in REQUIRED_SUBFOLDERS:
        (root / name).mkdir(exist_ok=True)
    logger.info("Folder structure ready under %s", root)
