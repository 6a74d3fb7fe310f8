"""Thumbnail cache.

A thumbnail lives at ``<root>/thumbnails/<image name>``. The file existing is
the cache hit; nothing else records which thumbnails have been made.
"""
import logging
from pathlib import Path
from typing import Optional

from PIL import Image as PILImage

from errors import CodecError
from folders import thumbnails_dir
from models import THUMBNAIL_SIZE, ThumbnailStatus, WalkReport
from scanner import iter_image_files
from utils import load_image, save_webp

logger = logging.getLogger(__name__)


def thumbnail_path(image_path: Path, root: Path) -> Path:
    return thumbnails_dir(root) / Path(image_path).name


def thumbnail_size(
    width: int, height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """Fit width x height into the box, keeping the aspect ratio.

    Landscape images are fitted to max_width, everything else to max_height.
    """
    if width > height:
        new_w, new_h = max_width, max_width * height // width
        if new_h > max_height:
            new_w, new_h = max_height * width // height, max_height
    else:
        new_w, new_h = max_height * width // height, max_height
        if new_w > max_width:
            new_w, new_h = max_width, max_width * height // width
    return max(new_w, 1), max(new_h, 1)


def ensure_thumbnail(
    image_path: Path,
    max_width: int,
    max_height: int,
    root: Path,
    force: bool = False,
) -> ThumbnailStatus:
    """Create the thumbnail for image_path unless it already exists.

    With ``force`` the existing thumbnail is regenerated. Raises DecodeError or
    EncodeError on codec failures.
    """
    image_path = Path(image_path)
    thumb = thumbnail_path(image_path, root)
    if not force and thumb.exists():
        return ThumbnailStatus.ALREADY_PRESENT

    im = load_image(image_path)
    size = thumbnail_size(im.width, im.height, max_width, max_height)
    resized = im.resize(size, PILImage.Resampling.LANCZOS)
    thumb.parent.mkdir(parents=True, exist_ok=True)
    save_webp(resized, thumb)
    logger.debug("Created thumbnail %s (%dx%d)", thumb, *size)
    return ThumbnailStatus.CREATED


def ensure_thumbnails_tree(
    path: Path,
    max_width: int = THUMBNAIL_SIZE[0],
    max_height: int = THUMBNAIL_SIZE[1],
    root: Optional[Path] = None,
) -> WalkReport:
    """Create missing thumbnails for every image under path."""
    path = Path(path)
    root = Path(root) if root is not None else path
    report = WalkReport()
    for image in iter_image_files(path):
        try:
            status = ensure_thumbnail(image, max_width, max_height, root)
        except CodecError as e:
            logger.warning("Failed to create thumbnail for %s: %s", image, e.reason)
            report.failures.append((image, e.reason))
            continue
        if status is ThumbnailStatus.CREATED:
            report.converted += 1
    return report
