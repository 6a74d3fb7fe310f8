"""Startup ingestion and the upload path."""
import io
import logging
from pathlib import Path
from typing import Optional

from catalog import Catalog
from errors import CodecError, FolderStructureError
from folders import create_folder_structure, validate_folder
from models import THUMBNAIL_SIZE, Category, UploadResult, UploadStatus
from scanner import derive_name, normalize_tree
from thumbnails import ensure_thumbnail, ensure_thumbnails_tree
from utils import load_image, save_webp

logger = logging.getLogger(__name__)


def run_ingestion(
    root: Path,
    create_missing: bool = False,
    max_width: int = THUMBNAIL_SIZE[0],
    max_height: int = THUMBNAIL_SIZE[1],
) -> Catalog:
    """Validate the layout, normalize, thumbnail and index the image root."""
    root = Path(root)
    try:
        validate_folder(root)
    except FolderStructureError as e:
        if not create_missing:
            raise
        logger.warning("%s; creating it", e)
        create_folder_structure(root)
    logger.info("Image folder validated: %s", root)

    converted = normalize_tree(root)
    logger.info(
        "%d images converted to webp (%d failed)",
        converted.converted,
        len(converted.failures),
    )

    thumbs = ensure_thumbnails_tree(root, max_width, max_height, root)
    logger.info(
        "%d thumbnails created (%d failed)", thumbs.converted, len(thumbs.failures)
    )

    return Catalog.build(root)


def save_upload(
    root: Path,
    category: Category,
    filename: str,
    data: bytes,
    catalog: Optional[Catalog] = None,
    max_width: int = THUMBNAIL_SIZE[0],
    max_height: int = THUMBNAIL_SIZE[1],
) -> UploadResult:
    """Store one uploaded image under its derived name and make its thumbnail.

    A thumbnail failure leaves the saved image in place and is reported as
    THUMBNAIL_FAILED.
    """
    if category is Category.ALL:
        raise ValueError("Uploads need a concrete category")
    folder = Path(root) / category.value
    folder.mkdir(parents=True, exist_ok=True)
    dest = folder / derive_name(filename)

    try:
        image = load_image(io.BytesIO(data), label=filename)
        save_webp(image, dest)
    except CodecError as e:
        logger.error("Failed to save image %s: %s", filename, e.reason)
        return UploadResult(filename, UploadStatus.FAILED, error=e.reason)
    logger.info("Image %s saved to %s", filename, dest)

    if catalog is not None:
        catalog.add(category, dest)

    try:
        ensure_thumbnail(dest, max_width, max_height, root, force=True)
    except CodecError as e:
        logger.error("Failed to create thumbnail for %s: %s", dest, e.reason)
        return UploadResult(filename, UploadStatus.THUMBNAIL_FAILED, dest, e.reason)
    return UploadResult(filename, UploadStatus.SAVED, dest)
