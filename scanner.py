"""Image scanning utilities: format normalization and content-addressed names."""
import hashlib
import logging
from pathlib import Path
from typing import Iterable, Union

from errors import CodecError
from models import SOURCE_EXTS, TARGET_EXT, WalkReport
from utils import iter_files, load_image, save_webp

logger = logging.getLogger(__name__)


def iter_image_files(root: Path) -> Iterable[Path]:
    """Iterate through all normalized images under root, excluding thumbnails."""
    for p in iter_files(Path(root)):
        if p.suffix.lower() == TARGET_EXT:
            yield p


def iter_source_files(root: Path) -> Iterable[Path]:
    """Iterate through images still waiting to be converted."""
    for p in iter_files(Path(root)):
        if p.suffix.lower() in SOURCE_EXTS:
            yield p


def derive_name(original_filename: Union[str, bytes]) -> str:
    """Map an uploaded file name to its stored name: md5 of the name plus .webp.

    Two uploads sharing a name map to the same file, so the later one replaces
    the earlier one.
    """
    if isinstance(original_filename, str):
        original_filename = original_filename.encode("utf-8")
    if not original_filename:
        raise ValueError("File name must not be empty")
    return hashlib.md5(original_filename).hexdigest() + TARGET_EXT


def convert_to_webp(path: Path) -> Path:
    """Re-encode a single image as WebP next to it and remove the original.

    Raises CodecError when decoding or encoding fails; the original is kept
    in that case.
    """
    target = path.with_suffix(TARGET_EXT)
    image = load_image(path)
    save_webp(image, target)
    path.unlink()
    return target


def normalize_tree(root: Path) -> WalkReport:
    """Convert every jpg/jpeg/png under root to WebP. Returns conversion stats."""
    report = WalkReport()
    for file in list(iter_source_files(root)):
        try:
            convert_to_webp(file)
        except CodecError as e:
            logger.warning("Failed to convert %s: %s", file, e.reason)
            report.failures.append((file, e.reason))
            continue
        logger.debug("Converted %s to webp", file)
        report.converted += 1
    return report
