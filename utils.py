"""Utility functions."""
import os
import uuid
from pathlib import Path
from typing import Iterator

from fastapi import HTTPException
from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from errors import DecodeError, EncodeError
from models import THUMBNAILS_DIRNAME

WEBP_QUALITY = 80


def resolve_under_root(root: Path, candidate: Path) -> Path:
    """Resolve a path ensuring it's under the root directory."""
    root = root.resolve()
    real = candidate.resolve()
    if root not in real.parents and real != root:
        raise HTTPException(status_code=400, detail="Path is outside root")
    return real


def is_thumbnails_dir(path: Path) -> bool:
    """True for the derived-thumbnails folder, which no source walk may enter."""
    return path.name == THUMBNAILS_DIRNAME


def iter_files(folder: Path) -> Iterator[Path]:
    """Recursively yield files under folder, skipping the thumbnails subtree.

    Directory read errors propagate to the caller.
    """
    if is_thumbnails_dir(folder):
        return
    for entry in sorted(folder.iterdir()):
        if entry.is_dir():
            yield from iter_files(entry)
        elif entry.is_file():
            yield entry


def load_image(source, label=None) -> PILImage.Image:
    """Decode an image from a path or file object, applying EXIF orientation."""
    label = label or source
    try:
        with PILImage.open(source) as im:
            im.load()
            return ImageOps.exif_transpose(im)
    except (
        UnidentifiedImageError,
        PILImage.DecompressionBombError,
        OSError,
        ValueError,
    ) as e:
        raise DecodeError(label, str(e)) from e


def save_webp(image: PILImage.Image, dest: Path) -> None:
    """Encode image as WebP at dest via a temp file and an atomic rename."""
    if image.mode not in ("RGB", "RGBA"):
        has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")

    tmp = dest.with_name(f".{dest.name}.{uuid.uuid4().hex}.tmp")
    try:
        image.save(tmp, format="WEBP", quality=WEBP_QUALITY)
        os.replace(tmp, dest)
    except (OSError, ValueError) as e:
        tmp.unlink(missing_ok=True)
        raise EncodeError(dest, str(e)) from e
