"""Exceptions raised by the image pipeline."""
from pathlib import Path


class ImageRandomError(Exception):
    """Base class for all pipeline errors."""


class FolderStructureError(ImageRandomError):
    """The image root does not have the required layout."""

    def __init__(self, root: Path, message: str):
        super().__init__(message)
        self.root = root


class MissingRootError(FolderStructureError):
    def __init__(self, root: Path):
        super().__init__(root, f"Image folder not found: {root}")


class InvalidLayoutError(FolderStructureError):
    def __init__(self, root: Path, missing: list[str]):
        super().__init__(
            root, f"Invalid image folder structure in {root}, missing: {', '.join(missing)}"
        )
        self.missing = missing


class CodecError(ImageRandomError):
    """Decoding or encoding a single image failed."""

    def __init__(self, path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DecodeError(CodecError):
    pass


class EncodeError(CodecError):
    pass


class ImageNotFoundError(ImageRandomError):
    """No image matches the requested category or name."""
