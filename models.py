"""Shared types for the image pipeline."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

# Configuration
SOURCE_EXTS = {".jpg", ".jpeg", ".png"}
TARGET_EXT = ".webp"
THUMBNAILS_DIRNAME = "thumbnails"
THUMBNAIL_SIZE = (200, 200)


class Category(str, Enum):
    """Fixed image partitions. ``ALL`` is the union pseudo-category."""
    PC = "pc"
    MP = "mp"
    ALL = "all"

    @classmethod
    def concrete(cls) -> tuple["Category", ...]:
        """Categories that exist as folders on disk."""
        return (cls.PC, cls.MP)

    @classmethod
    def parse(cls, name: str) -> Optional["Category"]:
        """Return the category named ``name`` or None."""
        try:
            return cls(name)
        except ValueError:
            return None


class ThumbnailStatus(str, Enum):
    CREATED = "created"
    ALREADY_PRESENT = "already_present"


class UploadStatus(str, Enum):
    SAVED = "saved"
    THUMBNAIL_FAILED = "thumbnail_failed"
    FAILED = "failed"


@dataclass
class WalkReport:
    """Outcome of a tree walk: files processed plus per-file failures."""
    converted: int = 0
    failures: list[tuple[Path, str]] = field(default_factory=list)


@dataclass
class UploadResult:
    """Outcome of saving one uploaded file."""
    filename: str
    status: UploadStatus
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        if self.path is None:
            return None
        return f"/api/image/{self.path.name}"

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "status": self.status.value,
            "url": self.url,
            "error": self.error,
        }
