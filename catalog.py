"""In-memory image catalog partitioned by category."""
import logging
import random
import threading
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from errors import ImageNotFoundError
from models import Category
from scanner import iter_image_files

logger = logging.getLogger(__name__)


class Catalog:
    """Category -> image paths index.

    The partition mapping is never mutated; ``add`` swaps in a new mapping, so
    readers don't need the lock.
    """

    def __init__(self, partitions: Optional[Mapping[Category, Iterable[Path]]] = None):
        partitions = partitions or {}
        self._partitions: dict[Category, tuple[Path, ...]] = {
            c: tuple(partitions.get(c, ())) for c in Category.concrete()
        }
        self._lock = threading.Lock()

    @classmethod
    def build(cls, root: Path) -> "Catalog":
        """Index every .webp under root whose parent folder is a known category."""
        partitions: dict[Category, list[Path]] = {c: [] for c in Category.concrete()}
        for file in iter_image_files(Path(root)):
            category = Category.parse(file.parent.name)
            if category is None or category is Category.ALL:
                continue
            partitions[category].append(file)
        catalog = cls(partitions)
        logger.info(
            "Indexed %d images (%s)",
            len(catalog),
            ", ".join(f"{c.value}: {len(p)}" for c, p in partitions.items()),
        )
        return catalog

    def __len__(self) -> int:
        return sum(len(p) for p in self._partitions.values())

    def by_category(self, category: Union[Category, str]) -> tuple[Path, ...]:
        """Paths in category; the union for ``all``; empty for unknown names."""
        if not isinstance(category, Category):
            category = Category.parse(category)
            if category is None:
                return ()
        partitions = self._partitions
        if category is Category.ALL:
            return tuple(p for c in Category.concrete() for p in partitions[c])
        return partitions[category]

    def by_filename(self, name: str) -> Optional[Path]:
        """First image whose file name equals name."""
        for path in self.by_category(Category.ALL):
            if path.name == name:
                return path
        return None

    def random(self, category: Union[Category, str], rng: Optional[random.Random] = None) -> Path:
        """Pick an image uniformly from category."""
        images = self.by_category(category)
        if not images:
            label = getattr(category, "value", category)
            raise ImageNotFoundError(f"No images found in {label}")
        return (rng or random).choice(images)

    def add(self, category: Category, path: Path) -> bool:
        """Register a newly saved image. Returns False if it was already indexed."""
        if category is Category.ALL:
            raise ValueError("Images must be added to a concrete category")
        path = Path(path)
        with self._lock:
            current = self._partitions[category]
            if path in current:
                return False
            partitions = dict(self._partitions)
            partitions[category] = current + (path,)
            self._partitions = partitions
        return True
