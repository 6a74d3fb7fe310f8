import io

import pytest
from PIL import Image as PILImage

from folders import create_folder_structure


# --- Filesystem fixtures ------------------------------------------------------
@pytest.fixture()
def image_root(tmp_path):
    """Fresh image root with pc/, mp/ and thumbnails/."""
    root = tmp_path / "images"
    create_folder_structure(root)
    return root


@pytest.fixture()
def make_image():
    """Write a solid-colour image; the format follows the file suffix."""
    def _mk(path, size=(80, 60), color=(200, 30, 30)):
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.new("RGB", size, color).save(path)
        return path

    return _mk


@pytest.fixture()
def image_bytes():
    """Encode a solid-colour image in memory, as an upload would send it."""
    def _mk(size=(64, 48), color=(30, 200, 30), fmt="PNG") -> bytes:
        buf = io.BytesIO()
        PILImage.new("RGB", size, color).save(buf, format=fmt)
        return buf.getvalue()

    return _mk
