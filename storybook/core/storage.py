"""
Filesystem storage for generated illustrations.

Images are saved under a per-story directory and addressed by the path
string returned from save(), which is the locator recorded on pages and
entities.
"""

import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    """Where illustration bytes go once generated."""

    def save(self, story_key: str, page_number: int, image_bytes: bytes) -> str:
        ...

    def load(self, locator: str) -> bytes:
        ...


class LocalImageStore:
    """Write page images to <root>/<story_key>/images/page_NN.png."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def story_dir(self, story_key: str) -> Path:
        return self.root / _safe_key(story_key)

    def save(self, story_key: str, page_number: int, image_bytes: bytes) -> str:
        images_dir = self.story_dir(story_key) / "images"
        images_dir.mkdir(parents=True, exist_ok=True)

        img_path = images_dir / f"page_{page_number:02d}.png"
        img_path.write_bytes(image_bytes)
        logger.debug("Saved page %d image to %s (%d bytes)", page_number, img_path, len(image_bytes))
        return str(img_path)

    def load(self, locator: str) -> bytes:
        return Path(locator).read_bytes()


def _safe_key(name: str) -> str:
    """Convert a story key to a safe directory name."""
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in name)
