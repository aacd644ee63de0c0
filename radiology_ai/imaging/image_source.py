"""
Source radiographs for analysis.

The view only needs "the currently loaded image" as a base64 string;
this provider serves it from a directory of sample images.

The directory listing is immutable and may be shared; an ``ImageProvider``
holds one user's selection and must not be.
"""

import base64
import logging
import random
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..utils.exceptions import ValidationException, format_user_error

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


def list_sample_images(sample_dir) -> Tuple[Path, ...]:
    """Images directly under ``sample_dir``, sorted by path."""
    sample_dir = Path(sample_dir)
    if not sample_dir.is_dir():
        return ()
    return tuple(sorted(
        p for p in sample_dir.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    ))


class ImageProvider:
    """
    Picks the image under analysis and hands it out base64-encoded.

    Args:
        sample_dir: Directory scanned (non-recursively) for images.
        rng: Random source for ``set_random_image``; injectable for tests.
        images: Pre-computed listing of ``sample_dir``. Without it the
            directory is scanned on every ``list_images`` call.
    """

    def __init__(
        self,
        sample_dir,
        rng: Optional[random.Random] = None,
        images: Optional[Sequence[Path]] = None,
    ):
        self.sample_dir = Path(sample_dir)
        self.rng = rng or random.Random()
        self._images = tuple(images) if images is not None else None
        self.current: Optional[Path] = None
        self._encoded: Optional[str] = None

    def list_images(self) -> Tuple[Path, ...]:
        if self._images is not None:
            return self._images
        return list_sample_images(self.sample_dir)

    def set_image(self, path) -> Path:
        path = Path(path)
        if not path.is_file():
            raise ValidationException(f"Image not found: {path}")
        self.current = path
        self._encoded = None
        logger.info("Selected image %s", path.name)
        return path

    def set_random_image(self) -> Path:
        images = self.list_images()
        if not images:
            raise ValidationException(
                format_user_error("no_sample_images", path=self.sample_dir)
            )
        return self.set_image(self.rng.choice(images))

    def get_image(self) -> str:
        """Base64 payload of the selected image."""
        if self.current is None:
            raise ValidationException(format_user_error("empty_image"))
        if self._encoded is None:
            self._encoded = base64.b64encode(self.current.read_bytes()).decode("ascii")
        return self._encoded
