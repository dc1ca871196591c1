"""
Image Store for the community bulletin board.

Stores uploaded article images in an application-managed directory and
hands back relative links for the database, so stored links stay valid
when the media directory moves.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from core.error_handler import ValidationError, ImageStorageError


logger = logging.getLogger(__name__)


ALLOWED_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.webp'}
MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10 MB


class ImageStore:
    """Manages article image files with relative link handling."""

    def __init__(self, media_dir: Path, max_image_size: int = MAX_IMAGE_SIZE):
        """
        Initialize image store.

        Args:
            media_dir: Root directory for uploaded media
            max_image_size: Largest accepted image in bytes
        """
        self.media_dir = Path(media_dir)
        self.images_dir = self.media_dir / "article_images"
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self.max_image_size = max_image_size

        logger.info(f"Image store initialized: {self.images_dir}")

    def save_image(self, data: bytes, filename: str, article_id: int) -> str:
        """
        Write image bytes into the managed directory.

        Files are grouped per article and named with a random hex id to
        avoid collisions; the original extension is kept.

        Args:
            data: Raw image bytes
            filename: Original upload filename (used for its extension)
            article_id: Owning article ID

        Returns:
            Link relative to the media directory

        Raises:
            ValidationError: If the image is empty, too large or of an unsupported type
            ImageStorageError: If the file cannot be written
        """
        suffix = Path(filename or "").suffix.lower()
        if suffix not in ALLOWED_EXTENSIONS:
            raise ValidationError(f"Image type not supported: {suffix or filename!r}")

        if not data:
            raise ValidationError("Image is empty")

        if len(data) > self.max_image_size:
            raise ValidationError(
                f"Image exceeds maximum size of {self.max_image_size} bytes"
            )

        article_dir = self.images_dir / str(article_id)
        dest_path = article_dir / f"{uuid.uuid4().hex}{suffix}"

        try:
            article_dir.mkdir(parents=True, exist_ok=True)
            dest_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write image {dest_path}: {e}")
            raise ImageStorageError(f"Failed to store image: {e}")

        logger.info(f"Stored image for article {article_id}: {dest_path}")

        return dest_path.relative_to(self.media_dir).as_posix()

    def get_image_path(self, link: Optional[str]) -> Optional[Path]:
        """
        Resolve a stored link to an absolute image path.

        Args:
            link: Relative link stored in DB

        Returns:
            Absolute Path if image exists, None otherwise
        """
        if not link:
            return None

        abs_path = self.media_dir / link
        if abs_path.exists():
            return abs_path

        logger.warning(f"Image not found: {abs_path}")
        return None

    def delete_image(self, link: Optional[str]) -> bool:
        """
        Delete a stored image file.

        Args:
            link: Relative link stored in DB

        Returns:
            True if deleted successfully, False otherwise
        """
        abs_path = self.get_image_path(link)
        if abs_path is None:
            return False

        try:
            abs_path.unlink()
            logger.info(f"Deleted image: {abs_path}")
            return True

        except OSError as e:
            logger.error(f"Failed to delete image {abs_path}: {e}")
            return False
