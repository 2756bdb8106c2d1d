import os
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError
from PIL.Image import DecompressionBombError

from core.config import settings

logger = logging.getLogger(__name__)

IMAGE_TYPES = ('edition', 'author')

class ImageCache:
    def __init__(
        self,
        base_dir: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15
    ):
        """Initialize the image cache with a base directory.
        Relative paths are resolved against the current working directory."""
        self.base_dir = Path(base_dir or settings.image_dir)
        self.session = session or requests.Session()
        self.timeout = timeout

    def _create_directory(self, image_type: str) -> Path:
        """Create and return the directory for the image type"""
        directory = self.base_dir / image_type
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def _process_image(self, image_data: bytes, max_height: int = 500) -> bytes:
        """Re-encode the image as JPEG and cap its height.

        Args:
            image_data: Raw image bytes
            max_height: Maximum height in pixels (default: 500)

        Returns:
            Processed image as bytes
        """
        img = Image.open(BytesIO(image_data))

        if img.mode in ('RGBA', 'P', 'LA'):
            img = img.convert('RGB')

        if img.height > max_height:
            ratio = max_height / img.height
            img = img.resize((int(img.width * ratio), max_height), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format='JPEG', quality=85, optimize=True)
        return output.getvalue()

    def _file_name(self, url: str) -> str:
        """Covers URLs end in <id or olid>-<size>.jpg, which is unique per image"""
        name = Path(urlparse(url).path).name
        return name if name.lower().endswith('.jpg') else f"{name}.jpg"

    def cache_image(self, image_type: str, url: Optional[str], force_update: bool = False) -> Tuple[str, Optional[str]]:
        """
        Download an image into the local cache unless it is already there

        Args:
            image_type: 'edition' for covers, 'author' for author pictures
            url: Remote image URL
            force_update: If True, download even if file exists

        Returns:
            Tuple of (status, local_path) where status is 'cached', 'downloaded',
            'skipped' or 'failed'
        """
        if image_type not in IMAGE_TYPES:
            raise ValueError(f"Invalid image type '{image_type}'")
        if not url:
            return 'skipped', None

        file_path = self._create_directory(image_type) / self._file_name(url)
        if file_path.exists() and not force_update:
            return 'cached', str(file_path)

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Image download failed for {url}: {e}")
            return 'failed', None

        # Open Library answers missing covers with a tiny placeholder
        if len(response.content) < 100:
            logger.warning(f"Image at {url} is empty or a placeholder")
            return 'failed', None

        try:
            processed = self._process_image(response.content)
        except (UnidentifiedImageError, DecompressionBombError, OSError) as e:
            logger.warning(f"Image at {url} could not be decoded: {e}")
            return 'failed', None

        # Write-then-rename
        tmp_path = file_path.with_suffix('.jpg.tmp')
        with open(tmp_path, 'wb') as f:
            f.write(processed)
        os.replace(tmp_path, file_path)
        logger.info(f"Cached {image_type} image {file_path}")
        return 'downloaded', str(file_path)
