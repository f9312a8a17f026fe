"""
Local copies of poster, cover and logo images.

When enabled in settings, images referenced by a record are downloaded into
the vault's images folder and the record's embed links are rebuilt to point
at the local files. A failed download keeps the remote reference.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import requests

from .config import KinonoteSettings
from .errors import ImageDownloadError
from .formatting import create_image_link, replace_illegal_file_name_characters
from .i18n import MessageCatalog
from .movie_show import MovieShow

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_SECONDS = 10
MAX_DOWNLOAD_ATTEMPTS = 2
RETRY_DELAY_SECONDS = 1.0

SUPPORTED_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg", "bmp")

MIME_TO_EXTENSION = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/bmp": "bmp",
}

# image type -> (settings flag, url field, link field)
IMAGE_KINDS: Dict[str, Tuple[str, str, str]] = {
    "poster": ("save_poster_image", "poster_url", "poster_image_link"),
    "cover": ("save_cover_image", "cover_url", "cover_image_link"),
    "logo": ("save_logo_image", "logo_url", "logo_image_link"),
}

ProgressCallback = Callable[[int, int, str], None]


def is_valid_image_url(url: Optional[str]) -> bool:
    """http(s) URL with a host."""
    if not url or not url.strip():
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def get_image_extension(url: str, mime_type: Optional[str] = None) -> str:
    """Pick an extension from the MIME type, then the URL suffix, else jpg."""
    if mime_type:
        extension = MIME_TO_EXTENSION.get(mime_type.split(";")[0].strip().lower())
        if extension:
            return extension

    url_extension = url.rsplit(".", 1)[-1].lower() if "." in url else ""
    if url_extension in SUPPORTED_EXTENSIONS:
        return url_extension

    return "jpg"


def create_image_file_name(
    record: MovieShow, image_type: str, extension: str, messages: Optional[MessageCatalog] = None
) -> str:
    """Name an image after its record, e.g. ``Inception_2010_poster.jpg``."""
    unknown = (messages or MessageCatalog()).lookup("utils.unknownMovie")
    base_name = f"{record.name_for_file or unknown}_{record.year or unknown}_{image_type}"
    return f"{replace_illegal_file_name_characters(base_name)}.{extension}"


class ImageProcessor:
    """Downloads images into the vault and relinks records to them."""

    def __init__(
        self,
        vault_root: Path,
        messages: Optional[MessageCatalog] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.vault_root = Path(vault_root)
        self.messages = messages or MessageCatalog()
        self.session = session or requests.Session()
        self.sleep = sleep

    def _status_error(self, status: int, url: str) -> ImageDownloadError:
        if status == 404:
            message = self.messages.lookup_with_params("images.imageNotFound", {"url": url})
        elif status == 403:
            message = self.messages.lookup_with_params("images.accessForbidden", {"url": url})
        elif status >= 500:
            message = self.messages.lookup_with_params("images.serverError", {"status": status, "url": url})
        else:
            message = self.messages.lookup_with_params("images.httpError", {"status": status, "url": url})
        return ImageDownloadError(message)

    def _fetch(self, url: str) -> Tuple[bytes, Optional[str]]:
        try:
            response = self.session.get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
        except requests.exceptions.Timeout as e:
            message = self.messages.lookup_with_params("images.timeout", {"timeout": DOWNLOAD_TIMEOUT_SECONDS})
            raise ImageDownloadError(message, is_network_error=True) from e
        except requests.exceptions.ConnectionError as e:
            message = self.messages.lookup_with_params("images.downloadFailed", {"url": url})
            raise ImageDownloadError(message, is_network_error=True) from e

        if response.status_code != 200:
            raise self._status_error(response.status_code, url)

        return response.content, response.headers.get("content-type")

    def download_image(self, url: str) -> Tuple[bytes, Optional[str]]:
        """
        Download an image, retrying once on network errors.

        Returns:
            Tuple of (image bytes, MIME type or None)

        Raises:
            ImageDownloadError: If the URL is invalid or all attempts fail
        """
        if not is_valid_image_url(url):
            raise ImageDownloadError(self.messages.lookup_with_params("images.invalidUrl", {"url": url}))

        for attempt in range(1, MAX_DOWNLOAD_ATTEMPTS + 1):
            try:
                return self._fetch(url)
            except ImageDownloadError as e:
                logger.warning(f"Failed to download image (attempt {attempt}/{MAX_DOWNLOAD_ATTEMPTS}): {url}: {e}")
                if attempt == MAX_DOWNLOAD_ATTEMPTS or not e.is_network_error:
                    logger.error(f"Failed to download image after {attempt} attempts: {url}")
                    raise
                self.sleep(RETRY_DELAY_SECONDS)

        raise ImageDownloadError(self.messages.lookup_with_params("images.downloadFailed", {"url": url}))

    def save_image(self, data: bytes, folder: str, file_name: str) -> str:
        """Write image bytes under the vault; returns the vault-relative path."""
        target_dir = self.vault_root / folder
        target_dir.mkdir(parents=True, exist_ok=True)

        target = target_dir / file_name
        counter = 1
        while target.exists():
            target = target_dir / f"{Path(file_name).stem}_{counter}{Path(file_name).suffix}"
            counter += 1

        target.write_bytes(data)
        logger.debug(f"Saved image to {target}")
        return target.relative_to(self.vault_root).as_posix()

    def download_and_save(self, url: str, record: MovieShow, image_type: str, folder: str) -> str:
        """Download one image and return its vault-relative path."""
        if not is_valid_image_url(url):
            return url

        data, mime_type = self.download_image(url)
        extension = get_image_extension(url, mime_type)
        file_name = create_image_file_name(record, image_type, extension, self.messages)
        return self.save_image(data, folder, file_name)

    def _pending(self, record: MovieShow, settings: KinonoteSettings) -> List[Tuple[str, str, str]]:
        pending = []
        for image_type, (flag, url_field, link_field) in IMAGE_KINDS.items():
            urls = getattr(record, url_field)
            if getattr(settings, flag) and urls and urls[0]:
                pending.append((image_type, urls[0], link_field))
        return pending

    def process_images(
        self,
        record: MovieShow,
        settings: KinonoteSettings,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> MovieShow:
        """
        Download the images enabled in settings.

        Args:
            record: Normalized record
            settings: Image settings (local saving, folder, per-image flags)
            progress_callback: Called with (current, total, message)

        Returns:
            A copy of the record with image links rebuilt, or the record itself
            when local saving is disabled or nothing is downloadable
        """
        if not settings.save_images_locally:
            return record

        pending = self._pending(record, settings)
        total = sum(1 for _, url, _ in pending if is_valid_image_url(url))

        if total == 0:
            if progress_callback:
                progress_callback(0, 0, self.messages.lookup("images.noImagesToDownload"))
            return record

        updates: Dict[str, List[str]] = {}
        processed = successful = failed = 0

        for image_type, url, link_field in pending:
            if not is_valid_image_url(url):
                # Already a local file
                updates[link_field] = create_image_link(url)
                continue

            if progress_callback:
                image_name = self.messages.lookup(f"images.{image_type}")
                progress_callback(processed + 1, total, f"{self.messages.lookup('images.downloading')} {image_name}...")

            try:
                local_path = self.download_and_save(url, record, image_type, settings.images_folder)
                updates[link_field] = create_image_link(local_path)
                successful += 1
            except (ImageDownloadError, OSError) as e:
                logger.warning(f"{self.messages.lookup('images.downloadError')} {image_type}: {e}")
                updates[link_field] = create_image_link(url)
                failed += 1
            processed += 1

        if progress_callback:
            if failed:
                message = self.messages.lookup_with_params(
                    "images.completedWithErrors", {"successful": successful, "failed": failed}
                )
            elif successful:
                message = self.messages.lookup("images.completedAllDownloaded")
            else:
                message = self.messages.lookup("images.completedAlreadyLocal")
            progress_callback(total, total, message)

        if failed:
            if successful:
                logger.warning(
                    self.messages.lookup_with_params(
                        "images.downloadedWithErrors", {"successful": successful, "total": total}
                    )
                )
            else:
                logger.warning(self.messages.lookup("images.imagesUnavailable"))

        return record.model_copy(update=updates)
