# marketplace/services/image_client.py
import io
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from marketplace.domain.errors import UpstreamError
from marketplace.domain.numbers import random_base36
from marketplace.utils import settings
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

# limit to 800x600 with auto quality, then auto format
UPLOAD_TRANSFORMATION = [
    {"width": 800, "height": 600, "crop": "limit", "quality": "auto"},
    {"fetch_format": "auto"},
]
MAX_PARALLEL_UPLOADS = 4


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ImageClient:
    """
    Client for the hosted image service (Cloudinary SDK).
    No retries: a failed upload fails the calling request.
    """

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        folder: str | None = None,
        timeout: int | None = None,
    ):
        self.cloud_name = cloud_name if cloud_name is not None else settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key if api_key is not None else settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.CLOUDINARY_API_SECRET
        self.folder = folder or settings.IMAGE_FOLDER
        self.timeout = timeout or settings.IMAGE_UPLOAD_TIMEOUT

        if self.configured:
            cloudinary.config(
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
                secure=True,
            )

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, image: ImageUpload) -> dict:
        if not self.configured:
            raise UpstreamError("Image service is not configured")

        public_id = f"product_{time.time_ns() // 1_000_000}_{random_base36(13).lower()}"
        logger.info(f"Uploading image {image.filename} as {public_id}")
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(image.content),
                folder=self.folder,
                public_id=public_id,
                transformation=UPLOAD_TRANSFORMATION,
                resource_type="image",
                timeout=self.timeout,
            )
            return {
                "url": result["secure_url"],
                "public_id": result["public_id"],
                "width": result.get("width"),
                "height": result.get("height"),
                "format": result.get("format"),
            }
        except CloudinaryError as e:
            logger.error(f"Image upload failed for {image.filename}: {e}")
            raise UpstreamError("Failed to upload image") from e
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Image upload for {image.filename} returned an unexpected response: {e!r}")
            raise UpstreamError("Failed to upload image") from e

    def upload_many(self, images: list[ImageUpload]) -> list[dict]:
        """Uploads in parallel and keeps input order. All or nothing."""
        if not images:
            return []
        if len(images) == 1:
            return [self.upload(images[0])]

        with ThreadPoolExecutor(max_workers=min(len(images), MAX_PARALLEL_UPLOADS)) as pool:
            futures = [pool.submit(self.upload, img) for img in images]

        uploaded, failed = [], None
        for fut in futures:
            try:
                uploaded.append(fut.result())
            except Exception as e:
                failed = failed or e

        if failed:
            # don't leave half a gallery behind on the image host
            self.delete_many([img["public_id"] for img in uploaded])
            if isinstance(failed, UpstreamError):
                raise UpstreamError("Failed to upload images") from failed
            raise failed
        return uploaded

    def delete(self, public_id: str) -> None:
        try:
            result = cloudinary.uploader.destroy(public_id, invalidate=True, timeout=self.timeout)
        except CloudinaryError as e:
            raise UpstreamError(f"Failed to delete image {public_id}") from e
        if result.get("result") not in ("ok", "not found"):
            raise UpstreamError(f"Failed to delete image {public_id}: {result.get('result')}")

    def delete_many(self, public_ids: list[str]) -> list[str]:
        """Best effort; returns the ids that could not be deleted."""
        if not public_ids:
            return []
        if not self.configured:
            logger.warning(f"Image service is not configured, leaving {len(public_ids)} image(s) in place")
            return list(public_ids)

        with ThreadPoolExecutor(max_workers=min(len(public_ids), MAX_PARALLEL_UPLOADS)) as pool:
            futures = {pid: pool.submit(self.delete, pid) for pid in public_ids}

        failed = []
        for pid, fut in futures.items():
            try:
                fut.result()
            except UpstreamError as e:
                logger.warning(f"{e}; continuing")
                failed.append(pid)
        return failed
