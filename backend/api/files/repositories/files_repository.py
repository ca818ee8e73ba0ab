"""Files repository — data access layer backed by Cloudinary.

The SDK is blocking, so every call is pushed to Starlette's thread pool.
Credentials are passed explicitly on each call instead of through the SDK's
global ``cloudinary.config()``.
"""

import logging
from typing import Any, BinaryIO

import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader
import cloudinary.utils
from fastapi.concurrency import run_in_threadpool

from config import Settings
from errors import StorageProviderError
from api.files.dto.file import StoredResource

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("image", "video", "raw")


def _to_stored_resource(result: dict[str, Any]) -> StoredResource:
    return StoredResource(
        public_id=result["public_id"],
        secure_url=result["secure_url"],
        resource_type=result.get("resource_type", "raw"),
        format=result.get("format"),
        size=result.get("bytes"),
        created_at=result.get("created_at"),
    )


class FilesRepository:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _credentials(self) -> dict[str, str]:
        if not self.settings.cloudinary_configured:
            raise StorageProviderError("Cloudinary is not configured")
        return {
            "cloud_name": self.settings.CLOUDINARY_CLOUD_NAME,
            "api_key": self.settings.CLOUDINARY_API_KEY,
            "api_secret": self.settings.CLOUDINARY_API_SECRET,
        }

    async def upload(
        self, source: str | BinaryIO, public_id: str, resource_type: str
    ) -> StoredResource:
        """Upload a file path or file-like object and return the stored resource."""
        credentials = self._credentials()
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.upload,
                source,
                resource_type=resource_type,
                public_id=public_id,
                overwrite=False,
                **credentials,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload failed for {public_id}: {e}")
            raise StorageProviderError(str(e)) from e
        return _to_stored_resource(result)

    async def list_resources(self, max_results: int = 50) -> list[dict[str, Any]]:
        """Most recent uploads across all resource types, newest first."""
        credentials = self._credentials()
        resources: list[dict[str, Any]] = []
        for resource_type in RESOURCE_TYPES:
            try:
                result = await run_in_threadpool(
                    cloudinary.api.resources,
                    resource_type=resource_type,
                    type="upload",
                    max_results=max_results,
                    direction="desc",
                    **credentials,
                )
            except cloudinary.exceptions.Error as e:
                logger.error(f"Cloudinary listing failed for {resource_type}: {e}")
                raise StorageProviderError(str(e)) from e
            resources.extend(result.get("resources", []))

        resources.sort(key=lambda r: r.get("created_at") or "", reverse=True)
        return resources[:max_results]

    def thumbnail_url(self, public_id: str) -> str:
        url, _ = cloudinary.utils.cloudinary_url(
            public_id,
            width=100,
            height=100,
            crop="fill",
            secure=True,
            cloud_name=self.settings.CLOUDINARY_CLOUD_NAME,
        )
        return url

    async def destroy(self, public_id: str, resource_type: str = "image") -> bool:
        """Delete a resource. Returns False when the provider does not know it."""
        credentials = self._credentials()
        try:
            result = await run_in_threadpool(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=resource_type,
                invalidate=True,
                **credentials,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary delete failed for {public_id}: {e}")
            raise StorageProviderError(str(e)) from e

        outcome = result.get("result")
        if outcome == "ok":
            return True
        if outcome == "not found":
            return False
        raise StorageProviderError(f"Unexpected delete result: {outcome}")
