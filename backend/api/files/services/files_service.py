"""Files service — listing and deleting stored resources."""

import logging
from typing import Any

from errors import StorageProviderError
from api.files.dto.file import FileListing, FileSummary
from api.files.repositories.files_repository import FilesRepository

logger = logging.getLogger(__name__)


def format_kb(size: int | None) -> str:
    if size is None:
        return "N/A"
    return f"{size / 1024:.2f} KB"


def _to_summary(resource: dict[str, Any], repository: FilesRepository) -> FileSummary:
    kind = resource.get("resource_type", "raw")
    return FileSummary(
        public_id=resource["public_id"],
        url=resource.get("secure_url", ""),
        type=kind,
        format=resource.get("format"),
        size=format_kb(resource.get("bytes")),
        created_at=resource.get("created_at"),
        thumbnail=repository.thumbnail_url(resource["public_id"]) if kind == "image" else None,
    )


async def list_files(repository: FilesRepository, limit: int = 50) -> FileListing:
    """Never raises on provider failure; the error is reported in the listing."""
    try:
        resources = await repository.list_resources(max_results=limit)
    except StorageProviderError as e:
        logger.error(f"Error fetching files: {e.message}")
        return FileListing(files=[], error="Error loading files")

    return FileListing(files=[_to_summary(r, repository) for r in resources])


async def delete_file(
    repository: FilesRepository, public_id: str, resource_type: str = "image"
) -> bool:
    deleted = await repository.destroy(public_id, resource_type=resource_type)
    if deleted:
        logger.info(f"Deleted {resource_type} resource {public_id}")
    return deleted
