from typing import Any

import pytest
from fastapi.testclient import TestClient

from config import Settings
from errors import StorageProviderError
from main import create_app
from api.files.dto.file import StoredResource


class FakeFilesRepository:
    """In-memory stand-in for the Cloudinary repository."""

    def __init__(self):
        self.uploads: list[dict[str, Any]] = []
        self.resources: list[dict[str, Any]] = []
        self.deleted: list[tuple[str, str]] = []
        self.fail_with: str | None = None

    async def upload(self, source, public_id: str, resource_type: str) -> StoredResource:
        if isinstance(source, str):
            with open(source, "rb") as f:
                data = f.read()
        else:
            data = source.read()
        self.uploads.append(
            {"public_id": public_id, "resource_type": resource_type, "data": data, "source": source}
        )
        if self.fail_with:
            raise StorageProviderError(self.fail_with)
        return StoredResource(
            public_id=public_id,
            secure_url=f"https://res.cloudinary.com/demo/{resource_type}/upload/{public_id}",
            resource_type=resource_type,
            format="png",
            size=len(data),
        )

    async def list_resources(self, max_results: int = 50) -> list[dict[str, Any]]:
        if self.fail_with:
            raise StorageProviderError(self.fail_with)
        return self.resources[:max_results]

    def thumbnail_url(self, public_id: str) -> str:
        return f"https://res.cloudinary.com/demo/image/upload/c_fill,h_100,w_100/{public_id}"

    async def destroy(self, public_id: str, resource_type: str = "image") -> bool:
        if self.fail_with:
            raise StorageProviderError(self.fail_with)
        self.deleted.append((public_id, resource_type))
        return any(r["public_id"] == public_id for r in self.resources)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(upload_dir):
    return Settings(
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key",
        CLOUDINARY_API_SECRET="secret",
        UPLOAD_TMP_DIR=str(upload_dir),
    )


@pytest.fixture
def repository():
    return FakeFilesRepository()


@pytest.fixture
def app(settings, repository):
    return create_app(settings, files_repository=repository)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def png_data() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
