import pytest

from api.files.services import files_service


def _resources():
    return [
        {
            "public_id": "qr-generator/2-photo_png",
            "secure_url": "https://res.cloudinary.com/demo/image/upload/qr-generator/2-photo_png.png",
            "resource_type": "image",
            "format": "png",
            "bytes": 1024,
            "created_at": "2024-05-02T10:00:00Z",
        },
        {
            "public_id": "qr-generator/1-report_pdf",
            "secure_url": "https://res.cloudinary.com/demo/raw/upload/qr-generator/1-report_pdf",
            "resource_type": "raw",
            "bytes": 2560,
            "created_at": "2024-05-01T10:00:00Z",
        },
    ]


def test_files_page_lists_resources(client, repository):
    repository.resources = _resources()

    response = client.get("/files")

    assert response.status_code == 200
    assert "qr-generator/2-photo_png" in response.text
    assert "qr-generator/1-report_pdf" in response.text
    assert "1.00 KB" in response.text
    assert "2.50 KB" in response.text
    assert "c_fill,h_100,w_100" in response.text


def test_files_page_degrades_on_provider_error(client, repository):
    repository.fail_with = "Invalid credentials"

    response = client.get("/files")

    assert response.status_code == 200
    assert "Error loading files" in response.text


def test_api_files_projects_summaries(client, repository):
    repository.resources = _resources()

    response = client.get("/api/files")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    image, raw = data["files"]
    assert image["publicId"] == "qr-generator/2-photo_png"
    assert image["type"] == "image"
    assert image["size"] == "1.00 KB"
    assert image["createdAt"] == "2024-05-02T10:00:00Z"
    assert image["thumbnail"].endswith("qr-generator/2-photo_png")
    assert raw["thumbnail"] is None
    assert raw["format"] is None


def test_api_files_reports_provider_error(client, repository):
    repository.fail_with = "Invalid credentials"

    response = client.get("/api/files")

    assert response.status_code == 200
    assert response.json() == {"success": False, "files": [], "error": "Error loading files"}


def test_listing_respects_page_size(settings, client, repository):
    settings.FILES_PAGE_SIZE = 1
    repository.resources = _resources()

    response = client.get("/api/files")

    assert len(response.json()["files"]) == 1


@pytest.mark.anyio
async def test_list_files_never_raises_on_provider_error(repository):
    repository.fail_with = "timeout"

    listing = await files_service.list_files(repository)

    assert listing.files == []
    assert listing.error == "Error loading files"


def test_delete_file(client, repository):
    repository.resources = _resources()

    response = client.post(
        "/delete-file", json={"publicId": "qr-generator/1-report_pdf", "resourceType": "raw"}
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert repository.deleted == [("qr-generator/1-report_pdf", "raw")]


def test_delete_file_defaults_to_image(client, repository):
    repository.resources = _resources()

    client.post("/delete-file", json={"publicId": "qr-generator/2-photo_png"})

    assert repository.deleted == [("qr-generator/2-photo_png", "image")]


def test_delete_missing_file(client):
    response = client.post("/delete-file", json={"publicId": "qr-generator/missing"})

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "File not found"}


def test_delete_file_provider_error(client, repository):
    repository.fail_with = "Rate limited"

    response = client.post("/delete-file", json={"publicId": "qr-generator/x"})

    assert response.status_code == 500
    assert response.json()["error"] == "Error deleting file: Rate limited"


def test_delete_file_rejects_unknown_resource_type(client, repository):
    response = client.post("/delete-file", json={"publicId": "x", "resourceType": "folder"})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert repository.deleted == []


def test_files_page_keeps_resource_values_out_of_inline_scripts(client, repository):
    repository.resources = [
        {
            "public_id": "qr-generator/x');alert(1);//",
            "secure_url": "https://res.cloudinary.com/demo/raw/upload/a');alert(1);//",
            "resource_type": "raw",
            "bytes": 10,
        }
    ]

    response = client.get("/files")

    assert response.status_code == 200
    assert "onclick=\"deleteFile(" not in response.text
    assert "onclick=\"copyFileUrl(" not in response.text
    assert 'data-public-id="qr-generator/x&#39;);alert(1);//"' in response.text
    assert 'data-url="https://res.cloudinary.com/demo/raw/upload/a&#39;);alert(1);//"' in response.text
