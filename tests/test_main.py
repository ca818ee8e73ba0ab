from fastapi.testclient import TestClient

from config import Settings
from main import create_app


def test_health_reports_configured(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "OK",
        "message": "Server running",
        "cloudinary": {"cloud_name": "Configured"},
    }


def test_health_reports_missing_configuration(repository):
    app = create_app(Settings(CLOUDINARY_CLOUD_NAME=""), files_repository=repository)

    response = TestClient(app).get("/health")

    assert response.json()["cloudinary"]["cloud_name"] == "Not configured"


def test_test_upload_endpoint(client):
    data = client.get("/test-upload").json()

    assert data["message"] == "Upload endpoint working"
    assert "timestamp" in data


def test_index_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "<title>Cloud QR</title>" in response.text
    assert 'id="uploadForm"' in response.text
    assert 'class="desktop"' in response.text
    assert '<div id="qrContainer" class="hidden">' in response.text
    assert '<div id="noQR">' in response.text


def test_index_page_detects_mobile(client):
    response = client.get(
        "/", headers={"User-Agent": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)"}
    )

    assert 'class="mobile"' in response.text


def test_static_assets_served(client):
    response = client.get("/static/js/main.js")

    assert response.status_code == 200
    assert "generateCustomQR" in response.text


def test_unhandled_errors_return_generic_500(app):
    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}
