import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_document_service, get_exporter
from api.main import app
from html_docgen.errors import RendererUnavailableError, RenderTimeoutError
from html_docgen.export import Exporter
from html_docgen.export.pdf_browser import BrowserPdfRenderer


class Failing:
    def __init__(self, name, error):
        self.name = name
        self.error = error

    def attempt(self, doc, output_path, service):
        raise self.error


@pytest.fixture
def exporter():
    return Exporter()


@pytest.fixture
def client(service, exporter):
    app.dependency_overrides[get_document_service] = lambda: service
    app.dependency_overrides[get_exporter] = lambda: exporter
    yield TestClient(app)
    app.dependency_overrides.clear()


def create(client, name="My Report", html="<h1>Hello</h1>"):
    response = client.post("/api/v1/documents", json={"name": name, "html_content": html})
    assert response.status_code == 201
    return response.json()


def test_health(client, settings_env):
    assert client.get("/").json()["status"] == "ok"

    body = client.get("/health").json()
    assert body["version"] == "0.1.0"
    assert body["pdf_renderers"] == ["browser", "pandoc"]
    assert isinstance(body["pandoc_available"], bool)


def test_create_and_get(client, service):
    created = create(client)
    assert created["id"].startswith("my-report-")
    assert created["file_path"] == str(service.get_html_path(created["id"]))

    response = client.get(f"/api/v1/documents/{created['id']}")
    assert response.status_code == 200
    assert response.json()["html_content"] == "<h1>Hello</h1>"


def test_list(client):
    create(client, name="Alpha")
    create(client, name="Beta")

    body = client.get("/api/v1/documents").json()
    assert body["count"] == 2
    assert [d["name"] for d in body["documents"]] == ["Alpha", "Beta"]
    assert body["documents"][0]["file_path"].endswith("/index.html")


def test_update(client):
    created = create(client)
    response = client.put(f"/api/v1/documents/{created['id']}", json={"html_content": "<p>nuevo</p>"})

    assert response.status_code == 200
    body = response.json()
    assert body["html_content"] == "<p>nuevo</p>"
    assert body["created_at"] == created["created_at"]


def test_delete(client):
    created = create(client)
    assert client.delete(f"/api/v1/documents/{created['id']}").status_code == 204
    assert client.get(f"/api/v1/documents/{created['id']}").status_code == 404


def test_not_found_and_invalid_id(client):
    assert client.get("/api/v1/documents/missing-0000").status_code == 404
    assert client.get("/api/v1/documents/nodash").status_code == 400


def test_request_validation(client):
    response = client.post("/api/v1/documents", json={"name": "", "html_content": "<p>x</p>"})
    assert response.status_code == 422


def test_add_media_from_path(client, tmp_path):
    created = create(client)
    src = tmp_path / "pic.png"
    src.write_bytes(b"png")

    response = client.post(
        f"/api/v1/documents/{created['id']}/media",
        json={"source_path": str(src), "media_type": "image"},
    )
    assert response.status_code == 200
    assert response.json()["relative_path"] == "media/pic.png"


def test_upload_media(client, service):
    created = create(client)
    response = client.post(
        f"/api/v1/documents/{created['id']}/media/upload",
        files={"file": ("clip.mp4", b"video-bytes", "video/mp4")},
        data={"media_type": "video"},
    )

    assert response.status_code == 200
    assert response.json()["relative_path"] == "media/clip.mp4"
    media_file = service.get_document_path(created["id"]) / "media" / "clip.mp4"
    assert media_file.read_bytes() == b"video-bytes"


def test_export_html(client, tmp_path):
    created = create(client)
    target = tmp_path / "out.html"

    response = client.post(
        f"/api/v1/documents/{created['id']}/export",
        json={"format": "html", "output_path": str(target)},
    )
    assert response.status_code == 200
    assert response.json()["output_path"] == str(target)
    assert target.read_text(encoding="utf-8") == "<h1>Hello</h1>"


def test_download_export(client):
    created = create(client)
    response = client.get(f"/api/v1/documents/{created['id']}/export/html")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.content == b"<h1>Hello</h1>"


def test_export_invalid_format(client):
    created = create(client)
    response = client.post(f"/api/v1/documents/{created['id']}/export", json={"format": "odt"})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "error, status_code",
    [
        (RendererUnavailableError("sin pandoc"), 503),
        (RenderTimeoutError("lento", timeout=1), 504),
    ],
)
def test_export_render_errors_map_to_http(service, error, status_code):
    exporter = Exporter(pdf_renderers=[Failing("stub", error)])
    app.dependency_overrides[get_document_service] = lambda: service
    app.dependency_overrides[get_exporter] = lambda: exporter
    try:
        client = TestClient(app)
        created = create(client)
        response = client.post(f"/api/v1/documents/{created['id']}/export", json={"format": "pdf"})
        assert response.status_code == status_code
    finally:
        app.dependency_overrides.clear()


def test_pdf_export_runs_outside_event_loop(fake_playwright, service, tmp_path):
    exporter = Exporter(pdf_renderers=[BrowserPdfRenderer(timeout=5)])
    app.dependency_overrides[get_document_service] = lambda: service
    app.dependency_overrides[get_exporter] = lambda: exporter
    try:
        client = TestClient(app)
        created = create(client)

        response = client.post(f"/api/v1/documents/{created['id']}/export", json={"format": "pdf"})
        assert response.status_code == 200
        assert response.json()["output_path"].endswith(".pdf")

        download = client.get(f"/api/v1/documents/{created['id']}/export/pdf")
        assert download.status_code == 200
        assert download.content == b"%PDF-1.7 chromium"
    finally:
        app.dependency_overrides.clear()
