import pytest

from html_docgen.config import build_exporter, build_service, ensure_root_dir, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SIMPLE_HTML_ROOT_DIR", str(tmp_path / "root"))
    monkeypatch.setenv("EXPORT_BROWSER_TIMEOUT", "12.5")
    monkeypatch.setenv("EXPORT_PANDOC_TIMEOUT", "45")
    monkeypatch.setenv("PDF_RENDERERS", "pandoc, weasyprint")
    monkeypatch.setenv("CHROME_PATH", "/opt/chrome")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com, http://localhost:3001,")

    settings = get_settings()

    assert settings.root_dir == str(tmp_path / "root")
    assert settings.browser_timeout == 12.5
    assert settings.pandoc_timeout == 45.0
    assert settings.pdf_renderers == ("pandoc", "weasyprint")
    assert settings.chrome_path == "/opt/chrome"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ("https://app.example.com", "http://localhost:3001")


def test_settings_defaults(monkeypatch, tmp_path):
    for name in (
        "SIMPLE_HTML_ROOT_DIR",
        "EXPORT_BROWSER_TIMEOUT",
        "EXPORT_PANDOC_TIMEOUT",
        "PDF_RENDERERS",
        "CHROME_PATH",
        "LOG_LEVEL",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    settings = get_settings()

    assert settings.root_dir == str(tmp_path / ".simple_html_docs")
    assert settings.browser_timeout == 30.0
    assert settings.pandoc_timeout == 30.0
    assert settings.pdf_renderers == ("browser", "pandoc")
    assert settings.cors_origins == ("http://localhost:3000",)


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("EXPORT_PANDOC_TIMEOUT", "rápido")
    with pytest.raises(ValueError):
        get_settings()


def test_ensure_root_dir_and_factories(monkeypatch, tmp_path):
    root = tmp_path / "nested" / "docs"
    monkeypatch.setenv("SIMPLE_HTML_ROOT_DIR", str(root))
    monkeypatch.setenv("PDF_RENDERERS", "pandoc")
    settings = get_settings()

    assert ensure_root_dir(settings) == root
    assert root.is_dir()

    service = build_service(settings)
    assert service.get_document_path("a-b") == root / "a-b"

    exporter = build_exporter(settings)
    assert [r.name for r in exporter.pdf_renderers] == ["pandoc"]
