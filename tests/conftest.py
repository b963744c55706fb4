import asyncio
import sys
import types
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

import pytest

from html_docgen.config import get_settings
from html_docgen.document_service import DocumentService
from html_docgen.storage import FileSystemStorage, InMemoryStorage


@pytest.fixture
def root_dir(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture
def storage(root_dir):
    return FileSystemStorage(root_dir)


@pytest.fixture
def service(storage):
    return DocumentService(storage)


@pytest.fixture
def memory_service():
    return DocumentService(InMemoryStorage())


@pytest.fixture
def settings_env(monkeypatch, root_dir):
    """Apunta la configuración cacheada a un root temporal."""
    monkeypatch.setenv("SIMPLE_HTML_ROOT_DIR", str(root_dir))
    monkeypatch.setenv("PDF_RENDERERS", "browser,pandoc")
    get_settings.cache_clear()
    yield root_dir
    get_settings.cache_clear()


# ============================================================
# Playwright falso (sin Chromium)
# ============================================================

class FakePlaywrightError(Exception):
    pass


class FakePlaywrightTimeoutError(FakePlaywrightError):
    pass


@dataclass
class FakeBrowserState:
    """Qué debe fallar y qué se llamó durante un intento de render."""

    Error = FakePlaywrightError
    TimeoutError = FakePlaywrightTimeoutError

    start_error: Optional[Exception] = None
    launch_error: Optional[Exception] = None
    goto_error: Optional[Exception] = None
    pdf_error: Optional[Exception] = None
    pdf_bytes: bytes = b"%PDF-1.7 chromium"
    # igual que Playwright real: la API sync no arranca dentro de un event loop
    reject_in_event_loop: bool = True

    launch_kwargs: Dict[str, Any] = field(default_factory=dict)
    pdf_options: Dict[str, Any] = field(default_factory=dict)
    visited: List[str] = field(default_factory=list)
    html_at_goto: Optional[str] = None
    closed: bool = False
    stopped: bool = False


class _FakePage:
    def __init__(self, state):
        self.state = state

    def set_default_timeout(self, timeout):
        pass

    def goto(self, url, wait_until=None, timeout=None):
        self.state.visited.append(url)
        self.state.html_at_goto = Path(unquote(urlparse(url).path)).read_text(encoding="utf-8")
        if self.state.goto_error is not None:
            raise self.state.goto_error

    def pdf(self, **options):
        self.state.pdf_options = options
        if self.state.pdf_error is not None:
            raise self.state.pdf_error
        return self.state.pdf_bytes


class _FakeBrowser:
    def __init__(self, state):
        self.state = state

    def new_page(self):
        return _FakePage(self.state)

    def close(self):
        self.state.closed = True


class _FakeChromium:
    def __init__(self, state):
        self.state = state

    def launch(self, **kwargs):
        self.state.launch_kwargs = kwargs
        if self.state.launch_error is not None:
            raise self.state.launch_error
        return _FakeBrowser(self.state)


class _FakePlaywright:
    def __init__(self, state):
        self.state = state
        self.chromium = _FakeChromium(state)

    def stop(self):
        self.state.stopped = True


class _FakeSyncPlaywright:
    def __init__(self, state):
        self.state = state

    def start(self):
        if self.state.reject_in_event_loop:
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                pass
            else:
                raise FakePlaywrightError(
                    "It looks like you are using Playwright Sync API inside the asyncio loop."
                )
        if self.state.start_error is not None:
            raise self.state.start_error
        return _FakePlaywright(self.state)


@pytest.fixture
def fake_playwright(monkeypatch):
    """Reemplaza `playwright.sync_api` por un doble controlable."""
    state = FakeBrowserState()
    module = types.ModuleType("playwright.sync_api")
    module.Error = FakePlaywrightError
    module.TimeoutError = FakePlaywrightTimeoutError
    module.sync_playwright = lambda: _FakeSyncPlaywright(state)
    monkeypatch.setitem(sys.modules, "playwright.sync_api", module)
    return state

