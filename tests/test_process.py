import sys

import pytest

from html_docgen.errors import RendererUnavailableError, RenderFailureError, RenderTimeoutError, StorageIOError
from html_docgen.export.process import TEMP_HTML_NAME, run_bounded, temporary_html


def test_run_bounded_returns_stderr():
    stderr = run_bounded([sys.executable, "-c", "import sys; sys.stderr.write('aviso')"])
    assert stderr == "aviso"


def test_run_bounded_nonzero_exit_includes_stderr():
    with pytest.raises(RenderFailureError) as exc_info:
        run_bounded([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])

    assert exc_info.value.stderr == "boom"
    assert "código 3" in str(exc_info.value)
    assert "STDERR" in str(exc_info.value)


def test_run_bounded_kills_on_timeout():
    with pytest.raises(RenderTimeoutError) as exc_info:
        run_bounded([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)
    assert exc_info.value.timeout == 0.5


def test_run_bounded_missing_binary():
    with pytest.raises(RendererUnavailableError):
        run_bounded(["definitely-not-an-installed-binary-7f3a"])


def test_run_bounded_uses_cwd(tmp_path):
    (tmp_path / "marker.txt").write_text("ok", encoding="utf-8")
    stderr = run_bounded(
        [sys.executable, "-c", "import sys; sys.stderr.write(open('marker.txt').read())"],
        cwd=tmp_path,
    )
    assert stderr == "ok"


def test_temporary_html_is_removed_after_block(tmp_path):
    with temporary_html(tmp_path, "<p>x</p>") as path:
        assert path == tmp_path / TEMP_HTML_NAME
        assert path.read_text(encoding="utf-8") == "<p>x</p>"
    assert not path.exists()


def test_temporary_html_is_removed_on_error(tmp_path):
    with pytest.raises(RuntimeError):
        with temporary_html(tmp_path, "<p>x</p>"):
            raise RuntimeError("falló el render")
    assert not (tmp_path / TEMP_HTML_NAME).exists()


def test_temporary_html_unwritable_directory(tmp_path):
    with pytest.raises(StorageIOError):
        with temporary_html(tmp_path / "no-existe", "<p>x</p>"):
            pass


def test_temporary_html_writes_exact_bytes(tmp_path):
    with temporary_html(tmp_path, "<p>a</p>\r\n<p>b</p>\r") as path:
        assert path.read_bytes() == b"<p>a</p>\r\n<p>b</p>\r"
