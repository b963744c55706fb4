import json

import pytest

from html_docgen.cli import main


def run(capsys, *argv):
    code = main(list(argv))
    return code, json.loads(capsys.readouterr().out)


def test_create_list_get(settings_env, capsys):
    code, created = run(capsys, "--create", "My Report", "--html", "<h1>Hello World</h1>")
    assert code == 0
    document_id = created["document_id"]
    assert document_id.startswith("my-report-")
    assert (settings_env / document_id / "index.html").is_file()

    code, listed = run(capsys, "--list")
    assert code == 0
    assert listed["count"] == 1

    code, got = run(capsys, "--get", document_id)
    assert code == 0
    assert got["html_content"] == "<h1>Hello World</h1>"


def test_update_add_media_export_delete(settings_env, capsys, tmp_path):
    _, created = run(capsys, "--create", "Flow", "--html", "<p>1</p>")
    document_id = created["document_id"]

    code, _ = run(capsys, "--update", document_id, "--html", "<p>2</p>")
    assert code == 0

    src = tmp_path / "pic.png"
    src.write_bytes(b"png")
    code, media = run(capsys, "--add-media", document_id, "--media-path", str(src))
    assert code == 0
    assert media["relative_path"] == "media/pic.png"
    assert media["media_type"] == "image"

    target = tmp_path / "flow.html"
    code, exported = run(capsys, "--export", document_id, "--format", "html", "--output", str(target))
    assert code == 0
    assert target.read_text(encoding="utf-8") == "<p>2</p>"

    code, _ = run(capsys, "--delete", document_id)
    assert code == 0
    assert not (settings_env / document_id).exists()


def test_failed_operation_exits_1(settings_env, capsys):
    code, payload = run(capsys, "--get", "missing-0000")
    assert code == 1
    assert payload["status"] == "failed"
    assert payload["error_type"] == "NotFoundError"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["--create", "Sin HTML"],
        ["--update", "a-b"],
        ["--add-media", "a-b"],
        ["--export", "a-b", "--format", "odt"],
    ],
)
def test_usage_errors_exit_2(settings_env, argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    assert exc_info.value.code == 2
