import re

import pytest

from html_docgen import idgen
from html_docgen.idgen import generate_document_id, slugify_name, validate_document_id

ID_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*-[0-9a-f]{4}$")


def never_exists(_document_id):
    return False


def test_generate_id_from_simple_name():
    document_id = generate_document_id("My Report", never_exists)
    assert document_id.startswith("my-report-")
    assert ID_PATTERN.match(document_id)
    assert validate_document_id(document_id)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("My Report", "my-report"),
        ("  Hello   World  ", "hello-world"),
        ("Café à Paris", "cafe-a-paris"),
        ("Q3 -- Sales__Summary", "q3-sales-summary"),
        ("!!!", ""),
    ],
)
def test_slugify_name(name, expected):
    assert slugify_name(name) == expected


def test_slug_is_truncated_to_30_chars():
    name = "a very long document name that goes well beyond thirty characters"
    document_id = generate_document_id(name, never_exists)
    slug, suffix = document_id[:-5], document_id[-4:]
    assert len(slug) == 30
    assert document_id[-5] == "-"
    assert re.fullmatch(r"[0-9a-f]{4}", suffix)
    assert len(document_id) == 35
    assert validate_document_id(document_id)


@pytest.mark.parametrize("name", ["!!!", "", "日本語"])
def test_empty_slug_falls_back_to_document(name):
    document_id = generate_document_id(name, never_exists)
    assert re.fullmatch(r"document-[0-9a-f]{4}", document_id)


def test_generated_ids_are_unique_against_existing():
    taken = set()
    for _ in range(1000):
        document_id = generate_document_id("Report", taken.__contains__)
        assert document_id not in taken
        taken.add(document_id)
    assert len(taken) == 1000


def test_retries_on_collision(monkeypatch):
    suffixes = iter(["aaaa", "aaaa", "bbbb"])
    monkeypatch.setattr(idgen, "_random_suffix", lambda: next(suffixes))
    document_id = generate_document_id("Report", lambda candidate: candidate == "report-aaaa")
    assert document_id == "report-bbbb"


def test_fallback_to_long_suffix_after_max_attempts():
    calls = []

    def always_exists(candidate):
        calls.append(candidate)
        return True

    document_id = generate_document_id("Report", always_exists)
    assert len(calls) == idgen.MAX_ATTEMPTS
    assert re.fullmatch(r"report-[0-9a-f]{8}", document_id)


def test_random_suffix_falls_back_when_secrets_fails(monkeypatch):
    def broken(_n):
        raise OSError("sin entropía")

    monkeypatch.setattr(idgen.secrets, "token_hex", broken)
    suffix = idgen._random_suffix()
    assert re.fullmatch(r"[0-9a-f]{4}", suffix)


@pytest.mark.parametrize(
    "document_id, valid",
    [
        ("my-report-a3f9", True),
        ("a-b", True),
        ("x" * 30 + "-abcd", True),
        ("x" * 31 + "-abcd", False),
        ("", False),
        ("nodash", False),
    ],
)
def test_validate_document_id(document_id, valid):
    assert validate_document_id(document_id) is valid
