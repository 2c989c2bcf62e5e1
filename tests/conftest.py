"""Pytest configuration and shared fixtures for docsan tests."""

from pathlib import Path

import pytest

SAMPLE_DOCUMENT = """<html><head><title>Tax &amp; Treaties</title>
<meta name="docid" content="evdeudir_2006_112">
<meta name="secret" content="hidden">
<meta charset="utf-8">
<script id="outline">{"chapters": [1, 2]}</script>
<script id="tables">[{"id": "t1"}]</script>
<script id="script_toc">var toc = 1;</script>
<script src="app.js" type="text/javascript"></script>
<link rel="stylesheet" href="style.css">
</head><body class="doc"><div class="annotatable" id="s1"><p>Text</p></div>\
<script>alert(1)</script>\
<table class="chapter-table"><tr><td>1</td></tr></table>\
<a onclick="go()">x</a>\
<button class="dyncal-button" onclick="calc()">c</button>\
<p class="compare-to">Compare</p></body></html>"""


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure logic tests with no I/O or network")
    config.addinivalue_line("markers", "integration: Filesystem or in-process HTTP tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests running the installed command")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Apply default markers to tests without explicit markers.

    Unmarked tests default to unit.
    """
    for item in items:
        marker_names = [m.name for m in item.iter_markers()]
        if any(m in marker_names for m in ("unit", "integration", "e2e")):
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def sample_html() -> str:
    """A document exercising every pipeline step."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_file(tmp_path: Path, sample_html: str) -> Path:
    """Write the sample document to a temporary file.

    Args:
        tmp_path: Pytest temporary directory.
        sample_html: Sample document.

    Returns:
        Path to the HTML file.
    """
    path = tmp_path / "chapter.html"
    path.write_text(sample_html, encoding="utf-8")
    return path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run in an empty directory with no docsan environment variables set."""
    for name in ("PORT", "DOCSAN_PORT", "DOCSAN_META_TAGS", "DOCSAN_LOG_LEVEL", "DOCSAN_JSON_PRETTY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
