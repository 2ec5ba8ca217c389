"""Tests for the frontend template shipped with the package.

The assertions read the repository's actual ``index.html`` so that breaking
the element ids or API paths the page script relies on is caught.
"""

from __future__ import annotations

from pathlib import Path


def _template() -> str:
    template_path = (
        Path(__file__).resolve().parents[2] / "src" / "pixelprompt" / "templates" / "index.html"
    )
    return template_path.read_text(encoding="utf-8")


def test_index_template_includes_generator_controls() -> None:
    html = _template()

    assert 'id="prompt"' in html
    assert 'id="style"' in html
    assert 'id="quality"' in html
    assert 'id="system-prompt"' in html
    assert 'id="generate-btn"' in html


def test_index_template_wires_api_endpoints() -> None:
    html = _template()

    assert "/api/config" in html
    assert "/api/generate-image" in html
    assert "/api/history/export" in html
    assert '"DELETE"' in html


def test_generate_button_disabled_while_pending() -> None:
    html = _template()

    assert '$("generate-btn").disabled = true' in html
    assert '$("generate-btn").disabled = false' in html
