"""Tests for release-notes rendering."""

from permacanonical.core.changelog import NO_CHANGELOG, autop, render_changelog, sanitize


def test_empty_body() -> None:
    assert render_changelog("") == NO_CHANGELOG
    assert render_changelog(None) == NO_CHANGELOG
    assert render_changelog("  \n ") == NO_CHANGELOG


def test_paragraphs_and_line_breaks() -> None:
    body = "## 1.0.5\r\n\r\n- Fixed pagination\r\n- Kept search queries"
    assert render_changelog(body) == (
        "<p>## 1.0.5</p>\n"
        "<p>- Fixed pagination<br />\n- Kept search queries</p>\n"
    )


def test_script_removed_with_content() -> None:
    body = "Added feature<script>alert(1)</script> today"
    assert render_changelog(body) == "<p>Added feature today</p>\n"


def test_disallowed_tags_unwrapped() -> None:
    assert sanitize('<div class="x"><span>kept</span></div>') == "kept"


def test_attributes_filtered() -> None:
    html = '<a href="https://github.com" onclick="steal()" title="t">link</a>'
    assert sanitize(html) == '<a href="https://github.com" title="t">link</a>'


def test_javascript_urls_dropped() -> None:
    assert sanitize('<a href="javascript:alert(1)">x</a>') == "<a>x</a>"


def test_block_elements_not_wrapped() -> None:
    text = "<ul><li>one</li></ul>\n\nplain"
    assert autop(text) == "<ul><li>one</li></ul>\n<p>plain</p>\n"
