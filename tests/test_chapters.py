"""Tests for markdown chapter parsing and serialization."""

import pytest

from speccontext.chapters import build_markdown, parse_chapters


def test_parse_basic_document():
    chapters = parse_chapters("# Purpose\nDo X\n\n## Scope\n- ALL")
    assert chapters == {"Purpose": "Do X", "Scope": "- ALL"}
    assert list(chapters) == ["Purpose", "Scope"]


def test_parse_discards_preamble():
    chapters = parse_chapters("intro text\nmore intro\n## Only\nbody")
    assert chapters == {"Only": "body"}


def test_parse_strips_closing_hashes_and_whitespace():
    chapters = parse_chapters("###   Title   ###\ncontent\n###### Deep\nx")
    assert chapters == {"Title": "content", "Deep": "x"}


def test_parse_requires_space_after_marker():
    chapters = parse_chapters("## Real\n#hashtag line\n####### too deep")
    assert chapters == {"Real": "#hashtag line\n####### too deep"}


def test_duplicate_heading_last_body_wins():
    chapters = parse_chapters("## A\nfirst\n## B\nb\n## A\nsecond")
    assert chapters == {"A": "second", "B": "b"}
    # position of the first occurrence is kept
    assert list(chapters) == ["A", "B"]


def test_heading_without_body_is_empty():
    assert parse_chapters("## Empty\n## Next\ntext") == {"Empty": "", "Next": "text"}


def test_crlf_line_endings():
    assert parse_chapters("## A\r\nline one\r\nline two") == {"A": "line one\nline two"}


@pytest.mark.parametrize("value", [None, "", "   \n\t", 42])
def test_parse_is_total(value):
    assert parse_chapters(value) == {}


def test_build_markdown_uses_level_two_headings():
    text = build_markdown({"Purpose": "Do X", "Scope": "- ALL"})
    assert text == "## Purpose\nDo X\n\n## Scope\n- ALL"


def test_build_markdown_empty():
    assert build_markdown({}) == ""
    assert build_markdown(None) == ""


@pytest.mark.parametrize(
    "markdown",
    [
        "# Purpose\nDo X\n\n## Scope\n- ALL",
        "### Deep\nline 1\n\nline 2\n# Top\n* item\n* item 2",
        "preamble\n## A ##\nbody a\n## B\n\n\nbody b\n",
        "## Empty\n## Full\ntext",
    ],
)
def test_parse_serialize_round_trip(markdown):
    parsed = parse_chapters(markdown)
    assert parse_chapters(build_markdown(parsed)) == parsed
