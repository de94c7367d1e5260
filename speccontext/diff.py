"""Chapter-aware line diff using longest-common-subsequence alignment."""

from typing import List, Optional, Sequence

from .chapters import parse_chapters
from .models import ChapterDiff, DiffOp

NO_CHANGES = "No changes."
UNCHANGED_CHAPTER = "(no changes)"
UNTITLED_CHAPTER = "(untitled)"

PREFIXES = {"same": "  ", "add": "+ ", "remove": "- "}

COLOR_CODES = {"header": "1;36", "add": "32", "remove": "31"}


def _colorize(text: str, kind: str, color: bool) -> str:
    if not color or kind not in COLOR_CODES:
        return text
    return f"\033[{COLOR_CODES[kind]}m{text}\033[0m"


def align_lines(old_lines: Sequence[str], new_lines: Sequence[str]) -> List[DiffOp]:
    """
    Align two line sequences into same/add/remove operations.

    Builds the classic O(n*m) table of suffix LCS lengths, then walks it
    from the top. When skipping either side keeps the same LCS length,
    the old line is removed before the new line is added.

    Args:
        old_lines: Lines of the previous text
        new_lines: Lines of the new text

    Returns:
        Ordered DiffOp list consuming every line of both sides once
    """
    n, m = len(old_lines), len(new_lines)
    # lcs[i][j] = LCS length of old_lines[i:] and new_lines[j:]
    lcs = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = lcs[i], lcs[i + 1]
        for j in range(m - 1, -1, -1):
            if old_lines[i] == new_lines[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    ops: List[DiffOp] = []
    i = j = 0
    while i < n and j < m:
        if old_lines[i] == new_lines[j]:
            ops.append(DiffOp("same", old_lines[i]))
            i += 1
            j += 1
        elif lcs[i + 1][j] >= lcs[i][j + 1]:
            ops.append(DiffOp("remove", old_lines[i]))
            i += 1
        else:
            ops.append(DiffOp("add", new_lines[j]))
            j += 1

    ops.extend(DiffOp("remove", line) for line in old_lines[i:])
    ops.extend(DiffOp("add", line) for line in new_lines[j:])
    return ops


def diff_chapters(old_text: Optional[str], new_text: Optional[str]) -> List[ChapterDiff]:
    """
    Diff two markdown documents chapter by chapter.

    Chapters are the union of both sides' headings in lexicographic order.
    A chapter missing on one side contributes a single empty line. Text
    without any heading is compared as one untitled chapter.
    """
    old_text = old_text or ""
    new_text = new_text or ""
    old_chapters = parse_chapters(old_text)
    new_chapters = parse_chapters(new_text)
    headings = sorted(set(old_chapters) | set(new_chapters))

    if not headings:
        if old_text.strip() == new_text.strip():
            return []
        old_chapters = {UNTITLED_CHAPTER: old_text.strip()}
        new_chapters = {UNTITLED_CHAPTER: new_text.strip()}
        headings = [UNTITLED_CHAPTER]

    return [
        ChapterDiff(
            heading=heading,
            ops=align_lines(
                old_chapters.get(heading, "").split("\n"),
                new_chapters.get(heading, "").split("\n"),
            ),
        )
        for heading in headings
    ]


def render_chapter_diffs(chapter_diffs: Sequence[ChapterDiff], color: bool = False) -> str:
    """Render chapter diffs as a grouped report, optionally with ANSI colors."""
    if not chapter_diffs:
        return NO_CHANGES

    lines: List[str] = []
    for chapter in chapter_diffs:
        lines.append(_colorize(f"Chapter: {chapter.heading}", "header", color))
        if not chapter.ops:
            lines.append(f"  {UNCHANGED_CHAPTER}")
            continue
        for op in chapter.ops:
            lines.append(_colorize(f"{PREFIXES[op.tag]}{op.line}", op.tag, color))

    return "\n".join(lines)


def render_diff(old_text: Optional[str], new_text: Optional[str], color: bool = False) -> str:
    """Diff two markdown documents and render the report."""
    return render_chapter_diffs(diff_chapters(old_text, new_text), color=color)
