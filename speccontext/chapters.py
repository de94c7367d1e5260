"""Markdown chapter parsing and serialization."""

import re
from typing import Dict, List, Optional

# ATX heading: 1-6 '#' markers, whitespace, title, optional closing '#'s
_HEADING_RE = re.compile(r"^#{1,6}\s+(.+?)\s*#*$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


def parse_chapters(markdown: Optional[str]) -> Dict[str, str]:
    """
    Parse a markdown document into an ordered heading -> body mapping.

    Every ATX heading (levels 1 to 6) starts a chapter; the body is every
    line up to the next heading, trimmed. Lines before the first heading
    are discarded. When a heading repeats, the last body wins.

    Args:
        markdown: Markdown text (anything else parses to an empty mapping)

    Returns:
        Dict of chapter title to body text, in first-seen order
    """
    if not isinstance(markdown, str) or not markdown.strip():
        return {}

    chapters: Dict[str, str] = {}
    current: Optional[str] = None
    buffer: List[str] = []

    for line in _LINE_SPLIT_RE.split(markdown):
        match = _HEADING_RE.match(line)
        if match:
            if current is not None:
                chapters[current] = "\n".join(buffer).strip()
            current = match.group(1).strip()
            chapters.setdefault(current, "")
            buffer = []
        else:
            buffer.append(line)

    if current is not None:
        chapters[current] = "\n".join(buffer).strip()

    return chapters


def build_markdown(chapters: Optional[Dict[str, str]]) -> str:
    """Serialize a chapter mapping back to markdown using level-2 headings."""
    if not chapters:
        return ""

    sections = []
    for heading, body in chapters.items():
        body = body.strip() if isinstance(body, str) else ""
        sections.append(f"## {heading}\n{body}".strip())

    return "\n\n".join(sections)
