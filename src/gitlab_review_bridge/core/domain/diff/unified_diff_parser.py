"""Pure parser turning unified-diff text into hunks with per-line coordinates.

The parser is permissive: text before the first hunk header is dropped, a
header without counts means a single-line hunk, and any line inside a hunk
that lacks a ``+``/``-``/space marker is kept verbatim as context (this
includes ``\\ No newline at end of file``). Nothing is raised unless
``strict=True`` is requested.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from gitlab_review_bridge.core.domain.diff.line_change import LineChange
from gitlab_review_bridge.core.domain.diff.line_change_type import LineChangeType
from gitlab_review_bridge.core.domain.diff.parsed_hunk import ParsedHunk
from gitlab_review_bridge.core.exceptions.diff_parse_error import DiffParseError

HUNK_HEADER_RE = re.compile(r"^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@", re.ASCII)

_MARKERS = {
    "+": LineChangeType.ADD,
    "-": LineChangeType.REMOVE,
    " ": LineChangeType.CONTEXT,
}


@dataclass
class _HunkBuilder:
    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: list[LineChange] = field(default_factory=list)
    # Lines already consumed on each side of the hunk.
    old_seen: int = 0
    new_seen: int = 0

    def append(self, raw_line: str) -> None:
        change_type = _MARKERS.get(raw_line[:1])
        if change_type is None:
            change_type, content = LineChangeType.CONTEXT, raw_line
        else:
            content = raw_line[1:]

        old_line = None
        new_line = None
        if change_type is not LineChangeType.ADD:
            old_line = self.old_start + self.old_seen
            self.old_seen += 1
        if change_type is not LineChangeType.REMOVE:
            new_line = self.new_start + self.new_seen
            self.new_seen += 1

        self.lines.append(
            LineChange(type=change_type, content=content, old_line=old_line, new_line=new_line)
        )

    def build(self) -> ParsedHunk:
        return ParsedHunk(
            header=self.header,
            old_start_line=self.old_start,
            old_line_count=self.old_count,
            new_start_line=self.new_start,
            new_line_count=self.new_count,
            lines=tuple(self.lines),
            is_collapsed=False,
        )


def parse_diff(diff_text: str | None, *, strict: bool = False) -> list[ParsedHunk]:
    """Parse ``diff_text`` into hunks, in the order their headers appear.

    With ``strict=True`` a line that starts with ``@@`` but does not match the
    hunk header grammar raises :class:`DiffParseError` instead of being
    treated as content.
    """
    if not diff_text:
        return []

    hunks: list[ParsedHunk] = []
    current: _HunkBuilder | None = None

    for number, line in enumerate(diff_text.split("\n"), start=1):
        header = _match_header(line)
        if header is not None:
            if current is not None:
                hunks.append(current.build())
            current = header
            continue

        if strict and line.startswith("@@"):
            raise DiffParseError(number, line)

        if current is not None:
            current.append(line)

    if current is not None:
        hunks.append(current.build())

    return hunks


def _match_header(line: str) -> _HunkBuilder | None:
    match = HUNK_HEADER_RE.match(line)
    if match is None:
        return None
    old_start, old_count, new_start, new_count = match.groups()
    return _HunkBuilder(
        header=line,
        old_start=int(old_start),
        old_count=int(old_count or "1"),
        new_start=int(new_start),
        new_count=int(new_count or "1"),
    )
