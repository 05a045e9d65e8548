from dataclasses import dataclass, field

from gitlab_review_bridge.core.domain.diff.line_change import LineChange


@dataclass(frozen=True, kw_only=True)
class ParsedHunk:
    """One ``@@ ... @@`` block of a unified diff with its classified lines.

    The declared counts are kept as read from the header; they are not
    checked against ``lines``.
    """

    header: str
    old_start_line: int
    old_line_count: int
    new_start_line: int
    new_line_count: int
    lines: tuple[LineChange, ...] = field(default_factory=tuple)
    is_collapsed: bool = False
