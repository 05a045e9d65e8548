from dataclasses import dataclass

from gitlab_review_bridge.core.domain.diff.line_change_type import LineChangeType


@dataclass(frozen=True, kw_only=True)
class LineChange:
    """A single line inside a hunk, positioned in both pre-image and post-image coordinates.

    ``old_line`` is ``None`` for added lines and ``new_line`` is ``None`` for removed
    lines; context lines carry both.
    """

    type: LineChangeType
    content: str
    old_line: int | None = None
    new_line: int | None = None
