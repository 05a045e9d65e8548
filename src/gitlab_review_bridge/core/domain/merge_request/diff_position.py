from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal


@dataclass(frozen=True, kw_only=True)
class DiffPosition:
    """Anchor of an inline comment inside a merge request diff.

    Added lines are addressed by ``new_line`` only, removed lines by
    ``old_line`` only, unchanged lines by both.
    """

    base_sha: str
    start_sha: str
    head_sha: str
    old_path: str
    new_path: str
    position_type: Literal["text"] = "text"
    new_line: int | None = None
    old_line: int | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "base_sha": self.base_sha,
            "start_sha": self.start_sha,
            "head_sha": self.head_sha,
            "position_type": self.position_type,
            "old_path": self.old_path,
            "new_path": self.new_path,
        }
        if self.new_line is not None:
            payload["new_line"] = self.new_line
        if self.old_line is not None:
            payload["old_line"] = self.old_line
        return payload
