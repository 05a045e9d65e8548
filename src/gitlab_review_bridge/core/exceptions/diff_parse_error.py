from __future__ import annotations

from gitlab_review_bridge.core.exceptions.domain_error import DomainError


class DiffParseError(DomainError, ValueError):
    """Raised by the diff parser in strict mode when a hunk header is malformed."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"Malformed hunk header at line {line_number}: {line!r}")
        self.line_number = line_number
        self.line = line
