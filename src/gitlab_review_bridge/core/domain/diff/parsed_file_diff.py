"""Structured representation of a single file's changes within a Merge Request diff."""

from dataclasses import dataclass, field

from gitlab_review_bridge.core.domain.diff.parsed_hunk import ParsedHunk


@dataclass(frozen=True, kw_only=True)
class ParsedFileDiff:
    """Parsed hunks for one changed file plus the identity flags GitLab reports for it."""

    file_path: str
    old_path: str
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False
    hunks: tuple[ParsedHunk, ...] = field(default_factory=tuple)
