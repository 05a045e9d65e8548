"""Pure functions turning GitLab merge-request change entries into parsed file diffs."""

from collections.abc import Iterable
from typing import Any

from gitlab_review_bridge.core.domain.diff import ParsedFileDiff, parse_diff
from gitlab_review_bridge.core.domain.merge_request import FileDiff


def to_file_diffs(changes: Iterable[dict[str, Any]]) -> list[FileDiff]:
    """Keep only the fields of each change entry the review flow relies on."""
    return [
        FileDiff(
            old_path=change.get("old_path") or "",
            new_path=change.get("new_path") or "",
            new_file=bool(change.get("new_file")),
            deleted_file=bool(change.get("deleted_file")),
            renamed_file=bool(change.get("renamed_file")),
            diff=change.get("diff") or "",
        )
        for change in changes
        if isinstance(change, dict)
    ]


def parse_file_diffs(file_diffs: Iterable[FileDiff]) -> list[ParsedFileDiff]:
    return [
        ParsedFileDiff(
            file_path=file_diff.new_path,
            old_path=file_diff.old_path,
            is_new=file_diff.new_file,
            is_deleted=file_diff.deleted_file,
            is_renamed=file_diff.renamed_file,
            hunks=tuple(parse_diff(file_diff.diff)),
        )
        for file_diff in file_diffs
    ]


def build_diff_for_prompt(file_diffs: Iterable[FileDiff]) -> str:
    """Concatenate the raw per-file diffs, newline separated, for the review prompt."""
    return "\n".join(file_diff.diff for file_diff in file_diffs)
