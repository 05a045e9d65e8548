"""Aggregate handed to the review agent: MR metadata, raw diffs and parsed hunks."""

from dataclasses import dataclass, field

from gitlab_review_bridge.core.domain.diff.parsed_file_diff import ParsedFileDiff
from gitlab_review_bridge.core.domain.merge_request.discussion import Discussion
from gitlab_review_bridge.core.domain.merge_request.file_diff import FileDiff
from gitlab_review_bridge.core.domain.quality.review_feedback import ReviewFeedback


@dataclass(frozen=True, kw_only=True)
class FileContents:
    old_content: tuple[str, ...] | None = None
    new_content: tuple[str, ...] | None = None


@dataclass(frozen=True, kw_only=True)
class MergeRequestDetails:
    """Snapshot of a merge request ready for review.

    ``file_contents``, ``discussions`` and ``existing_feedback`` start empty;
    the orchestrator fills them through the dedicated tools.
    """

    project_path: str
    mr_iid: str
    project_id: int
    title: str
    author_name: str
    web_url: str
    source_branch: str
    target_branch: str
    base_sha: str
    start_sha: str
    head_sha: str
    file_diffs: tuple[FileDiff, ...] = field(default_factory=tuple)
    diff_for_prompt: str = ""
    parsed_diffs: tuple[ParsedFileDiff, ...] = field(default_factory=tuple)
    file_contents: dict[str, FileContents] = field(default_factory=dict)
    discussions: tuple[Discussion, ...] = field(default_factory=tuple)
    existing_feedback: tuple[ReviewFeedback, ...] = field(default_factory=tuple)
