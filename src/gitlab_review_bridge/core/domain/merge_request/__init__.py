from gitlab_review_bridge.core.domain.merge_request.diff_position import DiffPosition
from gitlab_review_bridge.core.domain.merge_request.discussion import Discussion, Note, NoteAuthor
from gitlab_review_bridge.core.domain.merge_request.file_diff import FileDiff
from gitlab_review_bridge.core.domain.merge_request.merge_request_ref import MergeRequestRef
from gitlab_review_bridge.core.domain.merge_request.merge_request_summary import (
    AuthorRef,
    MergeRequestSummary,
)
from gitlab_review_bridge.core.domain.merge_request.project_summary import ProjectSummary

# MergeRequestDetails is imported from its module directly: it depends on the
# quality package, which itself depends on DiffPosition.
__all__ = [
    "AuthorRef",
    "DiffPosition",
    "Discussion",
    "FileDiff",
    "MergeRequestRef",
    "MergeRequestSummary",
    "Note",
    "NoteAuthor",
    "ProjectSummary",
]
