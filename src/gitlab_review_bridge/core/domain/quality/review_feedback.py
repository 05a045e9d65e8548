from dataclasses import dataclass
from typing import Literal

from gitlab_review_bridge.core.domain.merge_request.diff_position import DiffPosition
from gitlab_review_bridge.core.domain.quality.review_severity import ReviewSeverity

FeedbackStatus = Literal["pending", "submitted", "submitting", "error"]


@dataclass(frozen=True, kw_only=True)
class ReviewFeedback:
    """A single review finding anchored to a line of the merge request."""

    id: str
    file_path: str
    line_number: int
    severity: ReviewSeverity
    title: str
    description: str
    line_content: str = ""
    position: DiffPosition | None = None
    status: FeedbackStatus = "pending"
    is_existing: bool = False
