from gitlab_review_bridge.core.domain.quality.review_feedback import ReviewFeedback
from gitlab_review_bridge.core.domain.quality.review_severity import ReviewSeverity

__all__ = ["ReviewFeedback", "ReviewSeverity"]
