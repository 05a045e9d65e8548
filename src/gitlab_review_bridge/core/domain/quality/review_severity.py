from enum import StrEnum


class ReviewSeverity(StrEnum):
    CRITICAL = "Critical"
    WARNING = "Warning"
    SUGGESTION = "Suggestion"
    INFO = "Info"
