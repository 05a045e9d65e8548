from gitlab_review_bridge.core.domain.diff.line_change import LineChange
from gitlab_review_bridge.core.domain.diff.line_change_type import LineChangeType
from gitlab_review_bridge.core.domain.diff.parsed_file_diff import ParsedFileDiff
from gitlab_review_bridge.core.domain.diff.parsed_hunk import ParsedHunk
from gitlab_review_bridge.core.domain.diff.unified_diff_parser import parse_diff

__all__ = ["LineChange", "LineChangeType", "ParsedFileDiff", "ParsedHunk", "parse_diff"]
