from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from gitlab_review_bridge.core.exceptions.lookup_errors import InvalidMergeRequestUrlError


@dataclass(frozen=True)
class MergeRequestRef:
    """Addresses a merge request by project path (``group/sub/project``) and IID."""

    project_path: str
    mr_iid: int

    @classmethod
    def from_url(cls, url: str) -> MergeRequestRef:
        """Parse ``https://host/<project path>/-/merge_requests/<iid>[/...]``."""
        try:
            parsed = urlparse(url)
        except ValueError as exc:
            raise InvalidMergeRequestUrlError(str(exc)) from exc

        if not parsed.scheme or not parsed.netloc:
            raise InvalidMergeRequestUrlError(f"Invalid URL: {url}")

        parts = parsed.path.split("/")
        try:
            separator = parts.index("-")
        except ValueError:
            separator = -1
        if separator == -1 or parts[separator + 1 : separator + 2] != ["merge_requests"]:
            raise InvalidMergeRequestUrlError(
                "Invalid GitLab MR URL format: merge_requests segment not found"
            )

        project_path = "/".join(part for part in parts[1:separator] if part)
        if not project_path:
            raise InvalidMergeRequestUrlError(f"Could not parse project path from URL: {url}")

        iid_segment = parts[separator + 2] if len(parts) > separator + 2 else ""
        if not (iid_segment.isascii() and iid_segment.isdecimal()):
            raise InvalidMergeRequestUrlError(f"Could not parse MR IID from URL: {url}")

        return cls(project_path=project_path, mr_iid=int(iid_segment))
