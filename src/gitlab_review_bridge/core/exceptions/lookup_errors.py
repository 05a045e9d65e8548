"""Errors raised when a requested GitLab entity cannot be resolved unambiguously."""

from __future__ import annotations

from gitlab_review_bridge.core.exceptions.domain_error import DomainError


class InvalidMergeRequestUrlError(DomainError, ValueError):
    """Raised when a merge request URL does not follow the `<project>/-/merge_requests/<iid>` shape."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse GitLab MR URL: {reason}")
        self.reason = reason


class ProjectNotFoundError(DomainError, LookupError):
    def __init__(self, project_name: str) -> None:
        super().__init__(f"Project with name {project_name} not found.")
        self.project_name = project_name


class UserNotFoundError(DomainError, LookupError):
    def __init__(self, username: str) -> None:
        super().__init__(f"User with username '{username}' not found.")
        self.username = username


class AmbiguousUserError(DomainError, LookupError):
    """Raised when a username search matches more than one account."""

    def __init__(self, username: str, candidates: list[str]) -> None:
        listing = ", ".join(candidates)
        super().__init__(
            f"Multiple users found matching '{username}': {listing}. Please be more specific."
        )
        self.username = username
        self.candidates = candidates
