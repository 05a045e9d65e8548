from __future__ import annotations

from gitlab_review_bridge.core.exceptions.domain_error import DomainError


class ConfigurationError(DomainError):
    """Raised when configuration is invalid or incomplete."""
