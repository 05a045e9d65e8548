from gitlab_review_bridge.core.exceptions.configuration_error import ConfigurationError
from gitlab_review_bridge.core.exceptions.diff_parse_error import DiffParseError
from gitlab_review_bridge.core.exceptions.domain_error import DomainError
from gitlab_review_bridge.core.exceptions.infra_error import InfraError
from gitlab_review_bridge.core.exceptions.lookup_errors import (
    AmbiguousUserError,
    InvalidMergeRequestUrlError,
    ProjectNotFoundError,
    UserNotFoundError,
)
from gitlab_review_bridge.core.exceptions.provider_error import ProviderError

__all__ = [
    "AmbiguousUserError",
    "ConfigurationError",
    "DiffParseError",
    "DomainError",
    "InfraError",
    "InvalidMergeRequestUrlError",
    "ProjectNotFoundError",
    "ProviderError",
    "UserNotFoundError",
]
