from __future__ import annotations

import time
from collections.abc import Callable

from gitlab_review_bridge.core.domain.merge_request import ProjectSummary


class ProjectListCache:
    """In-memory project list that expires on a monotonic clock; the last writer wins."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._data: list[ProjectSummary] | None = None
        self._timestamp: float = 0.0

    def get(self) -> list[ProjectSummary] | None:
        if self._data is not None and self._clock() - self._timestamp < self._ttl_seconds:
            return self._data
        return None

    def store(self, projects: list[ProjectSummary]) -> None:
        self._data = projects
        self._timestamp = self._clock()
