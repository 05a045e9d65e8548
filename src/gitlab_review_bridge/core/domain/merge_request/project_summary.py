from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class ProjectSummary:
    id: int
    name: str
    name_with_namespace: str
    path_with_namespace: str
    last_activity_at: str

    def matches(self, fragment: str) -> bool:
        """Case-insensitive substring match on the short or namespaced name."""
        needle = fragment.lower()
        return needle in self.name.lower() or needle in self.name_with_namespace.lower()
