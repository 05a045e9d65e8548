from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorRef:
    name: str
    username: str


@dataclass(frozen=True, kw_only=True)
class MergeRequestSummary:
    id: int
    iid: int
    title: str
    author: AuthorRef
    updated_at: str
    web_url: str
    project_id: int | None = None
