from dataclasses import dataclass, field

from gitlab_review_bridge.core.domain.merge_request.diff_position import DiffPosition


@dataclass(frozen=True)
class NoteAuthor:
    username: str
    name: str | None = None


@dataclass(frozen=True, kw_only=True)
class Note:
    id: int
    body: str
    author: NoteAuthor
    system: bool = False
    position: DiffPosition | None = None


@dataclass(frozen=True, kw_only=True)
class Discussion:
    id: str
    notes: tuple[Note, ...] = field(default_factory=tuple)
    # GitLab's ``individual_note`` flag: a standalone note rather than a threaded discussion.
    posted_as_inline: bool | None = None
