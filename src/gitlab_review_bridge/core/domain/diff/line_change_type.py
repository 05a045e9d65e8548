from enum import StrEnum


class LineChangeType(StrEnum):
    ADD = "add"
    REMOVE = "remove"
    CONTEXT = "context"
