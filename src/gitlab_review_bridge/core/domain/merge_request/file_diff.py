from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class FileDiff:
    """Raw change record of one file, as listed by the merge request changes endpoint."""

    old_path: str
    new_path: str
    new_file: bool = False
    deleted_file: bool = False
    renamed_file: bool = False
    diff: str = ""
