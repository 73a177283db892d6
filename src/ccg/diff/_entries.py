"""Typed entries of a structural diff.

A structural diff is a flat, ordered stream: a ``FileHeader`` opens each
file, ``HunkHeader`` entries open hunks, and ``DiffLine`` entries carry the
classified lines. A ``NoNewlineMarker`` directly follows a line that has no
terminating newline, mirroring git's ``\\ No newline at end of file``.
"""

from dataclasses import dataclass
from enum import StrEnum


class ChangeKind(StrEnum):
    """How a file changed between two trees."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"


class LineOrigin(StrEnum):
    """Classification of a diff line, using git's origin characters."""

    ADDITION = "+"
    DELETION = "-"
    CONTEXT = " "


@dataclass(frozen=True, slots=True)
class FileHeader:
    """Start of a file section.

    Attributes:
        kind: How the file changed.
        path: Path after the change (before it, for deletions).
        old_path: Source path for renames and copies.
        is_binary: True when either side is binary; no hunks follow.
    """

    kind: ChangeKind
    path: str
    old_path: str | None = None
    is_binary: bool = False


@dataclass(frozen=True, slots=True)
class HunkHeader:
    """Start of a hunk.

    Structured ranges are optional; when they are missing the textual
    ``@@ -a,b +c,d @@`` header is parsed instead.

    Attributes:
        text: The textual hunk header.
        old_start: First old line number.
        old_lines: Number of old lines in the hunk.
        new_start: First new line number.
        new_lines: Number of new lines in the hunk.
    """

    text: str
    old_start: int | None = None
    old_lines: int | None = None
    new_start: int | None = None
    new_lines: int | None = None


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single classified line, without its line terminator."""

    origin: LineOrigin
    content: str


@dataclass(frozen=True, slots=True)
class NoNewlineMarker:
    """The preceding line has no newline at end of file."""

    text: str = "\\ No newline at end of file"


type DiffEntry = FileHeader | HunkHeader | DiffLine | NoNewlineMarker
