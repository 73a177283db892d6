"""Presentation data for rendered diffs.

Glyphs, labels and rich style strings live here so the renderer carries no
hard-coded presentation and callers can swap labels for another language.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ccg.diff._entries import ChangeKind


@dataclass(frozen=True, slots=True)
class ChangeKindStyle:
    """How a file change kind is presented.

    Attributes:
        glyph: Single-character marker, also used in file summaries.
        label: Word describing the change.
        style: Rich style for the header line.
    """

    glyph: str
    label: str
    style: str


def _default_kinds() -> Mapping[ChangeKind, ChangeKindStyle]:
    return MappingProxyType(
        {
            ChangeKind.ADDED: ChangeKindStyle("A", "added", "bold green"),
            ChangeKind.DELETED: ChangeKindStyle("D", "deleted", "bold red"),
            ChangeKind.MODIFIED: ChangeKindStyle("M", "modified", "bold yellow"),
            ChangeKind.RENAMED: ChangeKindStyle("R", "renamed", "bold blue"),
            ChangeKind.COPIED: ChangeKindStyle("C", "copied", "bold magenta"),
        }
    )


@dataclass(frozen=True, slots=True)
class DiffLabels:
    """User-visible text produced by the renderer.

    ``summary`` is a format string receiving ``files``, ``insertions`` and
    ``deletions``.
    """

    no_differences: str = "No file differences"
    binary: str = "Binary files differ"
    old: str = "old"
    new: str = "new"
    summary: str = (
        "{files} files changed, {insertions} insertions(+), {deletions} deletions(-)"
    )
    legend: str = "Line format: old-line new-line +/- content"


@dataclass(frozen=True, slots=True)
class DiffStyles:
    """Styles used when rendering a structural diff."""

    kinds: Mapping[ChangeKind, ChangeKindStyle] = field(default_factory=_default_kinds)
    labels: DiffLabels = field(default_factory=DiffLabels)
    separator: str = "─"
    separator_width: int = 80
    separator_style: str = "blue"
    path_style: str = "bold"
    rename_arrow: str = " → "
    hunk_style: str = "cyan"
    hunk_old_style: str = "bold red"
    hunk_new_style: str = "bold green"
    addition_style: str = "green"
    deletion_style: str = "red"
    context_style: str = ""
    line_number_style: str = "dim"
    binary_style: str = "yellow"
    notice_style: str = "yellow"
    summary_style: str = "bold"
    legend_style: str = "dim"

    @property
    def rule(self) -> str:
        """Separator line drawn above each file and the summary."""
        return self.separator * self.separator_width

    def kind(self, kind: ChangeKind) -> ChangeKindStyle:
        """Return the presentation of a change kind."""
        return self.kinds[kind]
