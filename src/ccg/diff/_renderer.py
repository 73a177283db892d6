"""Rendering of structural diffs into styled text.

The renderer consumes the entry stream produced by ``iter_tree_diff`` and
builds a ``rich.text.Text`` body with per-line old and new line numbers,
followed by a summary with change statistics.

Change runs (consecutive deletions and additions) are buffered until the
next context line, hunk, file or the end of the stream. A run that carries
a ``NoNewlineMarker`` and differs only by a trailing newline is collapsed:

* one deletion followed by two additions whose first addition equals the
  deletion (ignoring surrounding whitespace) renders as a context line plus
  the second addition;
* two deletions followed by one addition that equals the first deletion
  renders as a context line plus the second deletion.

Any other run renders literally.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Final

from rich.text import Text

from ccg.diff._entries import (
    ChangeKind,
    DiffEntry,
    DiffLine,
    FileHeader,
    HunkHeader,
    LineOrigin,
    NoNewlineMarker,
)
from ccg.diff._styles import DiffStyles

_HUNK_PATTERN: Final = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_NUMBER_WIDTH: Final = 4


# =============================================================================
# Result Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class FileDiffStats:
    """Line counts for a single file.

    Attributes:
        path: Path after the change.
        kind: How the file changed.
        additions: Number of rendered added lines.
        deletions: Number of rendered deleted lines.
        old_path: Source path for renames and copies.
        is_binary: True when no line diff is available.
    """

    path: str
    kind: ChangeKind
    additions: int = 0
    deletions: int = 0
    old_path: str | None = None
    is_binary: bool = False


@dataclass(frozen=True, slots=True)
class DiffStats:
    """Aggregated diff statistics."""

    files: tuple[FileDiffStats, ...] = ()

    @property
    def files_changed(self) -> int:
        """Number of files in the diff."""
        return len(self.files)

    @property
    def insertions(self) -> int:
        """Total rendered added lines."""
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        """Total rendered deleted lines."""
        return sum(f.deletions for f in self.files)

    def count_by_kind(self) -> dict[ChangeKind, int]:
        """Count files per change kind, omitting kinds with no files."""
        counts: dict[ChangeKind, int] = {}
        for file_stats in self.files:
            counts[file_stats.kind] = counts.get(file_stats.kind, 0) + 1
        return counts


@dataclass(frozen=True, slots=True)
class DiffReport:
    """A rendered diff.

    Attributes:
        body: Styled per-file output, or a notice when there are no changes.
        summary: Styled statistics and legend; empty when there are no changes.
        stats: Statistics matching the rendered body.
    """

    body: Text
    summary: Text
    stats: DiffStats

    @property
    def is_empty(self) -> bool:
        """True when the diff contains no files."""
        return not self.stats.files

    @property
    def plain(self) -> str:
        """Body and summary without styling."""
        if not self.summary.plain:
            return self.body.plain
        return f"{self.body.plain}\n{self.summary.plain}"


# =============================================================================
# Rendering
# =============================================================================


@dataclass(slots=True)
class _PendingLine:
    origin: LineOrigin
    content: str
    old_number: int | None
    new_number: int | None


@dataclass(slots=True)
class _FileCounter:
    header: FileHeader
    additions: int = 0
    deletions: int = 0

    def freeze(self) -> FileDiffStats:
        return FileDiffStats(
            path=self.header.path,
            kind=self.header.kind,
            additions=self.additions,
            deletions=self.deletions,
            old_path=self.header.old_path,
            is_binary=self.header.is_binary,
        )


@dataclass(slots=True)
class _RenderState:
    styles: DiffStyles
    body: Text = field(default_factory=Text)
    files: list[_FileCounter] = field(default_factory=list)
    pending: list[_PendingLine] = field(default_factory=list)
    pending_marker: bool = False
    old_number: int | None = None
    new_number: int | None = None

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def file_header(self, header: FileHeader) -> None:
        self.flush()
        self.files.append(_FileCounter(header))
        self.old_number = self.new_number = None

        styles = self.styles
        kind = styles.kind(header.kind)
        if len(self.files) > 1:
            self.body.append("\n")
        self.body.append(styles.rule + "\n", style=styles.separator_style)
        self.body.append(f"{kind.glyph} {kind.label} ", style=kind.style)
        if header.old_path is not None:
            self.body.append(header.old_path, style=styles.path_style)
            self.body.append(styles.rename_arrow)
        self.body.append(header.path, style=styles.path_style)
        self.body.append("\n")
        if header.is_binary:
            self.body.append(styles.labels.binary + "\n", style=styles.binary_style)

    def hunk_header(self, header: HunkHeader) -> None:
        self.flush()
        ranges = _hunk_ranges(header)
        if ranges is None:
            # Unparseable header: following lines are shown without numbers
            self.old_number = self.new_number = None
            self.body.append(header.text + "\n", style=self.styles.hunk_style)
            return

        old_start, old_lines, new_start, new_lines = ranges
        self.old_number = old_start
        self.new_number = new_start
        styles = self.styles
        self.body.append("@@ ", style=styles.hunk_style)
        self.body.append(
            f"{styles.labels.old} {_span(old_start, old_lines)}",
            style=styles.hunk_old_style,
        )
        self.body.append(" -> ", style=styles.hunk_style)
        self.body.append(
            f"{styles.labels.new} {_span(new_start, new_lines)}",
            style=styles.hunk_new_style,
        )
        self.body.append("\n")

    def line(self, line: DiffLine) -> None:
        if line.origin is LineOrigin.CONTEXT:
            self.flush()
            old, new = self._take_numbers(old=True, new=True)
            self._emit(LineOrigin.CONTEXT, line.content, old, new)
            return
        if line.origin is LineOrigin.DELETION:
            old, _ = self._take_numbers(old=True, new=False)
            self.pending.append(_PendingLine(line.origin, line.content, old, None))
        else:
            _, new = self._take_numbers(old=False, new=True)
            self.pending.append(_PendingLine(line.origin, line.content, None, new))

    def marker(self) -> None:
        if self.pending:
            self.pending_marker = True

    # -------------------------------------------------------------------------
    # Change runs
    # -------------------------------------------------------------------------

    def flush(self) -> None:
        """Render the buffered change run."""
        pending, marker = self.pending, self.pending_marker
        self.pending = []
        self.pending_marker = False
        if not pending:
            return
        if marker and self._collapse(pending):
            return
        for item in pending:
            self._emit(item.origin, item.content, item.old_number, item.new_number)

    def _collapse(self, pending: list[_PendingLine]) -> bool:
        deletions = [p for p in pending if p.origin is LineOrigin.DELETION]
        additions = [p for p in pending if p.origin is LineOrigin.ADDITION]

        if len(deletions) == 1 and len(additions) == 2:
            removed, kept = deletions[0], additions[0]
            if removed.content.strip() == kept.content.strip():
                self._emit(
                    LineOrigin.CONTEXT,
                    removed.content.strip(),
                    removed.old_number,
                    kept.new_number,
                )
                extra = additions[1]
                self._emit(
                    extra.origin, extra.content.strip(), None, extra.new_number
                )
                return True

        if len(deletions) == 2 and len(additions) == 1:
            kept, added = deletions[0], additions[0]
            if kept.content.strip() == added.content.strip():
                self._emit(
                    LineOrigin.CONTEXT,
                    kept.content.strip(),
                    kept.old_number,
                    added.new_number,
                )
                extra = deletions[1]
                self._emit(
                    extra.origin, extra.content.strip(), extra.old_number, None
                )
                return True

        return False

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _take_numbers(self, *, old: bool, new: bool) -> tuple[int | None, int | None]:
        old_value = self.old_number if old else None
        new_value = self.new_number if new else None
        if old and self.old_number is not None:
            self.old_number += 1
        if new and self.new_number is not None:
            self.new_number += 1
        return old_value, new_value

    def _current_file(self) -> _FileCounter:
        if not self.files:
            self.files.append(_FileCounter(FileHeader(ChangeKind.MODIFIED, "")))
        return self.files[-1]

    def _emit(
        self,
        origin: LineOrigin,
        content: str,
        old_number: int | None,
        new_number: int | None,
    ) -> None:
        styles = self.styles
        counter = self._current_file()
        if origin is LineOrigin.ADDITION:
            counter.additions += 1
            style = styles.addition_style
        elif origin is LineOrigin.DELETION:
            counter.deletions += 1
            style = styles.deletion_style
        else:
            style = styles.context_style

        if old_number is not None or new_number is not None:
            old_col = "" if old_number is None else str(old_number)
            new_col = "" if new_number is None else str(new_number)
            self.body.append(
                f"{old_col:>{_NUMBER_WIDTH}} {new_col:>{_NUMBER_WIDTH}} ",
                style=styles.line_number_style,
            )
        self.body.append(f"{origin.value} {content}\n", style=style)


def _hunk_ranges(header: HunkHeader) -> tuple[int, int, int, int] | None:
    """Return (old_start, old_lines, new_start, new_lines) for a hunk."""
    if (
        header.old_start is not None
        and header.old_lines is not None
        and header.new_start is not None
        and header.new_lines is not None
    ):
        return header.old_start, header.old_lines, header.new_start, header.new_lines

    match = _HUNK_PATTERN.match(header.text)
    if match is None:
        return None
    old_start, old_lines, new_start, new_lines = match.groups()
    return (
        int(old_start),
        int(old_lines) if old_lines is not None else 1,
        int(new_start),
        int(new_lines) if new_lines is not None else 1,
    )


def _span(start: int, length: int) -> str:
    end = start + length - 1 if length > 0 else start
    return f"{start}-{end}"


class DiffRenderer:
    """Render structural diff entries into a DiffReport.

    Example:
        >>> renderer = DiffRenderer()
        >>> report = renderer.render(iter_tree_diff(store, old_tree, new_tree))
        >>> console.print(report.body)
    """

    __slots__: Final = ("_styles",)
    _styles: DiffStyles

    def __init__(self, styles: DiffStyles | None = None) -> None:
        """Initialize the renderer.

        Args:
            styles: Presentation data. Defaults to DiffStyles().
        """
        self._styles = styles if styles is not None else DiffStyles()

    @property
    def styles(self) -> DiffStyles:
        """Presentation data used by this renderer."""
        return self._styles

    def render(self, entries: Iterable[DiffEntry]) -> DiffReport:
        """Render a stream of diff entries.

        Args:
            entries: Entries in stream order.

        Returns:
            DiffReport with the styled body, summary and statistics.
        """
        state = _RenderState(self._styles)
        for entry in entries:
            match entry:
                case FileHeader():
                    state.file_header(entry)
                case HunkHeader():
                    state.hunk_header(entry)
                case DiffLine():
                    state.line(entry)
                case NoNewlineMarker():
                    state.marker()
        state.flush()

        stats = DiffStats(files=tuple(counter.freeze() for counter in state.files))
        if not stats.files:
            body = Text(
                self._styles.labels.no_differences, style=self._styles.notice_style
            )
            return DiffReport(body=body, summary=Text(), stats=stats)

        body = state.body
        # Only the final line break goes; content whitespace is kept
        if body.plain.endswith("\n"):
            body.right_crop(1)
        return DiffReport(body=body, summary=self._summary(stats), stats=stats)

    def _summary(self, stats: DiffStats) -> Text:
        styles = self._styles
        summary = Text()
        summary.append(styles.rule + "\n", style=styles.separator_style)
        summary.append(
            styles.labels.summary.format(
                files=stats.files_changed,
                insertions=stats.insertions,
                deletions=stats.deletions,
            )
            + "\n",
            style=styles.summary_style,
        )
        summary.append(styles.labels.legend, style=styles.legend_style)
        return summary
