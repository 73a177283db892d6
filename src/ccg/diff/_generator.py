"""Structural diff generation from git trees.

File-level changes come from dulwich's ``tree_changes`` with rename
detection; line-level hunks come from ``difflib.SequenceMatcher`` grouped
opcodes, formatted the way ``git diff`` numbers its hunks.
"""

from collections.abc import Iterator
from difflib import SequenceMatcher
from typing import Final

from dulwich.diff_tree import (
    CHANGE_ADD,
    CHANGE_COPY,
    CHANGE_DELETE,
    CHANGE_RENAME,
    RenameDetector,
    TreeChange,
    tree_changes,
)
from dulwich.object_store import BaseObjectStore
from dulwich.objects import S_ISGITLINK, Blob, TreeEntry

from ccg.diff._entries import (
    ChangeKind,
    DiffEntry,
    DiffLine,
    FileHeader,
    HunkHeader,
    LineOrigin,
    NoNewlineMarker,
)

DEFAULT_CONTEXT_LINES: Final = 3

_KINDS: Final = {
    CHANGE_ADD: ChangeKind.ADDED,
    CHANGE_DELETE: ChangeKind.DELETED,
    CHANGE_RENAME: ChangeKind.RENAMED,
    CHANGE_COPY: ChangeKind.COPIED,
}


def _read_blob(store: BaseObjectStore, entry: TreeEntry | None) -> bytes:
    """Return the content of a tree entry, or empty bytes when absent."""
    if entry is None or entry.sha is None or entry.mode is None:
        return b""
    if S_ISGITLINK(entry.mode):
        return b""
    blob = store[entry.sha]
    if not isinstance(blob, Blob):
        return b""
    return blob.as_raw_string()


def split_lines(text: str) -> list[str]:
    """Split text into lines on ``\\n`` only, keeping the terminators.

    A final line without a terminator is kept as is.
    """
    parts = text.split("\n")
    lines = [f"{part}\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _format_range(start: int, length: int) -> str:
    """Format one side of a hunk range like git."""
    if length == 1:
        return str(start)
    return f"{start},{length}"


def _emit_line(origin: LineOrigin, line: str) -> Iterator[DiffEntry]:
    if line.endswith("\n"):
        yield DiffLine(origin, line[:-1])
    else:
        yield DiffLine(origin, line)
        yield NoNewlineMarker()


def iter_hunks(
    old_lines: list[str],
    new_lines: list[str],
    *,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> Iterator[DiffEntry]:
    """Yield hunk headers and lines transforming ``old_lines`` into ``new_lines``.

    Args:
        old_lines: Old content, lines with terminators (see split_lines).
        new_lines: New content, lines with terminators.
        context_lines: Unchanged lines shown around each change.

    Yields:
        HunkHeader, DiffLine and NoNewlineMarker entries.
    """
    matcher = SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for group in matcher.get_grouped_opcodes(context_lines):
        old_begin, old_end = group[0][1], group[-1][2]
        new_begin, new_end = group[0][3], group[-1][4]
        old_length = old_end - old_begin
        new_length = new_end - new_begin
        # git numbers an empty side from the line before it
        old_start = old_begin + 1 if old_length else old_begin
        new_start = new_begin + 1 if new_length else new_begin

        text = (
            f"@@ -{_format_range(old_start, old_length)} "
            f"+{_format_range(new_start, new_length)} @@"
        )
        yield HunkHeader(
            text=text,
            old_start=old_start,
            old_lines=old_length,
            new_start=new_start,
            new_lines=new_length,
        )

        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                for line in old_lines[i1:i2]:
                    yield from _emit_line(LineOrigin.CONTEXT, line)
                continue
            if tag in ("delete", "replace"):
                for line in old_lines[i1:i2]:
                    yield from _emit_line(LineOrigin.DELETION, line)
            if tag in ("insert", "replace"):
                for line in new_lines[j1:j2]:
                    yield from _emit_line(LineOrigin.ADDITION, line)


def _file_header(change: TreeChange, *, is_binary: bool) -> FileHeader:
    kind = _KINDS.get(change.type, ChangeKind.MODIFIED)
    new_path = change.new.path if change.new is not None else None
    old_path = change.old.path if change.old is not None else None
    path = (new_path or old_path or b"").decode("utf-8", errors="replace")
    source = None
    if kind in (ChangeKind.RENAMED, ChangeKind.COPIED) and old_path is not None:
        source = old_path.decode("utf-8", errors="replace")
    return FileHeader(kind=kind, path=path, old_path=source, is_binary=is_binary)


def iter_tree_diff(
    store: BaseObjectStore,
    old_tree: str | None,
    new_tree: str | None,
    *,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> Iterator[DiffEntry]:
    """Yield the structural diff between two trees.

    Entries are produced lazily, one file at a time.

    Args:
        store: Object store holding both trees.
        old_tree: Old tree SHA, or None for the empty tree.
        new_tree: New tree SHA, or None for the empty tree.
        context_lines: Unchanged lines shown around each change.

    Yields:
        FileHeader, HunkHeader, DiffLine and NoNewlineMarker entries.
    """
    changes = tree_changes(
        store,
        old_tree.encode("ascii") if old_tree else None,
        new_tree.encode("ascii") if new_tree else None,
        rename_detector=RenameDetector(store),
    )
    for change in changes:
        old_data = _read_blob(store, change.old)
        new_data = _read_blob(store, change.new)
        is_binary = b"\0" in old_data or b"\0" in new_data
        yield _file_header(change, is_binary=is_binary)
        if is_binary:
            continue
        yield from iter_hunks(
            split_lines(old_data.decode("utf-8", errors="replace")),
            split_lines(new_data.decode("utf-8", errors="replace")),
            context_lines=context_lines,
        )
