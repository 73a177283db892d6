"""Structural diffs between git trees.

Generation (``iter_tree_diff``) produces a flat stream of typed entries;
``DiffRenderer`` turns that stream into styled text with line numbers and
summary statistics.
"""

from ccg.diff._entries import (
    ChangeKind,
    DiffEntry,
    DiffLine,
    FileHeader,
    HunkHeader,
    LineOrigin,
    NoNewlineMarker,
)
from ccg.diff._generator import (
    DEFAULT_CONTEXT_LINES,
    iter_hunks,
    iter_tree_diff,
    split_lines,
)
from ccg.diff._renderer import DiffRenderer, DiffReport, DiffStats, FileDiffStats
from ccg.diff._styles import ChangeKindStyle, DiffLabels, DiffStyles

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "ChangeKind",
    "ChangeKindStyle",
    "DiffEntry",
    "DiffLabels",
    "DiffLine",
    "DiffRenderer",
    "DiffReport",
    "DiffStats",
    "DiffStyles",
    "FileDiffStats",
    "FileHeader",
    "HunkHeader",
    "LineOrigin",
    "NoNewlineMarker",
    "iter_hunks",
    "iter_tree_diff",
    "split_lines",
]
