"""Git repository access for checkpoint operations.

This module wraps a dulwich ``Repo`` with the primitives the checkpoint
workflow needs: reading and moving HEAD, creating and advancing branches,
snapshotting the working tree into a tree object, writing commits, walking
history and hard-resetting the working tree to a commit.
"""

import os
import shutil
import stat
import time
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import TracebackType
from typing import Final, Self

from dulwich import porcelain
from dulwich.diff_tree import tree_changes
from dulwich.errors import NotGitRepository
from dulwich.index import (
    IndexEntry,
    blob_from_path_and_stat,
    build_file_from_blob,
    cleanup_mode,
    commit_tree,
    index_entry_from_stat,
)
from dulwich.object_store import BaseObjectStore, iter_tree_contents
from dulwich.objects import S_ISGITLINK, Blob, Commit, Tree
from dulwich.porcelain import GitStatus
from dulwich.refs import SYMREF
from dulwich.repo import Repo

from ccg.config import IdentityConfig
from ccg.exceptions import BackendOperationFailedError, RepositoryNotFoundError
from ccg.repository._models import CheckpointInfo, HeadState, ResetResult
from ccg.utils import get_author_info

CHECKPOINT_BRANCH: Final = "ccg"
BOOTSTRAP_MESSAGE: Final = "Initial commit - Checkpoint Guardian init"

_HEAD: Final = b"HEAD"
_BRANCH_PREFIX: Final = b"refs/heads/"
_FULL_SHA_LENGTH: Final = 40


def branch_ref(name: str) -> bytes:
    """Return the full reference name for a local branch."""
    return _BRANCH_PREFIX + name.encode()


def _tree_path(fs_path: bytes) -> bytes:
    """Convert a repository-relative filesystem path to a tree path."""
    return fs_path.replace(os.fsencode(os.sep), b"/")


def _fs_path(tree_path: bytes) -> bytes:
    return tree_path.replace(b"/", os.fsencode(os.sep))


def _display_path(path: bytes) -> str:
    return _tree_path(path).decode("utf-8", errors="replace")


def _mtime_ns(entry: IndexEntry) -> int:
    if isinstance(entry.mtime, tuple):
        seconds, nanoseconds = entry.mtime
        return seconds * 1_000_000_000 + nanoseconds
    return int(entry.mtime * 1_000_000_000)


def _parse_author_line(
    author: bytes, author_time: int, author_tz: int
) -> tuple[str, str, datetime]:
    """Parse an author line into name, email, and datetime.

    Args:
        author: Author bytes in "Name <email>" format.
        author_time: Unix timestamp.
        author_tz: Timezone offset in seconds east of UTC, as dulwich
            parses it from the commit header.

    Returns:
        Tuple of (name, email, datetime with the commit's timezone).
    """
    author_str = author.decode("utf-8", errors="replace")
    if "<" in author_str and author_str.endswith(">"):
        name_part = author_str.rsplit("<", 1)[0].strip()
        email_part = author_str.rsplit("<", 1)[1].rstrip(">")
    else:
        name_part = author_str
        email_part = ""

    tz = timezone(timedelta(seconds=author_tz))
    return (name_part, email_part, datetime.fromtimestamp(author_time, tz=tz))


def commit_to_info(commit: Commit) -> CheckpointInfo:
    """Convert a dulwich commit object to CheckpointInfo.

    Args:
        commit: The commit object.

    Returns:
        CheckpointInfo populated from the commit data.
    """
    author_name, author_email, timestamp = _parse_author_line(
        commit.author,
        commit.author_time,
        commit.author_timezone,
    )
    return CheckpointInfo(
        sha=commit.id.decode("ascii"),
        message=commit.message.decode("utf-8", errors="replace"),
        author_name=author_name,
        author_email=author_email,
        timestamp=timestamp,
        parent_shas=tuple(p.decode("ascii") for p in commit.parents),
        tree_sha=commit.tree.decode("ascii"),
    )


class CheckpointRepository:
    """Git repository used to store checkpoints.

    The class implements the context manager protocol; the underlying dulwich
    ``Repo`` is closed when the context exits.

    Attributes:
        root: The resolved path to the working tree root.
    """

    __slots__: Final = ("_identity", "_repo", "_root")
    _root: Path
    _repo: Repo
    _identity: IdentityConfig

    def __init__(
        self,
        working_dir: Path | None = None,
        *,
        identity: IdentityConfig | None = None,
    ) -> None:
        """Open the repository containing ``working_dir``.

        Args:
            working_dir: Directory inside the repository. Defaults to the
                current working directory.
            identity: Fallback commit identity.

        Raises:
            RepositoryNotFoundError: If no repository contains the directory.
        """
        start = (working_dir or Path.cwd()).resolve()
        try:
            repo = Repo.discover(str(start))
        except NotGitRepository as e:
            msg = f"Not a git repository (or any parent up to /): {start}"
            raise RepositoryNotFoundError(msg, path=start) from e
        if repo.bare:
            repo.close()
            msg = f"Bare repositories have no working tree: {start}"
            raise RepositoryNotFoundError(msg, path=start)
        self._repo = repo
        self._root = Path(repo.path).resolve()
        self._identity = identity if identity is not None else IdentityConfig()

    @classmethod
    def open_or_init(
        cls,
        working_dir: Path | None = None,
        *,
        identity: IdentityConfig | None = None,
    ) -> tuple[Self, bool]:
        """Open the repository containing ``working_dir``, creating one if needed.

        A new repository has HEAD pointing at the (unborn) checkpoint branch.

        Args:
            working_dir: Directory to open or initialize.
            identity: Fallback commit identity.

        Returns:
            Tuple of (repository, created) where created is True when a new
            repository was initialized.
        """
        start = (working_dir or Path.cwd()).resolve()
        try:
            return cls(start, identity=identity), False
        except RepositoryNotFoundError:
            pass

        try:
            new_repo = Repo.init(str(start))
            new_repo.refs.set_symbolic_ref(_HEAD, branch_ref(CHECKPOINT_BRANCH))
            new_repo.close()
        except OSError as e:
            msg = f"Failed to initialize repository at {start}: {e}"
            raise BackendOperationFailedError(msg, operation="init") from e
        return cls(start, identity=identity), True

    # =========================================================================
    # Context Manager Protocol
    # =========================================================================

    def __enter__(self) -> Self:
        """Enter the context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, closing the repository."""
        self.close()

    def close(self) -> None:
        """Close the underlying dulwich repository."""
        self._repo.close()

    @property
    def root(self) -> Path:
        """The working tree root directory."""
        return self._root

    @property
    def object_store(self) -> BaseObjectStore:
        """The repository object store."""
        return self._repo.object_store

    # =========================================================================
    # References
    # =========================================================================

    def read_head(self) -> HeadState:
        """Read where HEAD points.

        Returns:
            HeadState naming the branch, or the commit for a detached HEAD.

        Raises:
            BackendOperationFailedError: If HEAD is missing or points outside
                refs/heads/.
        """
        value = self._repo.refs.read_ref(_HEAD)
        if value is None:
            msg = "HEAD reference is missing"
            raise BackendOperationFailedError(msg, operation="read-head")
        if value.startswith(SYMREF):
            target = value[len(SYMREF) :].strip()
            if not target.startswith(_BRANCH_PREFIX):
                msg = f"HEAD points outside local branches: {target.decode()}"
                raise BackendOperationFailedError(msg, operation="read-head")
            return HeadState(branch=target[len(_BRANCH_PREFIX) :].decode())
        return HeadState(branch=None, sha=value.strip().decode("ascii"))

    def branch_sha(self, name: str) -> str | None:
        """Return the commit a local branch points to.

        Args:
            name: Branch name.

        Returns:
            The commit SHA, or None if the branch does not exist (or is unborn).
        """
        try:
            return self._repo.refs[branch_ref(name)].decode("ascii")
        except KeyError:
            return None

    def head_sha(self, head: HeadState) -> str | None:
        """Return the commit a head refers to, or None when unborn."""
        if head.branch is not None:
            return self.branch_sha(head.branch)
        return head.sha

    def point_head_at_branch(self, name: str) -> None:
        """Make HEAD a symbolic reference to ``refs/heads/<name>``.

        The index and working tree are left untouched.
        """
        self._repo.refs.set_symbolic_ref(_HEAD, branch_ref(name))

    def detach_head(self, sha: str) -> None:
        """Point HEAD directly at a commit."""
        # Drop the symbolic ref first so the update is not followed to a branch
        self._repo.refs.remove_if_equals(_HEAD, None)
        self._repo.refs.set_if_equals(_HEAD, None, sha.encode("ascii"))

    def create_branch(self, name: str, sha: str) -> None:
        """Create a local branch at ``sha``.

        Raises:
            BackendOperationFailedError: If the branch already exists.
        """
        if not self._repo.refs.add_if_new(branch_ref(name), sha.encode("ascii")):
            msg = f"Branch already exists: {name}"
            raise BackendOperationFailedError(msg, operation="create-branch")

    def advance_branch(self, name: str, old_sha: str | None, new_sha: str) -> None:
        """Move a branch from ``old_sha`` to ``new_sha``.

        The update only happens if the branch still points at ``old_sha``,
        which detects another process moving it in the meantime.

        Raises:
            BackendOperationFailedError: If the branch moved concurrently.
        """
        ref = branch_ref(name)
        new_ref = new_sha.encode("ascii")
        if old_sha is None:
            updated = self._repo.refs.add_if_new(ref, new_ref)
        else:
            updated = self._repo.refs.set_if_equals(
                ref, old_sha.encode("ascii"), new_ref
            )
        if not updated:
            msg = (
                f"Concurrent modification detected: branch '{name}' no longer "
                f"points at {old_sha or 'nothing'}"
            )
            raise BackendOperationFailedError(msg, operation="update-ref")

    # =========================================================================
    # Objects and History
    # =========================================================================

    def get_commit(self, sha: str) -> CheckpointInfo | None:
        """Look up a commit by full SHA.

        Args:
            sha: 40-character hex SHA.

        Returns:
            CheckpointInfo, or None if no commit object has that SHA.
        """
        if len(sha) != _FULL_SHA_LENGTH:
            return None
        try:
            obj = self._repo[sha.encode("ascii")]
        except (KeyError, ValueError, UnicodeEncodeError):
            return None
        if not isinstance(obj, Commit):
            return None
        return commit_to_info(obj)

    def iter_history(
        self,
        tip: str,
        *,
        exclude: str | None = None,
        max_entries: int | None = None,
    ) -> Iterator[CheckpointInfo]:
        """Walk commit ancestry from ``tip``, newest first.

        Args:
            tip: Commit SHA to start from.
            exclude: Stop at this commit and its ancestors.
            max_entries: Maximum number of commits to yield.

        Yields:
            CheckpointInfo for each commit in reverse chronological order.
        """
        walker = self._repo.get_walker(
            include=[tip.encode("ascii")],
            exclude=[exclude.encode("ascii")] if exclude else None,
            max_entries=max_entries,
        )
        for entry in walker:
            yield commit_to_info(entry.commit)

    def count_commits_between(self, base: str, tip: str) -> int:
        """Count commits reachable from ``tip`` but not from ``base``."""
        return sum(1 for _ in self.iter_history(tip, exclude=base))

    def write_empty_tree(self) -> str:
        """Store the empty tree and return its SHA."""
        tree = Tree()
        self._repo.object_store.add_object(tree)
        return tree.id.decode("ascii")

    def create_commit(self, tree_sha: str, parents: list[str], message: str) -> str:
        """Write a commit object without moving any reference.

        Author and committer come from the git identity, falling back to
        the configured identity. MERGE_HEAD and the repository hooks are
        left alone, so a merge in progress on the user's branch survives.

        Args:
            tree_sha: Tree the commit records.
            parents: Parent commit SHAs.
            message: Commit message.

        Returns:
            The new commit SHA.
        """
        identity = self._format_author_line()
        now = int(time.time())
        offset = time.localtime(now).tm_gmtoff

        commit = Commit()
        commit.tree = tree_sha.encode("ascii")
        commit.parents = [p.encode("ascii") for p in parents]
        commit.author = commit.committer = identity
        commit.author_time = commit.commit_time = now
        commit.author_timezone = commit.commit_timezone = offset
        commit.encoding = b"UTF-8"
        commit.message = message.encode("utf-8")
        self._repo.object_store.add_object(commit)
        return commit.id.decode("ascii")

    def _format_author_line(self) -> bytes:
        """Build the author/committer identity.

        Returns:
            Identity as bytes in "Name <email>" format.
        """
        author_info = get_author_info(cwd=str(self._root))
        name = author_info.name or self._identity.name
        email = author_info.email or self._identity.email
        return f"{name} <{email}>".encode()

    def changed_paths(self, old_tree: str | None, new_tree: str) -> tuple[str, ...]:
        """List paths that differ between two trees.

        Args:
            old_tree: Base tree SHA, or None for the empty tree.
            new_tree: Target tree SHA.

        Returns:
            Sorted repository-relative paths that were added, removed or changed.
        """
        paths: set[str] = set()
        for change in tree_changes(
            self._repo.object_store,
            old_tree.encode("ascii") if old_tree else None,
            new_tree.encode("ascii"),
        ):
            for entry in (change.old, change.new):
                if entry is not None and entry.path is not None:
                    paths.add(entry.path.decode("utf-8", errors="replace"))
        return tuple(sorted(paths))

    # =========================================================================
    # Working Tree
    # =========================================================================

    def _status(self) -> GitStatus:
        """Run ``porcelain.status`` and recheck racily clean index entries.

        dulwich trusts the cached stat of an entry whose file was rewritten
        in the same timestamp tick the index was written, so a same-size
        edit would go unnoticed. Those files are hashed and compared.
        """
        index = self._repo.open_index()
        try:
            index_mtime = os.stat(index.path).st_mtime_ns
        except FileNotFoundError:
            index_mtime = None
        status = porcelain.status(self._repo, untracked_files="all")
        if index_mtime is None:
            return status

        unstaged = set(status.unstaged)
        root = os.fsencode(self._root)
        for path, entry in index.items():
            if not isinstance(entry, IndexEntry) or _mtime_ns(entry) < index_mtime:
                continue
            fs_path = _fs_path(path)
            if fs_path in unstaged:
                continue
            full_path = os.path.join(root, fs_path)
            try:
                st = os.lstat(full_path)
            except (FileNotFoundError, NotADirectoryError):
                unstaged.add(fs_path)
                continue
            if not (stat.S_ISREG(st.st_mode) or stat.S_ISLNK(st.st_mode)):
                continue
            if blob_from_path_and_stat(full_path, st).id != entry.sha:
                unstaged.add(fs_path)
        return GitStatus(status.staged, sorted(unstaged), status.untracked)

    def _index_entries(self) -> dict[bytes, tuple[bytes, int]]:
        index = self._repo.open_index()
        entries: dict[bytes, tuple[bytes, int]] = {}
        for path, entry in index.items():
            # Conflicted entries are reported unstaged and read from disk
            if isinstance(entry, IndexEntry):
                entries[path] = (entry.sha, entry.mode)
        return entries

    def _write_tree(self, entries: dict[bytes, tuple[bytes, int]]) -> str:
        blobs = [(path, sha, mode) for path, (sha, mode) in entries.items()]
        return commit_tree(self._repo.object_store, blobs).decode("ascii")

    def dirty_paths(self) -> tuple[str, ...]:
        """List paths where the working tree or index differs from HEAD.

        Returns:
            Sorted repository-relative paths that are staged, modified,
            deleted or untracked. Ignored untracked files are not listed.
        """
        status = self._status()
        raw: set[bytes] = {*status.unstaged, *status.untracked}
        for paths in status.staged.values():
            raw.update(os.fsencode(p) for p in paths)
        return tuple(sorted(_display_path(p) for p in raw))

    def has_worktree_files(self) -> bool:
        """True if a snapshot of the working tree would contain any file."""
        return self.snapshot_worktree() != self.write_empty_tree()

    def snapshot_worktree(self) -> str:
        """Store the current working tree as a tree object.

        The index is overlaid with the paths ``porcelain.status`` reports as
        modified, deleted or untracked. Blobs and trees are written to the
        object store; the index and references are not touched.

        Returns:
            SHA of the tree matching the working tree.
        """
        status = self._status()
        entries = self._index_entries()
        store = self._repo.object_store
        root = os.fsencode(self._root)
        for fs_path in (*status.unstaged, *status.untracked):
            tree_path = _tree_path(fs_path)
            full_path = os.path.join(root, fs_path)
            try:
                st = os.lstat(full_path)
            except (FileNotFoundError, NotADirectoryError):
                _ = entries.pop(tree_path, None)
                continue
            if stat.S_ISDIR(st.st_mode):
                # A submodule keeps its recorded commit
                _, mode = entries.get(tree_path, (b"", 0))
                if not S_ISGITLINK(mode):
                    _ = entries.pop(tree_path, None)
                continue
            blob = blob_from_path_and_stat(full_path, st)
            if blob.id not in store:
                store.add_object(blob)
            entries[tree_path] = (blob.id, cleanup_mode(st.st_mode))
        return self._write_tree(entries)

    def stage_all(self) -> str:
        """Stage every change in the working tree and write the index tree.

        Untracked files are added with ``porcelain.add``, which skips ignored
        ones. Tracked files are restaged even when they match an ignore
        pattern, and deleted tracked files leave the index, as
        ``git add --all`` does.

        Returns:
            SHA of the tree written from the index.
        """
        status = self._status()
        if status.untracked:
            _ = porcelain.add(
                self._repo, paths=[os.fsdecode(p) for p in status.untracked]
            )
        if status.unstaged:
            self._repo.get_worktree().stage([os.fsdecode(p) for p in status.unstaged])
        return self._write_tree(self._index_entries())

    def hard_reset(self, branch: str, sha: str) -> ResetResult:
        """Reset a branch, the index and the working tree to a commit.

        Tracked and untracked non-ignored files that are not part of the
        target tree are deleted and directories left empty by the deletion
        are removed. Ignored untracked files are kept.

        Args:
            branch: Branch whose tip moves to ``sha``.
            sha: Target commit SHA.

        Returns:
            ResetResult describing the written and removed paths.
        """
        store = self._repo.object_store
        commit = self._repo[sha.encode("ascii")]
        if not isinstance(commit, Commit):
            msg = f"Object {sha} is not a commit"
            raise BackendOperationFailedError(msg, operation="reset")

        status = self._status()
        candidates = {*self._index_entries(), *map(_tree_path, status.untracked)}

        self._repo.refs[branch_ref(branch)] = commit.id

        target: dict[bytes, tuple[int, bytes]] = {
            entry.path: (entry.mode, entry.sha)
            for entry in iter_tree_contents(store, commit.tree)
        }

        removed: set[str] = set()
        for tree_path in sorted(candidates - target.keys()):
            full_path = self._root / os.fsdecode(tree_path)
            if not full_path.is_symlink() and not full_path.is_file():
                continue
            full_path.unlink()
            removed.add(_display_path(tree_path))
            self._prune_empty_dirs(full_path.parent)

        index = self._repo.open_index()
        index.clear()
        written: set[str] = set()
        for path, (mode, blob_sha) in sorted(target.items()):
            if S_ISGITLINK(mode):
                continue
            full_path = self._root / os.fsdecode(path)
            if full_path.is_dir() and not full_path.is_symlink():
                shutil.rmtree(full_path)
            full_path.parent.mkdir(parents=True, exist_ok=True)
            blob = store[blob_sha]
            if not isinstance(blob, Blob):
                continue
            _ = build_file_from_blob(blob, mode, os.fsencode(full_path))
            index[path] = index_entry_from_stat(
                os.lstat(full_path), blob_sha, mode=mode
            )
            written.add(_display_path(path))
        index.write()

        return ResetResult(
            sha=sha,
            written=frozenset(written),
            removed=frozenset(removed),
        )

    def _prune_empty_dirs(self, directory: Path) -> None:
        """Remove ``directory`` and its parents while they are empty."""
        current = directory
        while current != self._root and current.is_relative_to(self._root):
            try:
                if any(current.iterdir()):
                    return
                current.rmdir()
            except OSError:
                return
            current = current.parent
