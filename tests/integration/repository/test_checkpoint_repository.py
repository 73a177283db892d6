"""Integration tests for CheckpointRepository against real repositories."""

from pathlib import Path

import pytest
from dulwich.repo import Repo

from ccg.config import IdentityConfig
from ccg.exceptions import BackendOperationFailedError, RepositoryNotFoundError
from ccg.repository import (
    CHECKPOINT_BRANCH,
    CheckpointRepository,
    HeadState,
    branch_ref,
)
from tests.conftest import commit_files, listed_files, read_head_ref, write_files

EMPTY_TREE = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


# =============================================================================
# Opening
# =============================================================================


class TestOpen:
    def test_discovers_repository_from_subdirectory(self, git_repo: Path) -> None:
        nested = git_repo / "src" / "pkg"
        nested.mkdir(parents=True)

        with CheckpointRepository(nested) as repo:
            assert repo.root == git_repo.resolve()

    def test_outside_repository(self, work_dir: Path) -> None:
        with pytest.raises(RepositoryNotFoundError) as exc_info:
            CheckpointRepository(work_dir)

        assert exc_info.value.path == work_dir.resolve()

    def test_bare_repository_is_rejected(self, tmp_path: Path) -> None:
        Repo.init_bare(str(tmp_path / "bare.git"), mkdir=True).close()

        with pytest.raises(RepositoryNotFoundError, match="Bare"):
            CheckpointRepository(tmp_path / "bare.git")

    def test_open_or_init_creates_repository_on_checkpoint_branch(
        self, work_dir: Path
    ) -> None:
        repo, created = CheckpointRepository.open_or_init(work_dir)
        with repo:
            assert created is True
            assert repo.read_head() == HeadState(branch=CHECKPOINT_BRANCH)
        assert read_head_ref(work_dir) == b"ref: " + branch_ref(CHECKPOINT_BRANCH)

    def test_open_or_init_opens_existing(self, git_repo: Path) -> None:
        repo, created = CheckpointRepository.open_or_init(git_repo)
        with repo:
            assert created is False


# =============================================================================
# References
# =============================================================================


class TestReferences:
    def test_read_head_on_unborn_branch(self, git_repo: Path) -> None:
        with CheckpointRepository(git_repo) as repo:
            head = repo.read_head()

            assert head.branch is not None
            assert repo.head_sha(head) is None

    def test_detach_and_reattach(self, git_repo: Path) -> None:
        sha = commit_files(git_repo, {"a.txt": "a"})

        with CheckpointRepository(git_repo) as repo:
            branch = repo.read_head()
            repo.detach_head(sha)
            assert repo.read_head() == HeadState(branch=None, sha=sha)
            assert repo.branch_sha(branch.branch or "") == sha

            repo.point_head_at_branch(branch.branch or "")
            assert repo.read_head() == branch

    def test_create_branch_twice_fails(self, git_repo: Path) -> None:
        sha = commit_files(git_repo, {"a.txt": "a"})

        with CheckpointRepository(git_repo) as repo:
            repo.create_branch("ccg", sha)
            with pytest.raises(BackendOperationFailedError):
                repo.create_branch("ccg", sha)

    def test_advance_branch_detects_concurrent_move(self, git_repo: Path) -> None:
        first = commit_files(git_repo, {"a.txt": "a"})
        second = commit_files(git_repo, {"a.txt": "b"})

        with CheckpointRepository(git_repo) as repo:
            repo.create_branch("ccg", second)
            with pytest.raises(BackendOperationFailedError, match="Concurrent"):
                repo.advance_branch("ccg", first, second)

            repo.advance_branch("ccg", second, first)
            assert repo.branch_sha("ccg") == first


# =============================================================================
# Commits and History
# =============================================================================


class TestCommits:
    def test_create_commit_uses_identity(
        self, git_repo: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("CCG_AUTHOR_NAME")
        monkeypatch.delenv("CCG_AUTHOR_EMAIL")
        identity = IdentityConfig(name="Fallback", email="fallback@example.com")

        with CheckpointRepository(git_repo, identity=identity) as repo:
            sha = repo.create_commit(repo.write_empty_tree(), [], "root")
            info = repo.get_commit(sha)

        assert info is not None
        assert (info.author_name, info.author_email) == (
            "Fallback",
            "fallback@example.com",
        )
        assert info.tree_sha == EMPTY_TREE
        assert info.parent_shas == ()
        assert info.timestamp.tzinfo is not None

    def test_environment_identity_wins(self, git_repo: Path) -> None:
        with CheckpointRepository(git_repo) as repo:
            info = repo.get_commit(repo.create_commit(EMPTY_TREE, [], "x"))

        assert info is not None
        assert info.author_name == "Test User"

    @pytest.mark.parametrize("sha", ["abc", "z" * 40, "0" * 40])
    def test_get_commit_unknown(self, git_repo: Path, sha: str) -> None:
        with CheckpointRepository(git_repo) as repo:
            assert repo.get_commit(sha) is None

    def test_get_commit_rejects_non_commit(self, git_repo: Path) -> None:
        with CheckpointRepository(git_repo) as repo:
            assert repo.get_commit(repo.write_empty_tree()) is None

    def test_history_is_newest_first(self, git_repo: Path) -> None:
        first = commit_files(git_repo, {"a.txt": "1"}, "first")
        second = commit_files(git_repo, {"a.txt": "2"}, "second")
        third = commit_files(git_repo, {"a.txt": "3"}, "third")

        with CheckpointRepository(git_repo) as repo:
            shas = [info.sha for info in repo.iter_history(third)]
            assert shas == [third, second, first]
            assert [i.sha for i in repo.iter_history(third, exclude=first)] == [
                third,
                second,
            ]
            assert repo.count_commits_between(first, third) == 2
            assert repo.count_commits_between(third, third) == 0


# =============================================================================
# Working Tree
# =============================================================================


class TestWorktree:
    def test_snapshot_matches_staged_tree(self, git_repo: Path) -> None:
        write_files(git_repo, {"a.txt": "a", "dir/b.txt": "b"})

        with CheckpointRepository(git_repo) as repo:
            snapshot = repo.snapshot_worktree()
            assert repo.stage_all() == snapshot
            assert repo.changed_paths(None, snapshot) == ("a.txt", "dir/b.txt")

    def test_snapshot_skips_ignored_files(self, git_repo: Path) -> None:
        write_files(
            git_repo,
            {".gitignore": "*.log\nbuild/\n", "a.txt": "a", "x.log": "", "build/o": ""},
        )

        with CheckpointRepository(git_repo) as repo:
            paths = repo.changed_paths(None, repo.snapshot_worktree())

        assert paths == (".gitignore", "a.txt")

    def test_tracked_file_matching_ignore_rules_stays(self, git_repo: Path) -> None:
        commit_files(git_repo, {"settings.local": "token=1\n"})
        write_files(git_repo, {".gitignore": "settings.local\n"})

        with CheckpointRepository(git_repo) as repo:
            snapshot = repo.snapshot_worktree()
            assert repo.changed_paths(None, snapshot) == (
                ".gitignore",
                "settings.local",
            )
            assert repo.stage_all() == snapshot

        with Repo(str(git_repo)) as raw:
            assert b"settings.local" in raw.open_index()

    def test_stage_all_updates_tracked_ignored_file(self, git_repo: Path) -> None:
        commit_files(git_repo, {"settings.local": "token=1\n"})
        commit_files(git_repo, {".gitignore": "settings.local\n"})
        write_files(git_repo, {"settings.local": "token=2\n"})

        with CheckpointRepository(git_repo) as repo:
            base = repo.stage_all()
            write_files(git_repo, {"settings.local": "token=3\n"})
            assert repo.dirty_paths() == ("settings.local",)
            tree = repo.stage_all()

            assert repo.changed_paths(base, tree) == ("settings.local",)
            assert repo.snapshot_worktree() == tree

    def test_stage_all_drops_deleted_tracked_files(self, git_repo: Path) -> None:
        commit_files(git_repo, {"a.txt": "a", "b.txt": "b"})
        (git_repo / "b.txt").unlink()

        with CheckpointRepository(git_repo) as repo:
            tree = repo.stage_all()
            assert repo.changed_paths(None, tree) == ("a.txt",)

        with Repo(str(git_repo)) as raw:
            assert b"b.txt" not in raw.open_index()

    def test_dirty_paths(self, git_repo: Path) -> None:
        commit_files(git_repo, {".gitignore": "*.log\n", "a.txt": "a", "b.txt": "b"})

        with CheckpointRepository(git_repo) as repo:
            assert repo.dirty_paths() == ()

            write_files(git_repo, {"a.txt": "changed", "c.txt": "c", "x.log": ""})
            (git_repo / "b.txt").unlink()

            assert repo.dirty_paths() == ("a.txt", "b.txt", "c.txt")

    def test_empty_worktree(self, git_repo: Path) -> None:
        with CheckpointRepository(git_repo) as repo:
            assert repo.has_worktree_files() is False
            assert repo.snapshot_worktree() == EMPTY_TREE

    def test_changed_paths_between_trees(self, git_repo: Path) -> None:
        write_files(git_repo, {"a.txt": "a", "b.txt": "b"})
        with CheckpointRepository(git_repo) as repo:
            before = repo.snapshot_worktree()
            (git_repo / "b.txt").unlink()
            write_files(git_repo, {"a.txt": "changed", "c.txt": "c"})
            after = repo.snapshot_worktree()

            assert repo.changed_paths(before, after) == ("a.txt", "b.txt", "c.txt")

    def test_hard_reset_restores_tree_exactly(self, git_repo: Path) -> None:
        write_files(git_repo, {".gitignore": "*.log\n", "a.txt": "one", "d/b.txt": "b"})
        with CheckpointRepository(git_repo) as repo:
            tree = repo.stage_all()
            sha = repo.create_commit(tree, [], "snapshot")
            repo.create_branch("ccg", sha)

            (git_repo / "a.txt").write_text("two")
            write_files(git_repo, {"new/deep/c.txt": "c", "keep.log": "log"})
            (git_repo / "d" / "b.txt").unlink()

            result = repo.hard_reset("ccg", sha)

            assert repo.snapshot_worktree() == tree

        assert (git_repo / "a.txt").read_text() == "one"
        assert (git_repo / "d" / "b.txt").read_text() == "b"
        assert not (git_repo / "new").exists()
        assert (git_repo / "keep.log").exists()
        assert result.removed == frozenset({"new/deep/c.txt"})
        assert result.written == frozenset({".gitignore", "a.txt", "d/b.txt"})
        assert listed_files(git_repo) == {".gitignore", "a.txt", "d/b.txt", "keep.log"}
