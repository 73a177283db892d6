from unittest.mock import MagicMock

import pytest

from ccg.checkpoint import BranchIsolation, IsolationState
from ccg.repository import BOOTSTRAP_MESSAGE, CHECKPOINT_BRANCH, HeadState

USER_SHA = "1" * 40
CHECKPOINT_SHA = "2" * 40


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock()
    repo.read_head.return_value = HeadState(branch="main")
    repo.branch_sha.return_value = CHECKPOINT_SHA
    repo.head_sha.return_value = USER_SHA
    return repo


# =============================================================================
# Enter and Leave
# =============================================================================


class TestBranchIsolation:
    def test_switches_to_checkpoint_branch_and_back(self, repo: MagicMock) -> None:
        with BranchIsolation(repo) as guard:
            assert guard.state is IsolationState.INSIDE
            assert guard.original == HeadState(branch="main")
            repo.point_head_at_branch.assert_called_once_with(CHECKPOINT_BRANCH)

        assert guard.state is IsolationState.OUTSIDE
        assert repo.point_head_at_branch.call_args_list[-1].args == ("main",)
        assert guard.bootstrapped is False
        repo.create_branch.assert_not_called()

    def test_restores_detached_head(self, repo: MagicMock) -> None:
        repo.read_head.return_value = HeadState(branch=None, sha=USER_SHA)

        with BranchIsolation(repo):
            pass

        repo.detach_head.assert_called_once_with(USER_SHA)

    def test_already_on_checkpoint_branch_does_not_switch(
        self, repo: MagicMock
    ) -> None:
        repo.read_head.return_value = HeadState(branch=CHECKPOINT_BRANCH)

        with BranchIsolation(repo):
            pass

        repo.point_head_at_branch.assert_not_called()
        repo.detach_head.assert_not_called()

    def test_restores_after_error_in_block(self, repo: MagicMock) -> None:
        guard = BranchIsolation(repo)

        with pytest.raises(ValueError, match="boom"), guard:
            raise ValueError("boom")

        assert guard.state is IsolationState.OUTSIDE
        assert repo.point_head_at_branch.call_args_list[-1].args == ("main",)

    def test_restore_failure_is_captured(self, repo: MagicMock) -> None:
        logger = MagicMock()
        repo.point_head_at_branch.side_effect = [None, OSError("locked")]

        with BranchIsolation(repo, logger=logger) as guard:
            pass

        assert isinstance(guard.restore_error, OSError)
        assert guard.state is IsolationState.OUTSIDE
        logger.warning.assert_called_once()

    def test_restore_failure_does_not_mask_block_error(self, repo: MagicMock) -> None:
        repo.point_head_at_branch.side_effect = [None, OSError("locked")]
        guard = BranchIsolation(repo)

        with pytest.raises(KeyError), guard:
            raise KeyError("inner")

        assert isinstance(guard.restore_error, OSError)

    def test_leave_runs_once(self, repo: MagicMock) -> None:
        guard = BranchIsolation(repo)
        _ = guard.enter()

        guard.leave()
        guard.leave()

        assert repo.point_head_at_branch.call_count == 2

    def test_leave_without_enter_does_nothing(self, repo: MagicMock) -> None:
        BranchIsolation(repo).leave()

        repo.point_head_at_branch.assert_not_called()

    def test_enter_twice_is_rejected(self, repo: MagicMock) -> None:
        guard = BranchIsolation(repo)
        _ = guard.enter()

        with pytest.raises(RuntimeError, match="inside"):
            _ = guard.enter()

    def test_failed_enter_resets_state(self, repo: MagicMock) -> None:
        repo.point_head_at_branch.side_effect = OSError("locked")
        guard = BranchIsolation(repo)

        with pytest.raises(OSError, match="locked"):
            _ = guard.enter()

        assert guard.state is IsolationState.OUTSIDE
        assert guard.original is None


# =============================================================================
# Bootstrap
# =============================================================================


class TestBootstrap:
    def test_creates_branch_at_current_commit(self, repo: MagicMock) -> None:
        repo.branch_sha.return_value = None

        with BranchIsolation(repo) as guard:
            pass

        assert guard.bootstrapped is True
        repo.create_branch.assert_called_once_with(CHECKPOINT_BRANCH, USER_SHA)
        repo.create_commit.assert_not_called()

    def test_unborn_branch_gets_empty_root_commit(self, repo: MagicMock) -> None:
        repo.branch_sha.return_value = None
        repo.head_sha.return_value = None
        repo.write_empty_tree.return_value = "tree"
        repo.create_commit.return_value = "root"

        with BranchIsolation(repo):
            pass

        repo.create_commit.assert_called_once_with("tree", [], BOOTSTRAP_MESSAGE)
        repo.advance_branch.assert_called_once_with("main", None, "root")
        repo.create_branch.assert_called_once_with(CHECKPOINT_BRANCH, "root")

    def test_unborn_checkpoint_branch_is_not_duplicated(
        self, repo: MagicMock
    ) -> None:
        repo.read_head.return_value = HeadState(branch=CHECKPOINT_BRANCH)
        repo.branch_sha.return_value = None
        repo.head_sha.return_value = None
        repo.write_empty_tree.return_value = "tree"
        repo.create_commit.return_value = "root"

        with BranchIsolation(repo):
            pass

        repo.advance_branch.assert_called_once_with(CHECKPOINT_BRANCH, None, "root")
        repo.create_branch.assert_not_called()
