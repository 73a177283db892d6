from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from ccg.checkpoint import CommitResolver
from ccg.exceptions import AmbiguousHashError, CheckpointNotFoundError, InvalidHashError
from ccg.repository import CheckpointInfo


def _info(sha: str, message: str = "checkpoint") -> CheckpointInfo:
    return CheckpointInfo(
        sha=sha,
        message=message,
        author_name="Test User",
        author_email="test@example.com",
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        parent_shas=(),
        tree_sha="4b825dc642cb6eb9a060e54bf8d69288fbee4904",
    )


HISTORY = [
    _info("ab12" + "0" * 36, "third"),
    _info("ab34" + "1" * 36, "second"),
    _info("cd56" + "2" * 36, "first"),
]


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock()
    repo.iter_history.return_value = iter(HISTORY)
    repo.get_commit.side_effect = lambda sha: next(
        (info for info in HISTORY if info.sha == sha), None
    )
    return repo


class TestCommitResolver:
    def test_resolves_unique_prefix(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        assert resolver.resolve("cd") is HISTORY[2]
        repo.iter_history.assert_called_once_with(HISTORY[0].sha)

    def test_normalizes_case_and_whitespace(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        assert resolver.resolve("  AB3 \n") is HISTORY[1]

    def test_resolves_full_hash_directly(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        assert resolver.resolve(HISTORY[1].sha) is HISTORY[1]
        repo.iter_history.assert_not_called()

    def test_unknown_full_hash(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        with pytest.raises(CheckpointNotFoundError) as exc_info:
            resolver.resolve("f" * 40)

        assert exc_info.value.query == "f" * 40

    @pytest.mark.parametrize("query", ["", "a", "  a  ", "a" * 41])
    def test_rejects_bad_length(self, repo: MagicMock, query: str) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        with pytest.raises(InvalidHashError):
            resolver.resolve(query)

    def test_unknown_prefix(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        with pytest.raises(CheckpointNotFoundError):
            resolver.resolve("ee")

    def test_empty_branch_matches_nothing(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, None)

        with pytest.raises(CheckpointNotFoundError):
            resolver.resolve("ab")
        repo.iter_history.assert_not_called()

    def test_ambiguous_prefix_lists_candidates(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha)

        with pytest.raises(AmbiguousHashError) as exc_info:
            resolver.resolve("ab")

        error = exc_info.value
        assert error.candidates == (("ab12000", "third"), ("ab34111", "second"))
        assert error.remaining == 0
        assert isinstance(error, InvalidHashError)

    def test_candidates_are_capped(self, repo: MagicMock) -> None:
        resolver = CommitResolver(repo, HISTORY[0].sha, max_candidates=1)

        with pytest.raises(AmbiguousHashError) as exc_info:
            resolver.resolve("ab")

        assert exc_info.value.candidates == (("ab12000", "third"),)
        assert exc_info.value.remaining == 1

    def test_logs_prefix_resolution(self, repo: MagicMock) -> None:
        logger = MagicMock()
        resolver = CommitResolver(repo, HISTORY[0].sha, logger=logger)

        _ = resolver.resolve("cd")

        logger.debug.assert_called_once_with(
            "hash_prefix_resolved", prefix="cd", match_count=1
        )
