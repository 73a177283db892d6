import pytest
from dulwich.errors import (
    ChecksumMismatch,
    CommitError,
    GitProtocolError,
    HookError,
    NotGitRepository,
    ObjectFormatException,
    RefFormatError,
)
from dulwich.porcelain import Error as PorcelainError

from ccg.checkpoint._service import _backend_operation
from ccg.exceptions import BackendOperationFailedError, NoChangesToCommitError


class TestBackendOperation:
    @pytest.mark.parametrize(
        "error",
        [
            OSError("disk full"),
            KeyError(b"deadbeef"),
            ObjectFormatException("malformed tree"),
            HookError("post-commit exited 1"),
            CommitError("commit-msg rejected"),
            ChecksumMismatch(b"a" * 40, b"b" * 40),
            RefFormatError("bad ref"),
            GitProtocolError("unexpected packet"),
            NotGitRepository("gone"),
            PorcelainError("index locked"),
        ],
    )
    def test_wraps_backend_errors(self, error: Exception) -> None:
        with (
            pytest.raises(BackendOperationFailedError) as exc_info,
            _backend_operation("create"),
        ):
            raise error

        assert exc_info.value.operation == "create"
        assert exc_info.value.__cause__ is error
        assert str(exc_info.value).startswith("Git operation 'create' failed")

    def test_own_errors_pass_through(self) -> None:
        error = NoChangesToCommitError("nothing")

        with pytest.raises(NoChangesToCommitError) as exc_info, _backend_operation(
            "create"
        ):
            raise error

        assert exc_info.value is error

    def test_unrelated_errors_pass_through(self) -> None:
        with pytest.raises(RuntimeError), _backend_operation("list"):
            raise RuntimeError
