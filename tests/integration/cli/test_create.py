"""Integration tests for the create command."""

import io
import sys
from collections.abc import Callable
from pathlib import Path

import orjson
import pytest

from ccg.hooks import MANUAL_CHECKPOINT_MESSAGE
from tests.conftest import created_sha, latest_checkpoint, write_files


class TestCreateWithMessage:
    def test_creates_checkpoint(
        self,
        git_repo: Path,
        capsys: pytest.CaptureFixture[str],
        ccg_cli_with_exit_code: Callable[..., int],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})

        code = ccg_cli_with_exit_code("--repo", str(git_repo), "create", "-m", "first")

        sha = created_sha(capsys.readouterr().out)
        assert code == 0
        assert len(sha) == 7
        info = latest_checkpoint(git_repo)
        assert info.sha.startswith(sha)
        assert info.message == "first"

    def test_verbose_prints_full_hash(
        self,
        git_repo: Path,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})

        ccg_cli("--verbose", "--repo", str(git_repo), "create", "--message", "x")

        assert len(created_sha(capsys.readouterr().out)) == 40

    def test_no_changes_is_not_an_error(
        self,
        git_repo: Path,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
        ccg_cli_with_exit_code: Callable[..., int],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})
        ccg_cli("--repo", str(git_repo), "create", "-m", "first")
        _ = capsys.readouterr()

        code = ccg_cli_with_exit_code("--repo", str(git_repo), "create", "-m", "again")

        assert code == 0
        assert "No file changes detected" in capsys.readouterr().out


class TestCreateFromStdin:
    def test_payload_builds_message_and_selects_repository(
        self,
        git_repo: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        write_files(git_repo, {"main.py": "print('hi')\n"})
        payload = {
            "tool_name": "Write",
            "tool_input": {"file_path": str(git_repo / "main.py")},
            "tool_response": {"structuredPatch": [{"lines": ["+print('hi')"]}]},
            "cwd": str(git_repo),
        }
        monkeypatch.setattr(sys, "stdin", io.StringIO(orjson.dumps(payload).decode()))

        ccg_cli("create")

        _ = created_sha(capsys.readouterr().out)
        message = latest_checkpoint(git_repo).message
        assert message.startswith("Write on main.py\n\nChanges:\n  +print('hi')\n")
        assert "Tool Input:" in message

    def test_plain_text_is_used_verbatim(
        self,
        git_repo: Path,
        monkeypatch: pytest.MonkeyPatch,
        ccg_cli: Callable[..., None],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})
        monkeypatch.setattr(sys, "stdin", io.StringIO("before refactor"))

        ccg_cli("--repo", str(git_repo), "create")

        assert latest_checkpoint(git_repo).message == "before refactor"

    def test_empty_input_is_manual_checkpoint(
        self,
        git_repo: Path,
        monkeypatch: pytest.MonkeyPatch,
        ccg_cli: Callable[..., None],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))

        ccg_cli("--repo", str(git_repo), "create")

        assert latest_checkpoint(git_repo).message == MANUAL_CHECKPOINT_MESSAGE

    def test_message_option_skips_stdin(
        self,
        git_repo: Path,
        monkeypatch: pytest.MonkeyPatch,
        ccg_cli: Callable[..., None],
    ) -> None:
        write_files(git_repo, {"a.txt": "a"})
        monkeypatch.setattr(sys, "stdin", io.StringIO("ignored"))

        ccg_cli("--repo", str(git_repo), "create", "-m", "explicit")

        assert latest_checkpoint(git_repo).message == "explicit"
