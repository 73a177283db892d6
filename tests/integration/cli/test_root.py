"""Integration tests for global options and help."""

from collections.abc import Callable
from pathlib import Path

import pytest


class TestHelp:
    def test_lists_commands(
        self,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        ccg_cli("--help")

        captured = capsys.readouterr()
        for command in ("init", "create", "list", "restore", "show", "diff"):
            assert command in captured.out


class TestGlobalOptions:
    def test_missing_config_file_exits(
        self,
        tmp_path: Path,
        ccg_cli_with_exit_code: Callable[..., int],
    ) -> None:
        code = ccg_cli_with_exit_code(
            "--config", str(tmp_path / "missing.toml"), "list"
        )

        assert code == 1

    def test_config_file_sets_language(
        self,
        tmp_path: Path,
        git_repo: Path,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        config = tmp_path / "custom.toml"
        config.write_text('[ui]\nlanguage = "zh"\n')

        ccg_cli("--config", str(config), "--repo", str(git_repo), "list")

        assert "未找到检查点。" in capsys.readouterr().out

    def test_environment_sets_language(
        self,
        git_repo: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        monkeypatch.setenv("CCG_UI__LANGUAGE", "zh")

        ccg_cli("--repo", str(git_repo), "list")

        assert "未找到检查点。" in capsys.readouterr().out

    def test_quiet_suppresses_output(
        self,
        git_repo: Path,
        capsys: pytest.CaptureFixture[str],
        ccg_cli: Callable[..., None],
    ) -> None:
        ccg_cli("--quiet", "--repo", str(git_repo), "list")

        assert capsys.readouterr().out == ""

    def test_commands_are_logged(
        self,
        git_repo: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        ccg_cli: Callable[..., None],
    ) -> None:
        log_file = tmp_path / "logs" / "cli.log"
        monkeypatch.setenv("CCG_LOGGING__FILE", str(log_file))
        (git_repo / "a.txt").write_text("a")

        ccg_cli("--verbose", "--repo", str(git_repo), "create", "-m", "logged")

        content = log_file.read_text()
        assert '"event": "checkpoint_created"' in content
        assert '"command": "create"' in content
