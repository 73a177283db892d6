"""Unit tests for filesystem locations."""

import sys
from pathlib import Path

import pytest

from ccg.utils import get_ccg_cli_log_file, get_ccg_log_dir, get_user_config_path

linux_only = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="XDG paths apply on Linux"
)


@linux_only
class TestPaths:
    def test_user_config_follows_xdg(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_user_config_path() == tmp_path / "ccg" / "config.toml"

    def test_cli_log_lives_in_log_dir(self) -> None:
        assert get_ccg_cli_log_file() == get_ccg_log_dir() / "cli.log"

    def test_log_dir_follows_xdg_state(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))

        assert get_ccg_log_dir().is_relative_to(tmp_path)
