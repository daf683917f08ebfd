"""选项加载与优先级解析测试"""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
import yaml

from rustbin.core.config import Options, env_lookup, resolve_setting
from rustbin.core.exceptions import ConfigError, RustbinError


class TestResolveSetting:
    @pytest.mark.parametrize(("env", "opt", "default", "expected"), [
        ("e", "o", "d", "e"),
        (None, "o", "d", "o"),
        ("", "o", "d", "o"),
        (None, None, "d", "d"),
        (None, None, None, None),
        (None, "", None, None),
    ])
    def test_precedence(self, env: str | None, opt: str | None,
                        default: str | None, expected: str | None) -> None:
        assert resolve_setting(env, opt, default) == expected

    def test_env_lookup(self) -> None:
        env = {"A": "1", "B": ""}
        assert env_lookup(env, "A") == "1"
        assert env_lookup(env, "B") is None
        assert env_lookup(env, "C") is None


class TestOptions:
    def test_defaults(self) -> None:
        opts = Options()
        assert opts.binary_uri_format is None
        assert opts.git_tag_regex is None

    def test_immutable(self) -> None:
        opts = Options(binary_uri_format="https://x")
        with pytest.raises(FrozenInstanceError):
            opts.binary_uri_format = "https://y"  # type: ignore[misc]

    def test_from_missing_file(self, tmp_path: Path) -> None:
        assert Options.from_file(tmp_path / "none.yml") == Options()

    def test_from_file_unknown_keys_ignored(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture,
    ) -> None:
        path = tmp_path / "rustbin.yml"
        path.write_text(yaml.dump({
            "binary_uri_format": "https://dl/%(filename)s",
            "git_tag_regex": r"^r\d+$",
            "team": "native",
        }), encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="rustbin.core.config"):
            opts = Options.from_file(path)
        assert opts.binary_uri_format == "https://dl/%(filename)s"
        assert opts.git_tag_regex == r"^r\d+$"
        assert "team" in caplog.text
        assert "team" not in opts.to_dict()
        assert hash(opts) == hash(Options.from_file(path))

    def test_overrides_beat_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rustbin.yml"
        path.write_text("cargo_project_path: from-file\n", encoding="utf-8")
        assert Options.from_file(path, cargo_project_path="cli").cargo_project_path == "cli"
        assert Options.from_file(path, cargo_project_path=None).cargo_project_path == "from-file"

    def test_invalid_yaml_raises_config_error(self, tmp_path: Path) -> None:
        path = tmp_path / "rustbin.yml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="选项文件无效") as exc_info:
            Options.from_file(path)
        assert isinstance(exc_info.value, RustbinError)
        assert exc_info.value.code == "CONFIG_ERROR"

    def test_non_string_option_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "rustbin.yml"
        path.write_text("git_tag_regex: 12\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="git_tag_regex"):
            Options.from_file(path)

    def test_to_dict(self) -> None:
        d = Options(debug_filename="dbg.log").to_dict()
        assert d["debug_filename"] == "dbg.log"
        assert set(d) == {
            "debug_filename", "binary_uri_format", "python_project_path",
            "cargo_project_path", "git_tag_regex",
        }
