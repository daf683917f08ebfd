"""发布标签匹配测试"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from rustbin.core.exceptions import ConfigError, ManifestUnreadableError
from rustbin.core.resolver import BinaryConfig
from rustbin.core.tags import DEFAULT_TAG_PATTERN, DEFAULT_TAG_REGEX, TagMatcher


class TestDefaultPattern:
    @pytest.mark.parametrize(("tag", "expected"), [
        ("v1.2.3", True),
        ("v0.0.0", True),
        ("v10.20.30", True),
        ("1.2.3", False),
        ("v1.2", False),
        ("v1.2.3-rc1", False),
        ("xv1.2.3", False),
        ("", False),
        ("v\u0661.\u0662.\u0663", False),  # 阿拉伯-印度数字
        ("v1.2.3\n", False),  # 未 strip 的 git tag 输出
        ("v1.2.3\nv4.5.6", False),
    ])
    def test_matches(self, tag: str, expected: bool) -> None:
        assert TagMatcher().matches(tag) is expected

    def test_default_pattern_object(self) -> None:
        assert TagMatcher().tag_pattern() is DEFAULT_TAG_PATTERN
        assert DEFAULT_TAG_PATTERN.pattern == DEFAULT_TAG_REGEX == r"^(v\d+\.\d+\.\d+)$"


class TestOverride:
    def test_user_pattern(self) -> None:
        m = TagMatcher(r"^release-\d+$")
        assert m.matches("release-42")
        assert not m.matches("v1.2.3")
        assert not m.matches("release-\u0664\u0662")

    def test_lazy_callable_read_once(self) -> None:
        calls: list[int] = []

        def source() -> str:
            calls.append(1)
            return r"^r\d+$"

        m = TagMatcher(source)
        assert calls == []
        assert m.matches("r1") and not m.matches("v1.0.0")
        assert len(calls) == 1

    def test_invalid_pattern_raises_config_error(self) -> None:
        with pytest.raises(ConfigError, match="git_tag_regex"):
            TagMatcher("([unclosed").tag_pattern()

    def test_eligible_preserves_order(self) -> None:
        tags = ["v2.0.0", "nightly", "v1.0.0", "v1.0.0-beta"]
        assert TagMatcher().eligible(tags) == ["v2.0.0", "v1.0.0"]

    def test_option_over_manifest(
        self, write_cargo_toml: Callable[..., Path], make_config: Callable[..., BinaryConfig],
    ) -> None:
        write_cargo_toml({
            "package": {"name": "demo", "metadata": {"rustbin": {"git_tag_regex": r"^toml-\d+$"}}},
        })
        assert make_config().matches("toml-1")
        cfg = make_config(git_tag_regex=r"^opt-\d+$")
        assert cfg.matches("opt-1")
        assert not cfg.matches("toml-1")

    def test_option_does_not_read_manifest(self, make_config: Callable[..., BinaryConfig]) -> None:
        # tmp_path 下没有 Cargo.toml
        cfg = make_config(git_tag_regex=r"^opt-\d+$")
        assert cfg.matches("opt-7")

    def test_default_pattern_without_manifest(self, make_config: Callable[..., BinaryConfig]) -> None:
        # tmp_path 下没有 Cargo.toml，默认正则照常可用
        cfg = make_config()
        assert cfg.matches("v1.2.3")
        assert not cfg.matches("v1.2")
        assert cfg.tag_pattern().pattern == r"^(v\d+\.\d+\.\d+)$"

    def test_invalid_manifest_still_raises(
        self, write_cargo_toml: Callable[..., Path], make_config: Callable[..., BinaryConfig],
    ) -> None:
        write_cargo_toml(raw="[package\nname = ")
        with pytest.raises(ManifestUnreadableError):
            make_config().matches("v1.2.3")
