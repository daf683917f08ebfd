"""发布标签匹配

只有匹配标签正则的 git 标签才被视为带有预编译产物的发布。
默认要求 v<major>.<minor>.<patch>，首尾锚定，不允许后缀。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from rustbin.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_TAG_REGEX = r"^(v\d+\.\d+\.\d+)$"
# \d 只匹配 ASCII 数字
DEFAULT_TAG_PATTERN = re.compile(DEFAULT_TAG_REGEX, re.ASCII)


class TagMatcher:
    """标签匹配器

    override: 用户给定的正则字符串，或返回它的无参函数（延迟到首次使用时才读取清单）。
    """

    def __init__(self, override: str | Callable[[], str | None] | None = None) -> None:
        self._override = override
        self._pattern: re.Pattern[str] | None = None

    def tag_pattern(self) -> re.Pattern[str]:
        if self._pattern is None:
            source = self._override() if callable(self._override) else self._override
            if source:
                try:
                    self._pattern = re.compile(source, re.ASCII)
                except re.error as e:
                    raise ConfigError(f"git_tag_regex 无效: {source!r} ({e})") from e
                logger.debug("使用自定义标签正则: %s", source)
            else:
                self._pattern = DEFAULT_TAG_PATTERN
        return self._pattern

    def matches(self, tag: str) -> bool:
        # git 标签不含换行；$ 会匹配末尾换行之前的位置
        if "\n" in tag:
            return False
        # search 而不是 match：锚定由正则自身决定
        return self.tag_pattern().search(tag) is not None

    def eligible(self, tags: Iterable[str]) -> list[str]:
        """过滤出可能带有预编译产物的标签，保持原顺序"""
        return [t for t in tags if self.matches(t)]
