"""构建选项与环境变量优先级

Options 在构造时一次性给定，之后只读；所有派生值都由
Options + 环境变量快照 + Cargo.toml 计算得出。

支持从 YAML 文件加载 + 编程式覆盖:

    opts = Options.from_file("rustbin.yml")
    opts = Options(binary_uri_format="https://example.com/%(filename)s")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, TypeVar

import yaml

from rustbin.core.exceptions import ConfigError
from rustbin.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENV_PREFIX = "RUSTBIN_"
ENV_DEBUG_FILENAME = f"{ENV_PREFIX}DEBUG_FILENAME"
ENV_BINARY_URI_FORMAT = f"{ENV_PREFIX}BINARY_URI_FORMAT"
ENV_LOG_LEVEL = f"{ENV_PREFIX}LOG_LEVEL"
ENV_LOG_JSON = f"{ENV_PREFIX}LOG_JSON"

# Cargo.toml 中 [package.metadata.rustbin] 段
TOOL_NAME = "rustbin"

DEFAULT_OPTIONS_FILE = "rustbin.yml"


@dataclass(frozen=True)
class Options:
    """构建选项（全部可选，None 表示未设置）"""

    debug_filename: str | None = None
    binary_uri_format: str | None = None
    python_project_path: str | None = None
    cargo_project_path: str | None = None
    git_tag_regex: str | None = None

    @classmethod
    def from_file(cls, path: str | Path = DEFAULT_OPTIONS_FILE, **overrides: Any) -> Options:
        """从 YAML 文件加载选项，不存在则返回默认；关键字参数覆盖文件内容"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"选项文件无效: {path} ({e})") from e

        known = {f.name for f in fields(cls)}
        matched = {k: v for k, v in data.items() if k in known}
        ignored = sorted(str(k) for k in data if k not in known)
        if ignored:
            logger.warning("选项文件 %s 含未知配置项，已忽略: %s", path, ", ".join(ignored))
        for key, value in matched.items():
            if value is not None and not isinstance(value, str):
                raise ConfigError(
                    f"选项 '{key}' 必须是字符串 (实际类型: {type(value).__name__}): {path}"
                )
        matched.update({k: v for k, v in overrides.items() if v is not None})
        if data:
            logger.debug("选项已加载: %s (%d 项)", path, len(matched))
        return cls(**matched)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def resolve_setting(
    env_value: T | None,
    option_value: T | None,
    default: T | None = None,
) -> T | None:
    """按优先级解析单个配置项: 环境变量 > 显式选项 > 默认值

    空字符串视为未设置。
    """
    for value in (env_value, option_value):
        if value is not None and value != "":
            return value
    return default


def env_lookup(env: Mapping[str, str], name: str) -> str | None:
    """从环境变量快照读取，空值返回 None"""
    value = env.get(name)
    return value or None
