"""Cargo.toml 清单读取

职责:
- 解析 {cargo_project_root}/Cargo.toml 为嵌套字典（只读一次，之后命中缓存）
- 对缺失字段容错：lookup() 返回 ABSENT 标记而不是抛异常
- 提取 [package.metadata.rustbin] 工具配置段

文件不存在或 TOML 语法错误时抛出 ManifestUnreadableError，
不重试，由编排层中止整个构建决策。
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from rustbin.core.config import TOOL_NAME
from rustbin.core.exceptions import ManifestUnreadableError
from rustbin.core.protocols import ManifestLoader

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "Cargo.toml"


class _Absent:
    """缺失字段标记（单例，布尔值为 False）"""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def load_toml(path: Path) -> dict[str, Any]:
    """默认加载器：tomllib 要求二进制模式打开"""
    with open(path, "rb") as f:
        return tomllib.load(f)


class Manifest:
    """解析后的清单（只读）"""

    def __init__(self, data: Mapping[str, Any], path: Path | None = None) -> None:
        self._data = data
        self.path = path

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def lookup(self, *keys: str) -> Any:
        """按路径取值；任一层缺失或不是表时返回 ABSENT"""
        node: Any = self._data
        for key in keys:
            if not isinstance(node, Mapping) or key not in node:
                return ABSENT
            node = node[key]
        return node

    def get_str(self, *keys: str) -> str | None:
        """取字符串字段，缺失或类型不符返回 None"""
        value = self.lookup(*keys)
        return value if isinstance(value, str) else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Manifest):
            return NotImplemented
        return self._data == other._data


class ManifestReader:
    """Cargo.toml 读取器，每个实例最多读一次磁盘"""

    def __init__(
        self,
        cargo_project_root: str | Path,
        loader: ManifestLoader | None = None,
    ) -> None:
        self.cargo_project_root = Path(cargo_project_root)
        self._loader = loader or load_toml
        self._manifest: Manifest | None = None
        self._tool_config: dict[str, Any] | None = None

    @property
    def manifest_path(self) -> Path:
        return self.cargo_project_root / MANIFEST_FILENAME

    def exists(self) -> bool:
        """清单文件是否存在（不解析）"""
        return self._manifest is not None or self.manifest_path.is_file()

    def load(self) -> Manifest:
        """解析清单并缓存；后续调用直接返回缓存"""
        if self._manifest is not None:
            return self._manifest

        path = self.manifest_path
        if not path.is_file():
            raise ManifestUnreadableError(f"清单文件不存在: {path}", path=str(path))
        try:
            data = self._loader(path)
        except (OSError, ValueError) as e:
            raise ManifestUnreadableError(
                f"清单文件无法解析: {path} ({e})", path=str(path),
            ) from e

        logger.debug("已解析清单: %s", path)
        self._manifest = Manifest(data, path=path)
        return self._manifest

    def package_version(self) -> str | None:
        """[package] version"""
        return self.load().get_str("package", "version")

    def tool_config(self) -> dict[str, Any]:
        """[package.metadata.rustbin] 段，缺失或不是表时返回空字典"""
        if self._tool_config is None:
            block = self.load().lookup("package", "metadata", TOOL_NAME)
            self._tool_config = dict(block) if isinstance(block, Mapping) else {}
        return self._tool_config
