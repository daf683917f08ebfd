"""共享 fixture: Cargo.toml 生成 + 固定平台探测"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rustbin.core.config import Options
from rustbin.core.platform import PlatformInfo, StaticPlatformProbe
from rustbin.core.resolver import BinaryConfig

LINUX = PlatformInfo(
    system="linux", machine="x86_64", runtime_name="ruby",
    runtime_version="3.0", native_ext="so", windows=False,
)
MACOS = PlatformInfo(
    system="darwin", machine="arm64", runtime_name="cpython",
    runtime_version="3.11", native_ext="bundle", windows=False,
)
WINDOWS = PlatformInfo(
    system="windows", machine="amd64", runtime_name="ruby",
    runtime_version="3.0", native_ext="dll", windows=True,
)


def _toml_value(value: Any) -> str:
    if isinstance(value, str):
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _render_toml(data: dict[str, Any], prefix: str = "") -> str:
    """把嵌套字典写成 TOML（只支持测试需要的标量 + 表）"""
    scalars = {k: v for k, v in data.items() if not isinstance(v, dict)}
    tables = {k: v for k, v in data.items() if isinstance(v, dict)}
    lines: list[str] = []
    if prefix and (scalars or not tables):
        lines.append(f"[{prefix}]")
    for k, v in scalars.items():
        lines.append(f"{k} = {_toml_value(v)}")
    for k, v in tables.items():
        name = f"{prefix}.{k}" if prefix else k
        lines.append(_render_toml(v, name))
    return "\n".join(lines) + "\n"


@pytest.fixture()
def write_cargo_toml(tmp_path: Path) -> Callable[..., Path]:
    """在 tmp_path（或指定目录）下写 Cargo.toml，返回所在目录"""

    def _write(data: dict[str, Any] | None = None, *, raw: str | None = None,
               directory: Path | None = None) -> Path:
        root = directory or tmp_path
        root.mkdir(parents=True, exist_ok=True)
        content = raw if raw is not None else _render_toml(data or {})
        (root / "Cargo.toml").write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., BinaryConfig]:
    """BinaryConfig 工厂：默认 Linux 平台、空环境、tmp_path 作为两个项目根"""

    def _make(
        info: PlatformInfo = LINUX,
        *,
        env: dict[str, str] | None = None,
        **options: Any,
    ) -> BinaryConfig:
        options.setdefault("cargo_project_path", str(tmp_path))
        options.setdefault("python_project_path", str(tmp_path))
        return BinaryConfig(
            Options(**options),
            env=env or {},
            probe=StaticPlatformProbe(info),
        )

    return _make


@pytest.fixture()
def platforms() -> dict[str, PlatformInfo]:
    return {"linux": LINUX, "macos": MACOS, "windows": WINDOWS}
