"""库名与共享库文件名解析

Cargo 会把库名中的连字符替换为下划线，产物文件名必须与之完全一致，
否则动态加载器找不到共享库。

平台扩展名规则（三选一）:
  1. 原生后缀为 macOS bundle → "dylib"
  2. Windows 家族          → "dll"
  3. 其他                  → 原生后缀原样返回（Linux 为 "so"）
"""

from __future__ import annotations

import logging
from pathlib import Path

from rustbin.core.exceptions import MissingLibraryNameError
from rustbin.core.manifest import ManifestReader
from rustbin.core.paths import PathResolver
from rustbin.core.platform import MACOS_BUNDLE_EXT, PlatformInfo
from rustbin.core.protocols import PlatformProbe

logger = logging.getLogger(__name__)

# 共享库在 Python 项目中的安装子目录
LIBRARY_SUBDIR = "lib"


def normalize_library_name(name: str) -> str:
    return name.replace("-", "_")


def shared_extension_for(info: PlatformInfo) -> str:
    if info.native_ext == MACOS_BUNDLE_EXT:
        return "dylib"
    if info.windows:
        return "dll"
    return info.native_ext


def shared_library_filename_for(library_name: str, info: PlatformInfo) -> str:
    filename = f"{library_name}.{shared_extension_for(info)}"
    if not info.windows:
        filename = f"lib{filename}"
    return filename


class NameResolver:
    """库名解析器"""

    def __init__(
        self,
        manifest: ManifestReader,
        probe: PlatformProbe,
        paths: PathResolver,
    ) -> None:
        self.manifest = manifest
        self.probe = probe
        self.paths = paths
        self._library_name: str | None = None
        self._library_name_done = False
        self._shared_library: str | None = None

    def library_name(self) -> str | None:
        """lib.name 优先，否则 package.name；都没有时返回 None（由调用方校验）"""
        if not self._library_name_done:
            m = self.manifest.load()
            name = m.get_str("lib", "name") or m.get_str("package", "name")
            self._library_name = normalize_library_name(name) if name else None
            if self._library_name is None:
                logger.warning("清单未声明 lib.name / package.name: %s", m.path)
            self._library_name_done = True
        return self._library_name

    def require_library_name(self) -> str:
        name = self.library_name()
        if name is None:
            raise MissingLibraryNameError(
                f"无法确定库名，请在 {self.manifest.manifest_path} 中设置 "
                "[lib] name 或 [package] name"
            )
        return name

    def shared_extension(self) -> str:
        return shared_extension_for(self.probe.info())

    def shared_library_filename(self) -> str:
        """如 libmy_crate.so / libmy_crate.dylib / my_crate.dll"""
        if self._shared_library is None:
            self._shared_library = shared_library_filename_for(
                self.require_library_name(), self.probe.info(),
            )
        return self._shared_library

    def extension_install_path(self) -> Path:
        """共享库最终在 Python 项目中的位置: <python_root>/lib/<shared_library>"""
        return self.paths.python_path(LIBRARY_SUBDIR, self.shared_library_filename())
