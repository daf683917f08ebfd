"""平台探测

读取操作系统、CPU 架构、Python 运行时名称/版本以及原生扩展后缀。
这些值只是命名用的标识符，取不到时返回环境默认值而不是报错。

    probe = HostPlatformProbe()
    probe.operating_system()   # "linux"
    probe.architecture()       # "x86_64"
    probe.native_extension()   # "so" / "bundle" / "dll"

测试或交叉命名时使用 StaticPlatformProbe(PlatformInfo(...))。
"""

from __future__ import annotations

import logging
import platform as platform_module
import shlex
import sys
import sysconfig
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"
DEFAULT_NATIVE_EXT = "so"

# macOS 可加载模块 (MH_BUNDLE) 的后缀约定
MACOS_BUNDLE_EXT = "bundle"

_WINDOWS_PREFIXES = ("windows", "win32", "cygwin", "mingw", "msys")


@dataclass(frozen=True)
class PlatformInfo:
    """平台信息（进程生命周期内不变）"""

    system: str            # linux, darwin, windows
    machine: str           # x86_64, arm64, amd64
    runtime_name: str      # cpython, pypy
    runtime_version: str   # "3.11"
    native_ext: str        # so, bundle, dll（不带点）
    windows: bool = False

    @property
    def runtime_major_minor(self) -> tuple[str, str]:
        parts = self.runtime_version.split(".")
        major = parts[0] if parts else ""
        minor = parts[1] if len(parts) > 1 else ""
        return major, minor

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_windows_family(system: str) -> bool:
    return system.lower().startswith(_WINDOWS_PREFIXES)


def _system() -> str:
    return (platform_module.system() or UNKNOWN).lower()


def _machine() -> str:
    return (platform_module.machine() or UNKNOWN).lower()


def _native_ext(system: str) -> str:
    if system == "darwin":
        return MACOS_BUNDLE_EXT
    if is_windows_family(system):
        return "dll"
    suffix = sysconfig.get_config_var("SHLIB_SUFFIX") or ""
    return suffix.lstrip(".") or DEFAULT_NATIVE_EXT


def detect_platform() -> PlatformInfo:
    """探测当前主机平台"""
    system = _system()
    info = PlatformInfo(
        system=system,
        machine=_machine(),
        runtime_name=sys.implementation.name or "python",
        runtime_version=f"{sys.version_info[0]}.{sys.version_info[1]}",
        native_ext=_native_ext(system),
        windows=is_windows_family(system) or sys.platform in ("win32", "cygwin"),
    )
    logger.debug("平台探测: %s", info)
    return info


class BasePlatformProbe(ABC):
    """平台探测访问器；子类实现 info()"""

    @abstractmethod
    def info(self) -> PlatformInfo:
        """返回平台信息，必须幂等"""

    def operating_system(self) -> str:
        return self.info().system

    def architecture(self) -> str:
        return self.info().machine

    def runtime_name(self) -> str:
        return self.info().runtime_name

    def runtime_version(self) -> str:
        return self.info().runtime_version

    def native_extension(self) -> str:
        return self.info().native_ext

    def is_windows(self) -> bool:
        return self.info().windows


class HostPlatformProbe(BasePlatformProbe):
    """读取当前解释器所在主机，首次访问时探测并缓存"""

    def __init__(self) -> None:
        self._info: PlatformInfo | None = None
        self._libpython: Path | None = None
        self._libpython_done = False
        self._linker_flags: str | None = None

    def info(self) -> PlatformInfo:
        if self._info is None:
            self._info = detect_platform()
        return self._info

    def libpython_path(self) -> Path | None:
        """共享 libpython 的绝对路径（静态链接的解释器返回 None）"""
        if not self._libpython_done:
            libdir = sysconfig.get_config_var("LIBDIR")
            ldlibrary = sysconfig.get_config_var("LDLIBRARY")
            self._libpython = Path(libdir) / ldlibrary if libdir and ldlibrary else None
            self._libpython_done = True
        return self._libpython

    def dynamic_linker_flags(self) -> str:
        """构建共享扩展时的链接参数（LDSHARED 去掉编译器命令本身）"""
        if self._linker_flags is None:
            ldshared = sysconfig.get_config_var("LDSHARED") or ""
            parts = shlex.split(ldshared)
            self._linker_flags = " ".join(parts[1:]).strip()
        return self._linker_flags


class StaticPlatformProbe(BasePlatformProbe):
    """固定平台信息，用于测试和交叉目标命名"""

    def __init__(self, info: PlatformInfo) -> None:
        self._info = info

    def info(self) -> PlatformInfo:
        return self._info
