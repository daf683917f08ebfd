"""领域协议定义

集中定义核心各组件之间的接口契约（Protocol），
测试时可注入假实现，无需 patch platform / sysconfig / 文件系统。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from rustbin.core.platform import PlatformInfo


class PlatformProbe(Protocol):
    """平台探测协议

    info() 必须幂等：同一进程内多次调用返回相同结果。
    """

    def info(self) -> PlatformInfo:
        """返回当前（或目标）平台信息"""
        ...


class ManifestLoader(Protocol):
    """清单加载协议: 把文件解析为嵌套字典

    解析失败时抛出 OSError 或 ValueError（tomllib.TOMLDecodeError 是其子类），
    由 ManifestReader 统一转换为 ManifestUnreadableError。
    """

    def __call__(self, path: Path) -> dict[str, Any]:
        ...
