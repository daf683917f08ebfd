"""预编译产物定位

tarball 文件名必须由发布方和使用方各自独立拼出完全一致的结果:

    {library_name}-{version}-{runtime}{major}{minor}-{os}-{arch}.tar.gz

下载 URI 模板的优先级:
    RUSTBIN_BINARY_URI_FORMAT > Options.binary_uri_format
    > [package.metadata.rustbin] binary_uri_format > None（禁用下载，回退到本地编译）

这里只提供模板和填充字段，不做插值。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rustbin.core.config import ENV_BINARY_URI_FORMAT, Options, env_lookup, resolve_setting
from rustbin.core.manifest import ManifestReader
from rustbin.core.naming import NameResolver
from rustbin.core.protocols import PlatformProbe

logger = logging.getLogger(__name__)

TARBALL_SUFFIX = ".tar.gz"


class ArtifactLocator:
    """tarball 文件名与下载模板"""

    def __init__(
        self,
        names: NameResolver,
        probe: PlatformProbe,
        manifest: ManifestReader,
        options: Options,
        env: Mapping[str, str],
    ) -> None:
        self.names = names
        self.probe = probe
        self.manifest = manifest
        self.options = options
        self.env = env
        self._runtime_id: str | None = None
        self._uri_format: str | None = None
        self._uri_format_done = False

    def runtime_id(self) -> str:
        """运行时标识，如 cpython311 / ruby30"""
        if self._runtime_id is None:
            info = self.probe.info()
            major, minor = info.runtime_major_minor
            self._runtime_id = f"{info.runtime_name}{major}{minor}"
        return self._runtime_id

    def tarball_filename(self, version: str) -> str:
        info = self.probe.info()
        return (
            f"{self.names.require_library_name()}-{version}-{self.runtime_id()}"
            f"-{info.system}-{info.machine}{TARBALL_SUFFIX}"
        )

    def binary_uri_format(self) -> str | None:
        """下载 URI 模板；None 表示禁用下载"""
        if not self._uri_format_done:
            self._uri_format = resolve_setting(
                env_lookup(self.env, ENV_BINARY_URI_FORMAT),
                self.options.binary_uri_format,
            )
            if self._uri_format is None:
                fmt = self.manifest.tool_config().get("binary_uri_format")
                self._uri_format = fmt if isinstance(fmt, str) and fmt else None
            if self._uri_format is None:
                logger.debug("未配置 binary_uri_format，下载已禁用")
            self._uri_format_done = True
        return self._uri_format

    def uri_fields(self, version: str, tag: str | None = None) -> dict[str, str]:
        """编排层填充模板所需的字段"""
        info = self.probe.info()
        return {
            "filename": self.tarball_filename(version),
            "version": version,
            "tag": tag or "",
            "library_name": self.names.require_library_name(),
            "runtime": self.runtime_id(),
            "os": info.system,
            "arch": info.machine,
        }
