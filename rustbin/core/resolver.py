"""产物解析门面

每次构建调用显式构造一个 BinaryConfig，向下传递；不使用全局单例。
各组件懒加载、同实例共享（清单只读一次，环境变量在构造时快照）。

用法:
    cfg = BinaryConfig(Options(cargo_project_path="native"))
    cfg.library_name()              # "my_crate"
    cfg.shared_library_filename()   # "libmy_crate.so"
    cfg.tarball_filename("1.0.0")   # "my_crate-1.0.0-cpython311-linux-x86_64.tar.gz"

    plan = cfg.plan(tag="v1.0.0")
    if plan.strategy == "download":
        url = plan.uri_format % plan.fields   # 插值由编排层完成

测试时注入假平台与环境:
    cfg = BinaryConfig(opts, env={}, probe=StaticPlatformProbe(info))
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from rustbin.core.artifact import ArtifactLocator
from rustbin.core.config import ENV_DEBUG_FILENAME, Options, env_lookup, resolve_setting
from rustbin.core.exceptions import ValidationError
from rustbin.core.manifest import ManifestReader
from rustbin.core.naming import NameResolver
from rustbin.core.paths import PathResolver
from rustbin.core.platform import HostPlatformProbe
from rustbin.core.protocols import ManifestLoader, PlatformProbe
from rustbin.core.tags import TagMatcher
from rustbin.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)

STRATEGY_DOWNLOAD = "download"
STRATEGY_BUILD = "build"


@dataclass(frozen=True)
class BinaryPlan:
    """构建还是下载的决策结果"""

    strategy: str            # "download" | "build"
    reason: str
    version: str
    install_path: str
    tag: str = ""
    tarball_filename: str = ""
    uri_format: str | None = None
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def should_download(self) -> bool:
        return self.strategy == STRATEGY_DOWNLOAD

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BinaryConfig:
    """懒加载的解析门面，持有一组共享的解析组件"""

    def __init__(
        self,
        options: Options | None = None,
        *,
        env: Mapping[str, str] | None = None,
        probe: PlatformProbe | None = None,
        manifest_loader: ManifestLoader | None = None,
    ) -> None:
        self._options = options or Options()
        self._env: Mapping[str, str] = dict(os.environ if env is None else env)
        self._probe = probe
        self._manifest_loader = manifest_loader
        self._instances: dict[str, object] = {}

    @property
    def options(self) -> Options:
        return self._options

    # ---- 组件 ----

    @property
    def probe(self) -> PlatformProbe:
        if self._probe is None:
            self._probe = HostPlatformProbe()
        return self._probe

    @property
    def paths(self) -> PathResolver:
        if "paths" not in self._instances:
            self._instances["paths"] = PathResolver(self._options)
        return self._instances["paths"]  # type: ignore[return-value]

    @property
    def manifest(self) -> ManifestReader:
        if "manifest" not in self._instances:
            self._instances["manifest"] = ManifestReader(
                self.paths.cargo_project_root(), loader=self._manifest_loader,
            )
        return self._instances["manifest"]  # type: ignore[return-value]

    @property
    def names(self) -> NameResolver:
        if "names" not in self._instances:
            self._instances["names"] = NameResolver(self.manifest, self.probe, self.paths)
        return self._instances["names"]  # type: ignore[return-value]

    @property
    def artifacts(self) -> ArtifactLocator:
        if "artifacts" not in self._instances:
            self._instances["artifacts"] = ArtifactLocator(
                self.names, self.probe, self.manifest, self._options, self._env,
            )
        return self._instances["artifacts"]  # type: ignore[return-value]

    @property
    def tags(self) -> TagMatcher:
        if "tags" not in self._instances:
            self._instances["tags"] = TagMatcher(self._tag_regex_override)
        return self._instances["tags"]  # type: ignore[return-value]

    def _tag_regex_override(self) -> str | None:
        if self._options.git_tag_regex:
            return self._options.git_tag_regex
        # 默认正则不依赖清单；只有清单存在时才读取其中的覆盖项
        if not self.manifest.exists():
            return None
        value = self.manifest.tool_config().get("git_tag_regex")
        return value if isinstance(value, str) else None

    # ---- 快捷访问 ----

    def debug_filename(self) -> str | None:
        """诊断输出文件: RUSTBIN_DEBUG_FILENAME > Options.debug_filename"""
        return resolve_setting(
            env_lookup(self._env, ENV_DEBUG_FILENAME), self._options.debug_filename,
        )

    def crate_version(self) -> str | None:
        return self.manifest.package_version()

    def tool_config(self) -> dict[str, Any]:
        return self.manifest.tool_config()

    def library_name(self) -> str | None:
        return self.names.library_name()

    def shared_extension(self) -> str:
        return self.names.shared_extension()

    def shared_library_filename(self) -> str:
        return self.names.shared_library_filename()

    def extension_install_path(self) -> Path:
        return self.names.extension_install_path()

    def tarball_filename(self, version: str) -> str:
        return self.artifacts.tarball_filename(version)

    def binary_uri_format(self) -> str | None:
        return self.artifacts.binary_uri_format()

    def tag_pattern(self) -> re.Pattern[str]:
        return self.tags.tag_pattern()

    def matches(self, tag: str) -> bool:
        return self.tags.matches(tag)

    # ---- 决策 ----

    def plan(self, version: str | None = None, tag: str | None = None) -> BinaryPlan:
        """决定下载预编译产物还是本地编译

        规则:
          1. 未配置下载模板 → build
          2. 给定标签但不匹配标签正则 → build
          3. 否则 → download（模板必须是 http/https）
        """
        ver = version or self.crate_version()
        if not ver:
            raise ValidationError(
                f"未指定版本，且清单中没有 [package] version: {self.manifest.manifest_path}"
            )
        install_path = str(self.extension_install_path())
        uri_format = self.binary_uri_format()

        if uri_format is None:
            result = BinaryPlan(
                strategy=STRATEGY_BUILD, reason="download disabled",
                version=ver, install_path=install_path, tag=tag or "",
            )
        elif tag is not None and not self.matches(tag):
            result = BinaryPlan(
                strategy=STRATEGY_BUILD,
                reason=f"tag {tag!r} does not match {self.tag_pattern().pattern}",
                version=ver, install_path=install_path, tag=tag,
            )
        else:
            validate_url_scheme(uri_format, context="binary_uri_format")
            result = BinaryPlan(
                strategy=STRATEGY_DOWNLOAD, reason="prebuilt binary available",
                version=ver, install_path=install_path, tag=tag or "",
                tarball_filename=self.tarball_filename(ver),
                uri_format=uri_format,
                fields=self.artifacts.uri_fields(ver, tag),
            )

        logger.info("产物决策: %s (%s) -> %s", result.strategy, result.reason, install_path)
        return result

    def summary(self) -> dict[str, Any]:
        """当前解析结果汇总（供 CLI info 输出）"""
        info = self.probe.info()
        name = self.library_name()
        data: dict[str, Any] = {
            "platform": info.to_dict(),
            "python_project_root": str(self.paths.python_project_root()),
            "cargo_project_root": str(self.paths.cargo_project_root()),
            "crate_version": self.crate_version(),
            "library_name": name,
            "shared_extension": self.shared_extension(),
            "shared_library": self.shared_library_filename() if name else None,
            "install_path": str(self.extension_install_path()) if name else None,
            "runtime": self.artifacts.runtime_id(),
            "binary_uri_format": self.binary_uri_format(),
            "git_tag_regex": self.tag_pattern().pattern,
        }
        if isinstance(self.probe, HostPlatformProbe):
            libpython = self.probe.libpython_path()
            data["libpython_path"] = str(libpython) if libpython else None
            data["dynamic_linker_flags"] = self.probe.dynamic_linker_flags()
        return data
