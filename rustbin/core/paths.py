"""项目路径解析

Python 项目根目录与 Cargo 项目根目录可分别通过 Options 覆盖，
默认都取首次访问时的当前工作目录。只做路径拼接，不检查存在性。
"""

from __future__ import annotations

from pathlib import Path

from rustbin.core.config import Options


def join_under(root: str | Path, *segments: str | Path) -> Path:
    """纯路径拼接"""
    return Path(root).joinpath(*segments)


class PathResolver:
    """项目路径解析器"""

    def __init__(self, options: Options | None = None) -> None:
        self.options = options or Options()
        self._python_root: Path | None = None
        self._cargo_root: Path | None = None

    def python_project_root(self) -> Path:
        if self._python_root is None:
            self._python_root = Path(self.options.python_project_path or Path.cwd())
        return self._python_root

    def cargo_project_root(self) -> Path:
        if self._cargo_root is None:
            self._cargo_root = Path(self.options.cargo_project_path or Path.cwd())
        return self._cargo_root

    def python_path(self, *segments: str | Path) -> Path:
        """Python 项目根目录下的相对路径"""
        return join_under(self.python_project_root(), *segments)

    def cargo_path(self, *segments: str | Path) -> Path:
        """Cargo 项目根目录下的相对路径"""
        return join_under(self.cargo_project_root(), *segments)
