"""统一异常体系

所有业务异常继承 RustbinError，携带 code 字段。
CLI 层据此输出一行友好提示，编排层据此中止构建决策。

注意: 标签不匹配、下载模板缺失都不是异常，而是正常的返回值
(False / None)，由调用方显式处理。
"""

from __future__ import annotations


class RustbinError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(RustbinError):
    """配置文件缺失或内容无效（含非法的标签正则）"""

    code = "CONFIG_ERROR"


class ManifestUnreadableError(RustbinError):
    """Cargo.toml 不存在、无法读取或 TOML 语法错误"""

    code = "MANIFEST_UNREADABLE"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class MissingLibraryNameError(RustbinError):
    """清单中既没有 lib.name 也没有 package.name，无法拼出文件名"""

    code = "MISSING_LIBRARY_NAME"


class ValidationError(RustbinError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
