"""rustbin 日志配置

提供统一的日志配置，支持普通文本和结构化 JSON 两种 stderr 输出格式，
以及可选的 DEBUG 级别诊断文件 (RUSTBIN_DEBUG_FILENAME)。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于 CI 流水线消费

    输出格式:
        {
            "timestamp": "2024-01-01T12:00:00+00:00",
            "level": "INFO",
            "logger": "rustbin.core.resolver",
            "message": "log message",
            "module": "resolver",
            "function": "plan",
            "line": 42,
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    debug_filename: str | None = None,
) -> None:
    """配置根日志器

    参数:
        level: stderr 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: 为 True 时 stderr 使用 JSON 格式（适用于 CI）
        debug_filename: 诊断文件路径；给定时额外以 DEBUG 级别写入该文件

    说明:
        - 自动清理已有 handlers，避免重复输出
        - 根日志器级别取 stderr 级别与诊断文件级别中较低者

    示例:
        >>> setup_logging("INFO", debug_filename="rustbin-debug.log")
    """
    reset_logging()
    root = logging.getLogger()

    stream_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(stream_level)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)

    if debug_filename:
        file_handler = logging.FileHandler(debug_filename, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(stream_level)


def reset_logging() -> None:
    """重置根日志器配置

    清理所有已注册的 handlers，恢复到未配置状态。常用于测试。
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
