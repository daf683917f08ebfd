"""rustbin 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from rustbin import __version__
from rustbin.core.config import DEFAULT_OPTIONS_FILE, ENV_LOG_JSON, ENV_LOG_LEVEL, Options
from rustbin.core.exceptions import RustbinError
from rustbin.core.resolver import BinaryConfig
from rustbin.utils.logger import setup_logging


def _cfg() -> BinaryConfig:
    """当前命令的 BinaryConfig"""
    return click.get_current_context().find_object(BinaryConfig)


def _fail(exc: RustbinError) -> click.ClickException:
    return click.ClickException(f"[{exc.code}] {exc}")


@click.group()
@click.version_option(version=__version__)
@click.option("--options", "options_file", default=DEFAULT_OPTIONS_FILE, help="YAML 选项文件路径")
@click.option("--python-project", default=None, help="Python 项目根目录（默认当前目录）")
@click.option("--cargo-project", default=None, help="Cargo 项目根目录（默认当前目录）")
@click.pass_context
def main(
    ctx: click.Context, options_file: str,
    python_project: str | None, cargo_project: str | None,
) -> None:
    """rustbin - Cargo 原生库预编译产物命名与解析"""
    try:
        opts = Options.from_file(
            options_file,
            python_project_path=python_project,
            cargo_project_path=cargo_project,
        )
    except RustbinError as e:
        raise _fail(e) from e
    cfg = BinaryConfig(opts)
    debug_filename = cfg.debug_filename()
    try:
        setup_logging(
            level=os.getenv(ENV_LOG_LEVEL, "INFO"),
            json_output=os.getenv(ENV_LOG_JSON, "") == "1",
            debug_filename=debug_filename,
        )
    except OSError as e:
        raise click.ClickException(f"无法打开诊断文件: {debug_filename} ({e})") from e
    ctx.obj = cfg


# 注册各领域子命令
from rustbin.cli.cmd_inspect import register as _reg_inspect  # noqa: E402

_reg_inspect(main)
