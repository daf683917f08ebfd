"""CLI: 查询命令（info, tarball, match-tag, plan）"""

from __future__ import annotations

import json

import click

from rustbin.cli import _cfg, _fail
from rustbin.core.exceptions import RustbinError


def register(group: click.Group) -> None:
    group.add_command(info)
    group.add_command(tarball)
    group.add_command(match_tag)
    group.add_command(plan)


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.command()
def info() -> None:
    """输出平台与产物命名解析结果"""
    try:
        _echo_json(_cfg().summary())
    except RustbinError as e:
        raise _fail(e) from e


@click.command()
@click.argument("version", required=False)
def tarball(version: str | None) -> None:
    """输出预编译 tarball 文件名（默认使用 Cargo.toml 中的版本）"""
    cfg = _cfg()
    try:
        ver = version or cfg.crate_version()
        if not ver:
            raise click.UsageError("Cargo.toml 未声明 [package] version，请显式给出 VERSION")
        click.echo(cfg.tarball_filename(ver))
    except RustbinError as e:
        raise _fail(e) from e


@click.command(name="match-tag")
@click.argument("tags", nargs=-1, required=True)
def match_tag(tags: tuple[str, ...]) -> None:
    """输出匹配发布标签正则的标签；全部不匹配时退出码为 1"""
    try:
        eligible = _cfg().tags.eligible(tags)
    except RustbinError as e:
        raise _fail(e) from e
    for t in eligible:
        click.echo(t)
    if not eligible:
        click.get_current_context().exit(1)


@click.command()
@click.option("--version", "version", default=None, help="产物版本（默认 Cargo.toml 版本）")
@click.option("--tag", default=None, help="候选发布标签")
def plan(version: str | None, tag: str | None) -> None:
    """输出构建/下载决策"""
    try:
        result = _cfg().plan(version=version, tag=tag)
    except RustbinError as e:
        raise _fail(e) from e
    _echo_json(result.to_dict())
