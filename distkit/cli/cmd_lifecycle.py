"""CLI — 安装 / 卸载命令"""

from __future__ import annotations

import click

from distkit.cli import _svc, handle_errors


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(uninstall)


@click.command()
@click.argument("name")
@click.option("--version", default=None, help="指定版本（默认取最新）")
@handle_errors
def install(name: str, version: str | None) -> None:
    """安装包并写入清单"""
    pkg = _svc().packages.install(name, version)
    click.echo(f"已安装: {pkg.name} {pkg.display_version}")


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--with-dependents", is_flag=True, help="连同依赖它们的已安装包一起卸载")
@click.option("--yes", "-y", is_flag=True, help="不确认直接执行")
@handle_errors
def uninstall(names: tuple[str, ...], with_dependents: bool, yes: bool) -> None:
    """按给定顺序卸载包并从清单移除"""
    pm = _svc().packages
    if not with_dependents:
        blocking = {
            name: sorted(pm.get_dependents(name) - set(names)) for name in names
        }
        blocking = {k: v for k, v in blocking.items() if v}
        if blocking:
            for name, deps in blocking.items():
                click.echo(f"  {name} 被以下包依赖: {', '.join(deps)}")
            if not yes:
                click.confirm("仍然继续卸载?", abort=True)

    if with_dependents:
        removed = pm.uninstall_with_dependents(names)
    else:
        removed = pm.uninstall(names)
    if removed:
        click.echo(f"已卸载: {', '.join(removed)}")
    else:
        click.echo("没有需要卸载的已安装包。")
