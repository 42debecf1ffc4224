"""CLI — 包查询命令"""

from __future__ import annotations

import click

from distkit.cli import _svc, handle_errors


def register(group: click.Group) -> None:
    group.add_command(installed)
    group.add_command(available)
    group.add_command(show)
    group.add_command(requirements)
    group.add_command(dependents)


@click.command()
@handle_errors
def installed() -> None:
    """列出本地已安装的包"""
    packages = _svc().packages.get_installed()
    if not packages:
        click.echo("没有已安装的包。")
        return
    for p in packages:
        click.echo(f"  {p.name:40s} {p.display_version:12s} [{p.stability.value}]")


@click.command()
@click.option("--exclude-installed", is_flag=True, help="不列出已安装的包")
@handle_errors
def available(exclude_installed: bool) -> None:
    """列出远程仓库中可安装的包名"""
    names = _svc().packages.get_available(exclude_installed=exclude_installed)
    if not names:
        click.echo("远程仓库中没有可用的包。")
        return
    for name in names:
        click.echo(f"  {name}")


@click.command()
@click.argument("name")
@click.option("--version", default=None, help="指定版本（默认取最新）")
@handle_errors
def show(name: str, version: str | None) -> None:
    """显示包的首选版本及其依赖"""
    pm = _svc().packages
    pkg = pm.get_preferred_package(name, version)
    status = "已安装" if pm.is_package_installed(pkg.name) else "未安装"
    click.echo(f"{pkg.name} {pkg.display_version} ({pkg.version}) [{status}]")
    if pkg.description:
        click.echo(f"  {pkg.description}")
    for link in pkg.requires:
        click.echo(f"  requires {link.target} {link.constraint}")
    for link in pkg.dev_requires:
        click.echo(f"  requires (dev) {link.target} {link.constraint}")


@click.command()
@click.argument("name")
@click.argument("version", default="*")
@handle_errors
def requirements(name: str, version: str) -> None:
    """列出包的直接依赖（不含平台依赖）"""
    for target in _svc().packages.get_requirements(name, version):
        click.echo(f"  {target}")


@click.command()
@click.argument("name")
@handle_errors
def dependents(name: str) -> None:
    """列出直接或间接依赖该包的已安装包"""
    found = sorted(_svc().packages.get_dependents(name))
    if not found:
        click.echo(f"没有已安装的包依赖 {name}。")
        return
    for dep in found:
        click.echo(f"  {dep}")
