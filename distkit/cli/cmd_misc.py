"""CLI — 杂项命令: 配置查看 / Web 服务"""

from __future__ import annotations

import click
import yaml

from distkit.cli import _svc


def register(group: click.Group) -> None:
    group.add_command(show_config)
    group.add_command(serve)


@click.command(name="config")
def show_config() -> None:
    """打印当前生效的配置"""
    click.echo(yaml.dump(_svc().config.to_dict(), allow_unicode=True, sort_keys=False))


@click.command()
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--port", default=8890, help="监听端口")
def serve(host: str, port: int) -> None:
    """启动包管理 JSON API"""
    from distkit.web.app import run_server
    run_server(host=host, port=port)
