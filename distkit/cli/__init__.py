"""distkit 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import functools
import os
from pathlib import Path
from typing import Any, Callable

import click

from distkit import __version__
from distkit.core.exceptions import DistKitError
from distkit.services.container import get_container, reset_container
from distkit.utils.logger import setup_logging


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """业务异常转为友好提示并以非零状态退出"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DistKitError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e

    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    default=lambda: os.getenv("DISTKIT_CONFIG", "configs/distkit.yml"),
    help="配置文件路径",
)
def main(config_path: str) -> None:
    """distkit - 模块化应用的依赖包管理"""
    setup_logging(
        level=os.getenv("DISTKIT_LOG_LEVEL", "INFO"),
        json_output=os.getenv("DISTKIT_LOG_JSON", "") == "1",
    )
    if Path(config_path).exists():
        from distkit.core.config import init_config
        init_config(config_path)
        reset_container()


# 注册各领域子命令
from distkit.cli.cmd_query import register as _reg_query  # noqa: E402
from distkit.cli.cmd_lifecycle import register as _reg_lifecycle  # noqa: E402
from distkit.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_query(main)
_reg_lifecycle(main)
_reg_misc(main)
