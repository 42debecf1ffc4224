"""外部安装协作者的默认实现

- operations.py: 卸载操作描述符
- command.py: 命令行安装器
- scripts.py: 包生命周期脚本执行器
"""

from distkit.core.installer.command import CommandInstaller
from distkit.core.installer.operations import UninstallOperation
from distkit.core.installer.scripts import ScriptRunner

__all__ = [
    "CommandInstaller",
    "UninstallOperation",
    "ScriptRunner",
]
