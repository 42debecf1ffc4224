"""外部命令执行

安装器（composer 等）与包生命周期脚本都通过 CommandExecutor 启动子进程。
测试或远程执行场景用 set_executor() 换掉全局默认实现即可。

约定的返回码:
    127  命令不存在
    126  命令不可执行
    124  超过 timeout 被终止（与 coreutils timeout 一致）
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

RC_TIMEOUT = 124
RC_NOT_EXECUTABLE = 126
RC_NOT_FOUND = 127


@dataclass
class CommandResult:
    """一次外部命令的输出"""

    returncode: int
    stdout: str
    stderr: str
    command: tuple[str, ...] = ()
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def tail(self, limit: int = 2000) -> str:
        """错误信息摘要: 优先 stderr，只保留末尾 limit 个字符"""
        text = (self.stderr or self.stdout).strip()
        if len(text) <= limit:
            return text
        return "..." + text[-limit:]


class CommandExecutor(Protocol):
    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        ...


def _decode(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode(errors="replace")
    return data


class LocalExecutor:
    """在本机启动子进程

    env 叠加在 os.environ 与 base_env 之上，而不是替换整个环境，
    这样 PATH / HOME / COMPOSER_HOME 等变量始终可见。
    """

    def __init__(self, base_env: dict[str, str] | None = None) -> None:
        self.base_env = dict(base_env or {})

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        args = tuple(shlex.split(cmd) if isinstance(cmd, str) else cmd)
        merged = {**os.environ, **self.base_env, **(env or {})}
        started = time.monotonic()
        try:
            proc = subprocess.run(
                args, capture_output=True, text=True,
                cwd=cwd, env=merged, check=False, timeout=timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(RC_NOT_FOUND, "", f"命令不存在: {e}", args)
        except PermissionError as e:
            return CommandResult(RC_NOT_EXECUTABLE, "", f"命令不可执行: {e}", args)
        except subprocess.TimeoutExpired as e:
            elapsed = time.monotonic() - started
            logger.error("命令超时 (%ss): %s", timeout, shlex.join(args))
            return CommandResult(
                RC_TIMEOUT,
                _decode(e.stdout),
                f"命令超时 ({timeout}s): {shlex.join(args)}\n{_decode(e.stderr)}",
                args,
                elapsed,
            )

        elapsed = time.monotonic() - started
        logger.debug(
            "命令结束 rc=%d %.1fs: %s (cwd=%s)",
            proc.returncode, elapsed, shlex.join(args), cwd,
        )
        return CommandResult(proc.returncode, proc.stdout, proc.stderr, args, elapsed)


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    global _default_executor  # noqa: PLW0603
    _default_executor = executor
