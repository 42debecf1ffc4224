"""文件锁: 清单读改写、安装 / 卸载事务期间的独占锁

基于 flock (POSIX)，锁文件为目标文件旁的 ``<name>.lock``。
同一进程内的不同线程各自打开锁文件，同样互斥。
在没有 fcntl 的平台上退化为空操作。
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Iterator
from pathlib import Path

try:
    import fcntl
except ImportError:  # pragma: no cover - Windows
    fcntl = None  # type: ignore[assignment]

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.1


def lock_path_for(path: Path) -> Path:
    """目标文件旁的 <name>.lock；本身以 .lock 结尾的路径直接作为锁文件"""
    if path.suffix == ".lock":
        return path
    return path.with_name(path.name + ".lock")


@contextlib.contextmanager
def exclusive_lock(path: str | Path, timeout: float = 30) -> Iterator[None]:
    """获取 path 对应锁文件的独占锁，退出上下文时（含异常路径）释放

    Raises:
        TimeoutError: 超过 timeout 秒仍未拿到锁
    """
    target = Path(path)
    if fcntl is None:
        yield
        return

    lock_file = lock_path_for(target)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout
    with lock_file.open("a+", encoding="utf-8") as lf:
        while True:
            try:
                fcntl.flock(lf.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise TimeoutError(
                        f"等待文件锁超时 ({timeout}s): {lock_file}"
                    ) from None
                time.sleep(_POLL_INTERVAL)
        logger.debug("已加锁: %s", lock_file)
        try:
            yield
        finally:
            fcntl.flock(lf.fileno(), fcntl.LOCK_UN)
            logger.debug("已解锁: %s", lock_file)
