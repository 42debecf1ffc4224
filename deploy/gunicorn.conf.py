"""distkit Web API 的 gunicorn 配置

    gunicorn --config deploy/gunicorn.conf.py distkit.web.app:app

安装 / 卸载请求会同步运行外部安装器，并由项目锁文件（清单旁的 distkit.lock）
串行化，所以:
  - worker 数不必多，查询请求之外的并发只会排队等锁
  - graceful_timeout 要覆盖安装器超时，重启 / 停机时等正在运行的安装器
    结束，避免留下半更新的 vendor 目录
"""

import os

bind = os.getenv("DISTKIT_BIND", "127.0.0.1:8890")

workers = int(os.getenv("DISTKIT_WORKERS", "2"))
worker_class = "gthread"
threads = int(os.getenv("DISTKIT_THREADS", "4"))

# 与 configs/distkit.yml 中的 installer_timeout 对齐
_installer_timeout = int(os.getenv("DISTKIT_INSTALLER_TIMEOUT", "1800"))
timeout = 120
graceful_timeout = _installer_timeout + 30

# 长事务期间不按请求数回收 worker
max_requests = 0

accesslog = os.getenv("DISTKIT_ACCESS_LOG", "-")
errorlog = "-"
loglevel = os.getenv("DISTKIT_LOG_LEVEL", "info")
