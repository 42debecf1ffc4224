"""统一异常体系

所有业务异常继承 DistKitError，替代散落的 ValueError / RuntimeError。
Web 层可据此自动映射 HTTP 状态码，CLI 层可据此输出友好提示。
"""

from __future__ import annotations


class DistKitError(Exception):
    """框架基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(DistKitError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class PackageNotFoundError(DistKitError):
    """所有仓库中都找不到指定名称（及版本）的包"""

    code = "PACKAGE_NOT_FOUND"

    def __init__(self, name: str, version: str | None = None) -> None:
        label = f"{name} ({version})" if version else name
        super().__init__(f"找不到依赖包: {label}")
        self.name = name
        self.version = version


class InstallerError(DistKitError):
    """外部安装器执行失败，安装中止且清单未被修改"""

    code = "INSTALLER_ERROR"


class UninstallError(DistKitError):
    """批量卸载中某个包卸载失败，清单未被修改"""

    code = "UNINSTALL_ERROR"

    def __init__(self, message: str, removed: list[str] | None = None) -> None:
        super().__init__(message)
        self.removed = removed or []


class ManifestError(DistKitError):
    """依赖清单读写失败"""

    code = "MANIFEST_ERROR"


class ExecutionError(DistKitError):
    """外部命令 / 生命周期脚本执行失败"""

    code = "EXECUTION_ERROR"


class ValidationError(DistKitError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class OperationInProgressError(DistKitError):
    """另一个安装 / 卸载事务持有项目锁，等待超时"""

    code = "OPERATION_IN_PROGRESS"
