"""distkit - 模块化应用的依赖包生命周期管理"""

__version__ = "0.3.0"
