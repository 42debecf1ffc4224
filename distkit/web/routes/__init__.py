"""Web 路由模块 - Blueprint 集合"""

from distkit.web.routes.packages_bp import packages_bp

__all__ = ["packages_bp"]
