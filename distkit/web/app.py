"""包管理 JSON API（基于 Flask）

启动方式: distkit serve --port 8890
生产部署: gunicorn --config deploy/gunicorn.conf.py distkit.web.app:app
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from distkit.core.exceptions import DistKitError
from distkit.web.responses import domain_error
from distkit.web.routes import packages_bp

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    application = Flask(__name__)
    application.register_blueprint(packages_bp)

    @application.errorhandler(HTTPException)
    def handle_http_exception(exc):  # type: ignore[no-untyped-def]
        """将所有 HTTP 异常统一返回 JSON"""
        return jsonify(error=exc.description), exc.code

    @application.errorhandler(DistKitError)
    def handle_domain_error(exc):  # type: ignore[no-untyped-def]
        logger.warning("请求失败 [%s]: %s", exc.code, exc)
        return domain_error(exc)

    @application.errorhandler(Exception)
    def handle_generic_exception(exc):  # type: ignore[no-untyped-def]  # noqa: ARG001
        """捕获未处理异常，返回 500 JSON"""
        logger.exception("未处理的异常")
        return jsonify(error="服务器内部错误"), 500

    @application.route("/api/health")
    def health():  # type: ignore[no-untyped-def]
        from distkit import __version__
        return jsonify(status="ok", version=__version__)

    return application


app = create_app()


def run_server(port: int = 8890, debug: bool = False, host: str = "127.0.0.1") -> None:
    logger.info("distkit API 已启动: http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
