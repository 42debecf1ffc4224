"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify

from distkit.core.exceptions import DistKitError

# 业务异常 code -> HTTP 状态码，未列出的按 500 处理
_STATUS_BY_CODE = {
    "PACKAGE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "CONFIG_ERROR": 500,
    "INSTALLER_ERROR": 502,
    "UNINSTALL_ERROR": 502,
    "OPERATION_IN_PROGRESS": 409,
    "MANIFEST_ERROR": 500,
    "EXECUTION_ERROR": 502,
}


def ok(data: dict, status: int = 200) -> tuple[Response, int] | Response:
    """成功响应"""
    if status == 200:
        return jsonify(data)
    return jsonify(data), status


def bad_request(message: str) -> tuple[Response, int]:
    """请求参数错误"""
    return jsonify(error=message), 400


def domain_error(exc: DistKitError) -> tuple[Response, int]:
    """业务异常 -> JSON 错误响应"""
    status = _STATUS_BY_CODE.get(exc.code, 500)
    return jsonify(error=str(exc), code=exc.code), status
