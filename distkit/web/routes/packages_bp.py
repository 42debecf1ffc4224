"""依赖包 API Blueprint

职责:
- 已安装 / 可安装包查询
- 依赖与依赖者查询
- 安装 / 卸载
"""

from __future__ import annotations

import logging
import re

from flask import Blueprint, Response, request

from distkit.core.package.models import Package
from distkit.web.responses import bad_request, ok

logger = logging.getLogger(__name__)

packages_bp = Blueprint("packages", __name__, url_prefix="/api/packages")

_SAFE_PACKAGE_RE = re.compile(r"^[a-zA-Z0-9_.\-]+(?:/[a-zA-Z0-9_.\-]+)?$")


def _pm():  # type: ignore[no-untyped-def]
    from distkit.services.container import get_container
    return get_container().packages


def _validate_package_name(value: object) -> str:
    """校验包名仅包含安全字符（vendor/name 形式），防止注入"""
    name = str(value or "").strip()
    if not _SAFE_PACKAGE_RE.match(name):
        raise ValueError(f"包名不合法: {name!r}")
    return name


def _to_dict(pkg: Package) -> dict:
    return {
        "name": pkg.name,
        "version": pkg.display_version,
        "version_normalized": pkg.version,
        "stability": pkg.stability.value,
        "description": pkg.description,
    }


@packages_bp.route("/installed", methods=["GET"])
def installed() -> Response:
    return ok({"packages": [_to_dict(p) for p in _pm().get_installed()]})


@packages_bp.route("/available", methods=["GET"])
def available() -> Response:
    exclude = request.args.get("exclude_installed", "") in ("1", "true")
    return ok({"packages": _pm().get_available(exclude_installed=exclude)})


@packages_bp.route("/<path:name>/requirements", methods=["GET"])
def requirements(name: str) -> Response:
    version = request.args.get("version") or None
    return ok({"name": name, "requirements": _pm().get_requirements(name, version)})


@packages_bp.route("/<path:name>/dependents", methods=["GET"])
def dependents(name: str) -> Response:
    return ok({"name": name, "dependents": sorted(_pm().get_dependents(name))})


@packages_bp.route("/install", methods=["POST"])
def install() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    try:
        name = _validate_package_name(body.get("name"))
    except ValueError as e:
        return bad_request(str(e))
    version = body.get("version") or None
    pkg = _pm().install(name, version)
    return ok({"message": f"已安装: {pkg}", "package": _to_dict(pkg)})


@packages_bp.route("/uninstall", methods=["POST"])
def uninstall() -> tuple[Response, int] | Response:
    body = request.get_json(silent=True) or {}
    raw = body.get("names") or []
    if not isinstance(raw, list) or not raw:
        return bad_request("需要提供 names 列表")
    try:
        names = [_validate_package_name(n) for n in raw]
    except ValueError as e:
        return bad_request(str(e))
    pm = _pm()
    if body.get("with_dependents"):
        removed = pm.uninstall_with_dependents(names)
    else:
        removed = pm.uninstall(names)
    return ok({"removed": removed})
