"""Web API 端点测试"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from distkit.core.package.models import Package
from distkit.services.container import get_container
from distkit.web.app import app


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """临时应用目录: 清单 + 已安装仓库 + 一个远程索引"""
    import distkit.core.config as cfgmod
    from distkit.services.container import reset_container

    _write_json(tmp_path / "composer.json", {
        "name": "acme/app",
        "require": {"acme/core": "1.0.0", "acme/blog": "1.0.0"},
    })
    _write_json(tmp_path / "vendor" / "composer" / "installed.json", [
        {"name": "acme/core", "version": "1.0.0", "require": {"php": ">=7.1"}},
        {"name": "acme/blog", "version": "1.0.0", "require": {"acme/core": "^1.0"}},
    ])
    _write_json(tmp_path / "repo" / "packages.json", {"packages": {
        "acme/core": {"1.0.0": {}},
        "acme/shop": {
            "1.0.0": {"require": {"acme/core": "^1.0"}},
            "2.0.0": {"require": {"acme/core": "^1.0", "ext-intl": "*"}},
        },
    }})
    cfg = cfgmod.Config(
        manifest=str(tmp_path / "composer.json"),
        installed_file=str(tmp_path / "vendor" / "composer" / "installed.json"),
        vendor_dir=str(tmp_path / "vendor"),
        repositories=[str(tmp_path / "repo" / "packages.json")],
    )
    monkeypatch.setattr(cfgmod, "_current", cfg)
    reset_container()
    yield tmp_path
    reset_container()


@pytest.fixture()
def client(workspace: Path):
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


class TestGlobalErrorHandlers:
    def test_404_returns_json(self, client) -> None:
        resp = client.get("/api/nonexistent")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_405_returns_json(self, client) -> None:
        resp = client.delete("/api/packages/installed")
        assert resp.status_code == 405
        assert "error" in resp.get_json()

    def test_health(self, client) -> None:
        assert client.get("/api/health").get_json()["status"] == "ok"


class TestQueries:
    def test_installed(self, client) -> None:
        data = client.get("/api/packages/installed").get_json()
        assert [p["name"] for p in data["packages"]] == ["acme/core", "acme/blog"]
        assert data["packages"][0]["version_normalized"] == "1.0.0.0"

    def test_available(self, client) -> None:
        assert client.get("/api/packages/available").get_json()["packages"] == [
            "acme/core", "acme/shop",
        ]
        resp = client.get("/api/packages/available?exclude_installed=1")
        assert resp.get_json()["packages"] == ["acme/shop"]

    def test_requirements(self, client) -> None:
        resp = client.get("/api/packages/acme/shop/requirements")
        assert resp.get_json()["requirements"] == ["acme/core"]
        resp = client.get("/api/packages/acme/shop/requirements?version=1.0.0")
        assert resp.get_json()["requirements"] == ["acme/core"]

    def test_requirements_not_found(self, client) -> None:
        resp = client.get("/api/packages/acme/shop/requirements?version=9.0")
        assert resp.status_code == 404
        assert resp.get_json()["code"] == "PACKAGE_NOT_FOUND"

    def test_dependents(self, client) -> None:
        resp = client.get("/api/packages/acme/core/dependents")
        assert resp.get_json()["dependents"] == ["acme/blog"]


class TestMutations:
    def test_install_rejects_bad_name(self, client) -> None:
        resp = client.post("/api/packages/install", json={"name": "acme/shop; rm -rf /"})
        assert resp.status_code == 400

    def test_install(self, client, workspace: Path) -> None:
        installer = MagicMock()
        installer.run.return_value = True
        pm = get_container().packages
        pm.installer = installer
        resp = client.post("/api/packages/install", json={"name": "acme/shop", "version": "1.0.0"})
        assert resp.status_code == 200
        assert resp.get_json()["package"]["version"] == "1.0.0"
        manifest = json.loads((workspace / "composer.json").read_text(encoding="utf-8"))
        assert manifest["require"]["acme/shop"] == "1.0.0"

    def test_install_failure_maps_status(self, client) -> None:
        installer = MagicMock()
        installer.run.return_value = False
        get_container().packages.installer = installer
        resp = client.post("/api/packages/install", json={"name": "acme/shop"})
        assert resp.status_code == 502
        assert resp.get_json()["code"] == "INSTALLER_ERROR"

    def test_install_while_locked(self, client, workspace: Path) -> None:
        pytest.importorskip("fcntl")
        from distkit.utils.locking import exclusive_lock

        pm = get_container().packages
        pm.installer = MagicMock()
        pm.operation_timeout = 0.2
        with exclusive_lock(workspace / "distkit.lock"):
            resp = client.post("/api/packages/install", json={"name": "acme/shop"})
        assert resp.status_code == 409
        assert resp.get_json()["code"] == "OPERATION_IN_PROGRESS"
        pm.installer.run.assert_not_called()

    def test_uninstall_requires_names(self, client) -> None:
        assert client.post("/api/packages/uninstall", json={}).status_code == 400

    def test_uninstall(self, client, workspace: Path) -> None:
        resp = client.post("/api/packages/uninstall", json={"names": ["acme/blog"]})
        assert resp.status_code == 200
        assert resp.get_json()["removed"] == ["acme/blog"]
        manifest = json.loads((workspace / "composer.json").read_text(encoding="utf-8"))
        assert manifest["require"] == {"acme/core": "1.0.0"}
        installed = json.loads(
            (workspace / "vendor" / "composer" / "installed.json").read_text(encoding="utf-8"),
        )
        assert [p["name"] for p in installed["packages"]] == ["acme/core"]

    def test_uninstall_with_dependents(self, client) -> None:
        resp = client.post(
            "/api/packages/uninstall",
            json={"names": ["acme/core"], "with_dependents": True},
        )
        assert resp.get_json()["removed"] == ["acme/blog", "acme/core"]


def test_package_dict_shape() -> None:
    from distkit.web.routes.packages_bp import _to_dict

    data = _to_dict(Package(name="acme/a", version="1.0.0.0-RC1", pretty_version="1.0-rc1"))
    assert data["stability"] == "RC"
    assert data["version"] == "1.0-rc1"
