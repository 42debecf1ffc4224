"""日志配置单元测试"""

from __future__ import annotations

import json
import logging

from distkit.utils.logger import JSONFormatter, reset_logging, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "distkit.core.package_manager", logging.INFO, __file__, 1, "安装完成: %s", ("acme/a",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["message"] == "安装完成: acme/a"
        assert "package" not in data

    def test_package_field(self) -> None:
        data = json.loads(JSONFormatter().format(_record(package="acme/a")))
        assert data["package"] == "acme/a"


class TestSetupLogging:
    def test_no_duplicate_handlers(self) -> None:
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            setup_logging("DEBUG")
            setup_logging("WARNING", json_output=True)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.WARNING
        finally:
            reset_logging()
            for handler in saved[0]:
                root.addHandler(handler)
            root.setLevel(saved[1])
