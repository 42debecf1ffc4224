"""结构化文档统一读写工具

集中管理 YAML / JSON 文件的序列化与反序列化，避免各模块重复实现。
统一 encoding="utf-8"、空值保护、目录自动创建、原子写入。

按后缀选择格式: .yml / .yaml 走 YAML，其余（composer.json、installed.json、
packages.json）走 JSON。
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 文档最大大小限制 (10MB)，防止异常大文件导致内存耗尽
MAX_DOCUMENT_SIZE = 10 * 1024 * 1024

YAML_SUFFIXES = frozenset((".yml", ".yaml"))


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 rename，中途崩溃不会留下半截文件

    异常:
        OSError: 文件写入或移动失败
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def _read_text(p: Path) -> str:
    file_size = p.stat().st_size
    if file_size > MAX_DOCUMENT_SIZE:
        raise ValueError(
            f"文件过大: {p} ({file_size} 字节), "
            f"超过限制 {MAX_DOCUMENT_SIZE} 字节"
        )
    return p.read_text(encoding="utf-8")


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML 文件

    返回:
        dict: 解析后的字典。文件不存在、为空、或内容不是字典时返回空字典

    异常:
        yaml.YAMLError: YAML 格式错误
        OSError: IO 错误
        ValueError: 文件过大
    """
    p = Path(path)
    if not p.exists():
        return {}

    try:
        result = yaml.safe_load(_read_text(p))
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", path, e)
        raise
    except OSError as e:
        logger.error("读取文件失败: %s, 错误: %s", path, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，返回空字典",
            path, type(result).__name__,
        )
        return {}
    return result


def load_json(path: str | Path) -> Any:
    """读取 JSON 文件，文件不存在或为空时返回 None

    异常:
        json.JSONDecodeError: JSON 格式错误
        OSError: IO 错误
    """
    p = Path(path)
    if not p.exists():
        return None
    try:
        text = _read_text(p)
        if not text.strip():
            return None
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("解析 JSON 文件失败: %s, 错误: %s", path, e)
        raise
    except OSError as e:
        logger.error("读取文件失败: %s, 错误: %s", path, e)
        raise


def load_document(path: str | Path) -> dict[str, Any]:
    """按后缀读取 YAML / JSON 文档，始终返回字典"""
    p = Path(path)
    if p.suffix.lower() in YAML_SUFFIXES:
        return load_yaml(p)
    data = load_json(p)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{p} 顶层必须是对象 (实际类型: {type(data).__name__})")
    return data


def dump_document(path: str | Path, data: Any) -> str:
    """按后缀序列化文档内容，保持键顺序"""
    if Path(path).suffix.lower() in YAML_SUFFIXES:
        return yaml.dump(
            data, default_flow_style=False,
            allow_unicode=True, sort_keys=False,
        )
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


def save_document(path: str | Path, data: Any) -> None:
    """原子写入 YAML / JSON 文档

    异常:
        OSError: 文件写入失败
        yaml.YAMLError / TypeError: 序列化失败
    """
    p = Path(path)
    try:
        atomic_write(p, dump_document(p, data))
    except (yaml.YAMLError, TypeError) as e:
        logger.error("序列化数据失败: %s, 错误: %s", path, e)
        raise
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise
