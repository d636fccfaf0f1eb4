"""
文件 I/O 工具函数

提供安全的文件读写功能：
- 固定 UTF-8 读取（失败即报错）
- 原子写入（防止数据损坏）
- JSON 读写
- 递归查找输入文件
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from .logger import FileOperationError

# 获取模块级 logger
logger = logging.getLogger(__name__)

ENCODING = 'utf-8'


def ensure_parent_dir(path: str | Path) -> Path:
    """确保父目录存在"""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def read_text_file(path: str | Path) -> str:
    """以 UTF-8 读取文本文件

    Args:
        path: 文件路径

    Returns:
        文件内容

    Raises:
        FileOperationError: 文件不存在、无法读取或不是合法 UTF-8
    """
    p = Path(path)
    try:
        # newline='' 保留原始 \r\n，由分类器自行切分
        with p.open('r', encoding=ENCODING, newline='') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileOperationError(f"File is not valid {ENCODING}", file_path=p, reason=str(e)) from e
    except OSError as e:
        raise FileOperationError("Failed to read file", file_path=p, reason=str(e)) from e


def write_text_file(
    path: str | Path,
    text: str,
    atomic: bool = True
) -> None:
    """写入文本文件

    Args:
        path: 文件路径
        text: 文件内容
        atomic: 是否使用原子写入（先写临时文件再重命名）

    Raises:
        FileOperationError: 写入失败
    """
    try:
        p = ensure_parent_dir(path)

        if atomic:
            # 原子写入：先写入临时文件，再重命名
            fd, tmp_path = tempfile.mkstemp(
                dir=p.parent,
                prefix=f".{p.name}.",
                suffix=".tmp"
            )
            try:
                with os.fdopen(fd, 'w', encoding=ENCODING, newline='') as f:
                    f.write(text)
                os.replace(tmp_path, p)
            except Exception:
                # 清理临时文件
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise
        else:
            with p.open('w', encoding=ENCODING, newline='') as f:
                f.write(text)
    except OSError as e:
        raise FileOperationError("Failed to write file", file_path=Path(path), reason=str(e)) from e


def read_json_file(path: str | Path) -> Any:
    """读取 JSON 文件

    Raises:
        FileOperationError: 读取失败或 JSON 格式错误
    """
    text = read_text_file(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FileOperationError(
            f"Invalid JSON at line {e.lineno}, column {e.colno}",
            file_path=Path(path),
            reason=e.msg
        ) from e


def write_json_file(path: str | Path, data: Any, indent: int = 2) -> None:
    """以 UTF-8 写入 JSON（保留非 ASCII 字符，例如 §）"""
    write_text_file(path, json.dumps(data, indent=indent, ensure_ascii=False))


def copy_file(src: str | Path, dst: str | Path) -> Path:
    """复制单个文件，目标目录不存在时自动创建"""
    src, dst = Path(src), Path(dst)
    try:
        ensure_parent_dir(dst)
        shutil.copyfile(src, dst)
    except OSError as e:
        raise FileOperationError("Failed to copy file", file_path=src, target=str(dst), reason=str(e)) from e
    return dst


def copy_tree(src: str | Path, dst: str | Path) -> int:
    """递归复制目录，返回复制的文件数"""
    src, dst = Path(src), Path(dst)
    count = 0
    try:
        for p in sorted(src.rglob("*")):
            outp = dst / p.relative_to(src)
            if p.is_dir():
                outp.mkdir(parents=True, exist_ok=True)
            else:
                outp.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(p, outp)
                count += 1
    except OSError as e:
        raise FileOperationError("Failed to copy directory", file_path=src, target=str(dst), reason=str(e)) from e
    logger.debug(f"Copied {count} files from {src} to {dst}")
    return count


def find_files(root: str | Path) -> list[Path]:
    """递归查找目录下所有文件（按路径排序，保证输出稳定）

    Raises:
        FileOperationError: 目录不存在
    """
    r = Path(root)
    if not r.is_dir():
        raise FileOperationError("Input directory not found", file_path=r)
    return sorted(p for p in r.rglob("*") if p.is_file())


def clean_dir(path: str | Path) -> Path:
    """删除目录（若存在）后重新创建空目录"""
    p = Path(path)
    try:
        if p.exists():
            shutil.rmtree(p)
        p.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileOperationError("Failed to reset output directory", file_path=p, reason=str(e)) from e
    return p
