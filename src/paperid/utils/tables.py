from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..core.joiner import MetadataRecord
from ..core.renderer import REQUIRED_GLYPHS, GlyphTable, block_state_symbols, split_namespace
from .io import read_json_file
from .logger import TableError

RESOURCE_PACKAGE = "paperid.resources"


def load_resource_json(name: str) -> Any:
    """读取随包附带的 resources/<name> JSON 文件"""
    text = resources.files(RESOURCE_PACKAGE).joinpath(name).read_text(encoding="utf-8")
    return json.loads(text)


def _load(path: Optional[str | Path], default_name: str) -> Any:
    if path is None:
        return load_resource_json(default_name)
    return read_json_file(path)


def parse_tiles(data: Any) -> Mapping[str, MetadataRecord]:
    if not isinstance(data, dict):
        raise TableError("Metadata table must be a JSON object", table="tiles")
    return MappingProxyType({
        key: MetadataRecord.from_json(key, obj) for key, obj in data.items()
    })


def load_tiles(path: Optional[str | Path] = None) -> Mapping[str, MetadataRecord]:
    """
    读取方块元数据表 {key -> MetadataRecord}，返回只读映射。
    - path 为 None 时使用 resources/tiles.json
    - 字段：id / meta / namespace / isItem / isBedrockOnly，其余字段忽略
    """
    return parse_tiles(_load(path, "tiles.json"))


def parse_glyphs(data: Any) -> GlyphTable:
    if not isinstance(data, dict):
        raise TableError("Glyph table must be a JSON object", table="glyphs")
    for symbol, glyph in data.items():
        if not isinstance(glyph, str):
            raise TableError("Glyph must be a string", table="glyphs", key=symbol)
    table = GlyphTable(data)
    missing = table.missing(REQUIRED_GLYPHS)
    if missing:
        raise TableError(
            f"Glyph table is missing required symbols: {', '.join(missing)}",
            table="glyphs"
        )
    return table


def load_glyphs(path: Optional[str | Path] = None) -> GlyphTable:
    """
    读取字形表 {symbol -> glyph}。
    - path 为 None 时使用 resources/glyphs.json
    - 必须包含 error / id / namespace / block_state
    """
    return parse_glyphs(_load(path, "glyphs.json"))


def load_manifest_template(path: Optional[str | Path] = None) -> dict:
    data = _load(path, "manifest.json")
    if not isinstance(data, dict) or not isinstance(data.get("header"), dict):
        raise TableError("Manifest template needs a 'header' object", table="manifest")
    modules = data.get("modules")
    if not isinstance(modules, list) or not modules or not isinstance(modules[0], dict):
        raise TableError("Manifest template needs at least one module", table="manifest")
    return data


def missing_block_state_glyphs(
    tiles: Mapping[str, MetadataRecord],
    glyphs: GlyphTable
) -> dict[str, list[str]]:
    """检查所有 namespace 中引用的 $:symbol 是否都有字形，返回 {key: [缺失符号]}"""
    report: dict[str, list[str]] = {}
    for key, record in tiles.items():
        if not record.namespace_path:
            continue
        _, states = split_namespace(record.namespace_path)
        if not states:
            continue
        missing = glyphs.missing(block_state_symbols(states))
        if missing:
            report[key] = missing
    return report
