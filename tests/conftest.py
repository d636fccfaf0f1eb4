"""
Pytest 配置文件

为所有测试配置共享的 fixtures 和设置
"""

import sys
from pathlib import Path
from types import MappingProxyType

import pytest

# 添加 src 到 Python 路径（不要求已安装）
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from paperid.core.joiner import MetadataRecord  # noqa: E402
from paperid.core.renderer import GlyphTable  # noqa: E402


SAMPLE_LANG = "\n".join([
    "## Blocks",
    "tile.foo.name=Bar#",
    "tile.netherreactor.active=Active!",
    "tile.mystery.name=Mystery Block",
    "item.apple.name=Apple",
    "item.bed.name=Bed",
    "",
    "options.title=Options",
])


@pytest.fixture
def glyphs():
    """与文档示例一致的字形表"""
    return GlyphTable({
        "error": "!",
        "id": "#",
        "namespace": "@",
        "block_state": ">",
        "flag": "F",
        "facing": "Fc",
    })


@pytest.fixture
def tiles():
    """最小元数据表"""
    return MappingProxyType({
        "foo": MetadataRecord(numeric_id=5, meta=0, namespace_path="ns|$:flag"),
        "bed": MetadataRecord(
            numeric_id=26, meta=0,
            namespace_path="minecraft:red_bed|$:facing",
            is_item_representation=True,
        ),
        "netherreactor": MetadataRecord(numeric_id=247, is_platform_exclusive=True),
    })


@pytest.fixture
def sample_lang():
    return SAMPLE_LANG


@pytest.fixture
def lang_workspace(tmp_path):
    """创建带输入目录的临时工作区"""
    input_dir = tmp_path / "input"
    (input_dir / "nested").mkdir(parents=True)
    (input_dir / "en_US.lang").write_text(SAMPLE_LANG, encoding="utf-8")
    (input_dir / "nested" / "de_DE.lang").write_text(
        "tile.foo.name=Dings\r\nitem.apple.name=Apfel\r\n", encoding="utf-8"
    )
    return {
        "root": tmp_path,
        "input": input_dir,
        "output": tmp_path / "output",
    }
