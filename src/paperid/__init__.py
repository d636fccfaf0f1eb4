"""
PaperID - Bedrock resource pack builder

Rewrites Minecraft Bedrock ``.lang`` files so that every block and item
name also shows its Java Edition id, namespace and block states:
- 行分类与键提取
- 元数据合并
- 两种注释渲染（精简 / 详细）
- 资源包打包 (.zip / .mcpack)
"""

__version__ = "1.0.0"

from .core import annotate_text, AnnotatedLang, GlyphTable, MetadataRecord
from .pack import PackBuilder, BuildResult, LanguageIndex

__all__ = [
    "__version__",
    "annotate_text",
    "AnnotatedLang",
    "GlyphTable",
    "MetadataRecord",
    "PackBuilder",
    "BuildResult",
    "LanguageIndex",
]
