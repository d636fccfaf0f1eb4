"""
PaperID 核心模块

行分类、键提取、元数据合并与注释渲染
"""

from .classifier import ClassifiedLines, classify_lines, split_lines
from .extractor import CatalogKey, Category, extract_key
from .joiner import JoinedEntry, JoinResult, MetadataRecord, join_entries
from .renderer import GlyphTable, render_compact, render_detailed
from .annotator import AnnotatedLang, AnnotationStats, annotate_text

__all__ = [
    'ClassifiedLines',
    'classify_lines',
    'split_lines',
    'CatalogKey',
    'Category',
    'extract_key',
    'JoinedEntry',
    'JoinResult',
    'MetadataRecord',
    'join_entries',
    'GlyphTable',
    'render_compact',
    'render_detailed',
    'AnnotatedLang',
    'AnnotationStats',
    'annotate_text',
]
