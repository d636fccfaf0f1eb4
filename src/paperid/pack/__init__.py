"""
资源包构建模块

清单生成、语言索引、压缩打包
"""

from .manifest import LanguageIndex, stamp_manifest, lang_basename, pack_title
from .archive import build_archives, zip_directory
from .builder import PackBuilder, BuildResult, FileReport, write_lang_variants

__all__ = [
    'LanguageIndex',
    'stamp_manifest',
    'lang_basename',
    'pack_title',
    'build_archives',
    'zip_directory',
    'PackBuilder',
    'BuildResult',
    'FileReport',
    'write_lang_variants',
]
