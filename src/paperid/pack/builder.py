"""
Pack builder

Turns an input tree of ``.lang`` files into a Bedrock resource pack:

1. reset ``<output>/<pack> v<version>/texts``
2. copy the font folder, stamp ``manifest.json``
3. annotate every input file into ``<base>.p.lang`` and ``<base>.s.lang``
4. copy ``pack_icon.png``, write the language index files
5. zip the pack folder and copy the zip to ``.mcpack``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from ..core.annotator import AnnotatedLang, annotate_text
from ..core.joiner import MetadataRecord
from ..core.renderer import GlyphTable
from ..utils.config import PackConfig
from ..utils.io import (
    clean_dir, copy_file, copy_tree, find_files,
    read_text_file, write_json_file, write_text_file
)
from ..utils.logger import ConfigurationError, PackLogger, get_logger
from ..utils.tables import load_glyphs, load_manifest_template, load_tiles
from .archive import build_archives
from .manifest import (
    COMPACT_SUFFIX, DETAILED_SUFFIX, LanguageIndex,
    lang_basename, pack_title, stamp_manifest, version_string
)

TEXTS_DIR = "texts"
FONT_DIR = "font"
ICON_NAME = "pack_icon.png"


@dataclass
class FileReport:
    source: Path
    base: str
    compact_path: Path
    detailed_path: Path
    result: AnnotatedLang


@dataclass
class BuildResult:
    pack_dir: Path
    zip_path: Optional[Path] = None
    mcpack_path: Optional[Path] = None
    files: List[FileReport] = field(default_factory=list)
    languages: LanguageIndex = field(default_factory=LanguageIndex)

    @property
    def unknown_count(self) -> int:
        return sum(len(f.result.unknown) for f in self.files)


def write_lang_variants(
    source: Path,
    texts_dir: Path,
    tiles: Mapping[str, MetadataRecord],
    glyphs: GlyphTable,
    suggest: bool = False,
    suggest_cutoff: float = 80.0,
) -> FileReport:
    """Annotate one file and write its compact and detailed variants."""
    base = lang_basename(source.name)
    result = annotate_text(
        read_text_file(source), tiles, glyphs,
        suggest=suggest, suggest_cutoff=suggest_cutoff
    )
    compact_path = texts_dir / f"{base}.{COMPACT_SUFFIX}.lang"
    detailed_path = texts_dir / f"{base}.{DETAILED_SUFFIX}.lang"
    write_text_file(compact_path, result.compact)
    write_text_file(detailed_path, result.detailed)
    return FileReport(source, base, compact_path, detailed_path, result)


class PackBuilder:
    """Build a resource pack from a :class:`PackConfig`."""

    def __init__(
        self,
        config: PackConfig,
        tiles: Optional[Mapping[str, MetadataRecord]] = None,
        glyphs: Optional[GlyphTable] = None,
        log: Optional[PackLogger] = None,
    ):
        """
        Args:
            config: build settings
            tiles: metadata table; loaded from ``config.tiles_path`` when None
            glyphs: glyph table; loaded from ``config.glyphs_path`` when None
            log: logger; the global one when None
        """
        self.config = config
        self.version = config.version_tuple()
        self.tiles = tiles if tiles is not None else load_tiles(config.tiles_path)
        self.glyphs = glyphs if glyphs is not None else load_glyphs(config.glyphs_path)
        self.log = log or get_logger()

    @property
    def title(self) -> str:
        return pack_title(self.config.pack_name, self.version)

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    @property
    def pack_dir(self) -> Path:
        return self.output_dir / self.title

    @property
    def archive_stem(self) -> str:
        return f"{self.config.pack_name} v{version_string(self.version, '_')}"

    def prepare(self) -> None:
        """Start from an empty output folder."""
        out = self.output_dir.resolve()
        src = Path(self.config.input_dir).resolve()
        if out == Path.cwd().resolve() or out == src or out in src.parents:
            raise ConfigurationError(
                f"Refusing to wipe output folder {out}: it contains the input or working directory",
                config_key="output_dir"
            )
        # 输出位于输入目录内时，清单和字体会被当作语言文件读入
        if src in out.parents:
            raise ConfigurationError(
                f"Output folder {out} must not be inside the input folder {src}",
                config_key="output_dir"
            )
        clean_dir(self.output_dir)
        (self.pack_dir / TEXTS_DIR).mkdir(parents=True, exist_ok=True)

    def copy_font(self) -> None:
        font_dir = self.config.font_dir
        if not font_dir:
            return
        if not Path(font_dir).is_dir():
            self.log.warning(f"Font folder not found, skipping: {font_dir}")
            return
        count = copy_tree(font_dir, self.pack_dir / FONT_DIR)
        self.log.info(f"Copied {count} font files")

    def copy_icon(self) -> None:
        icon = self.config.pack_icon
        if not icon:
            return
        if not Path(icon).is_file():
            self.log.warning(f"Pack icon not found, skipping: {icon}")
            return
        copy_file(icon, self.pack_dir / ICON_NAME)

    def write_manifest(self) -> dict:
        template = load_manifest_template(self.config.manifest_path)
        manifest = stamp_manifest(template, self.config.pack_name, self.version)
        write_json_file(self.pack_dir / "manifest.json", manifest)
        return manifest

    def compile_languages(self) -> tuple[List[FileReport], LanguageIndex]:
        """Annotate every input file; returns reports and the language index."""
        sources = find_files(self.config.input_dir)
        if not sources:
            self.log.warning(f"No input files found in {self.config.input_dir}")

        texts_dir = self.pack_dir / TEXTS_DIR
        reports: List[FileReport] = []
        index = LanguageIndex()
        with self.log.progress(len(sources), "Compiling languages") as update:
            for src in sources:
                report = write_lang_variants(
                    src, texts_dir, self.tiles, self.glyphs,
                    suggest=self.config.suggest_unknown,
                    suggest_cutoff=self.config.suggest_cutoff,
                )
                reports.append(report)
                index.add(report.base)
                self.log.info(
                    f"Compiled a new language {report.compact_path.name}, {report.detailed_path.name}"
                )
                stats = report.result.stats
                self.log.debug(
                    f"{report.source}: {stats.catalog} catalog, {stats.rendered} annotated, "
                    f"{stats.passthrough} unchanged, {stats.dropped} dropped"
                )
                update(1)
        return reports, index

    def write_language_index(self, index: LanguageIndex) -> None:
        texts_dir = self.pack_dir / TEXTS_DIR
        write_json_file(texts_dir / "language_names.json", index.language_names(self.version))
        write_json_file(texts_dir / "languages.json", index.languages())

    def build(self) -> BuildResult:
        """Run the whole pipeline. Any I/O failure aborts the build."""
        with self.log.timer(f"Building {self.title}"):
            self.prepare()
            self.copy_font()
            self.write_manifest()

            reports, index = self.compile_languages()

            self.copy_icon()
            self.write_language_index(index)

            result = BuildResult(pack_dir=self.pack_dir, files=reports, languages=index)
            if self.config.make_archive:
                result.zip_path, result.mcpack_path = build_archives(
                    self.pack_dir,
                    self.output_dir,
                    self.archive_stem,
                    self.title,
                    self.config.compression_level,
                )
        return result
