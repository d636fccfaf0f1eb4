"""
One pass over a single .lang file.

classify -> extract keys -> join metadata -> render both variants.
Nothing here touches the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping

from .classifier import classify_lines
from .extractor import extract_key
from .joiner import MetadataRecord, join_entries
from .renderer import GlyphTable, render_compact, render_detailed


@dataclass
class AnnotationStats:
    catalog: int = 0
    rendered: int = 0
    passthrough: int = 0
    dropped: int = 0


@dataclass
class AnnotatedLang:
    compact: str
    detailed: str
    unknown: List[str] = field(default_factory=list)
    stats: AnnotationStats = field(default_factory=AnnotationStats)


def join_output(lines: List[str]) -> str:
    return "\n".join(line.rstrip() for line in lines)


def annotate_text(
    text: str,
    tiles: Mapping[str, MetadataRecord],
    glyphs: GlyphTable,
    suggest: bool = False,
    suggest_cutoff: float = 80.0,
) -> AnnotatedLang:
    """Annotate the content of one .lang file.

    Args:
        text: raw file content (``\\n`` or ``\\r\\n`` line endings)
        tiles: metadata table keyed by block key
        glyphs: glyph table
        suggest: add "did you mean" hints to unknown-tile warnings
        suggest_cutoff: similarity threshold for hints

    Returns:
        AnnotatedLang with the compact (``.p``) and detailed (``.s``) texts

    Raises:
        GlyphError: a glyph needed for rendering is missing
    """
    classified = classify_lines(text)
    other = list(classified.other)

    keys = []
    for line in classified.catalog:
        ck = extract_key(line)
        if ck is None:
            # e.g. tile.netherreactor.active=Active!
            other.append(line)
        else:
            keys.append(ck)

    joined = join_entries(keys, tiles, suggest=suggest, suggest_cutoff=suggest_cutoff)
    other.extend(joined.passthrough)

    compact = [render_compact(e, glyphs) for e in joined.entries]
    detailed = [render_detailed(e, glyphs) for e in joined.entries]

    stats = AnnotationStats(
        catalog=len(classified.catalog),
        rendered=len(joined.entries),
        passthrough=len(classified.catalog) - len(keys) + len(joined.passthrough),
        dropped=len(joined.unknown),
    )
    return AnnotatedLang(
        compact=join_output(compact + other),
        detailed=join_output(detailed + other),
        unknown=joined.unknown,
        stats=stats,
    )
