"""
Annotation renderers.

Both renderers turn a :class:`JoinedEntry` into one ``.lang`` line of the
form ``<tile|item>.<key>.name=<name> <annotations>``:

- the *compact* variant shows the Java id and namespace only;
- the *detailed* variant also spells out block states, replacing every
  ``$:symbol`` token with its glyph.

Glyphs are short strings (font private-use characters in the bundled
table) looked up by symbol in a :class:`GlyphTable`.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional

from ..utils.logger import GlyphError
from .joiner import JoinedEntry

MAX_JAVA_ID = 255
NAMESPACE_DELIM = "|"
COLOR_SUFFIX = "§8["
EXCLUSIVE_TEXT = "Bedrock Exclusive"
UNKNOWN_TEXT = "Unknown"

REQUIRED_GLYPHS = ("error", "id", "namespace", "block_state")

BLOCK_STATE_RE = re.compile(r"\$:([a-z0-9_]+)")


class GlyphTable(Mapping[str, str]):
    """Read-only symbol -> glyph mapping that fails loudly on misses."""

    def __init__(self, glyphs: Mapping[str, str]):
        self._glyphs = MappingProxyType(dict(glyphs))

    def __getitem__(self, symbol: str) -> str:
        try:
            return self._glyphs[symbol]
        except KeyError:
            raise GlyphError(symbol) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._glyphs)

    def __len__(self) -> int:
        return len(self._glyphs)

    # Mapping's defaults go through __getitem__ and expect KeyError
    def __contains__(self, symbol: Any) -> bool:
        return symbol in self._glyphs

    def get(self, symbol: str, default: Optional[str] = None) -> Optional[str]:
        return self._glyphs.get(symbol, default)

    def missing(self, symbols: Iterable[str]) -> List[str]:
        """Symbols from ``symbols`` with no glyph, in first-seen order."""
        out: List[str] = []
        for s in symbols:
            if s not in self._glyphs and s not in out:
                out.append(s)
        return out


def clean_name(display_name: str) -> str:
    """Drop one trailing ``#`` then surrounding whitespace."""
    if display_name.endswith("#"):
        display_name = display_name[:-1]
    return display_name.strip()


def split_namespace(namespace_path: str) -> tuple[str, Optional[str]]:
    """``"minecraft:stone|$:variant"`` -> ``("minecraft:stone", "$:variant")``"""
    parts = namespace_path.split(NAMESPACE_DELIM)
    return parts[0], (parts[1] if len(parts) > 1 else None)


def block_state_symbols(text: str) -> List[str]:
    return BLOCK_STATE_RE.findall(text)


def substitute_block_states(text: str, glyphs: GlyphTable) -> str:
    return BLOCK_STATE_RE.sub(lambda m: glyphs[m.group(1)], text)


def exclusive_segment(glyphs: GlyphTable) -> str:
    return f"{glyphs['error']} {EXCLUSIVE_TEXT}"


def unknown_segment(glyphs: GlyphTable) -> str:
    return f"{glyphs['error']} {UNKNOWN_TEXT}"


def id_segment(entry: JoinedEntry, glyphs: GlyphTable) -> Optional[str]:
    rec = entry.record
    if rec.numeric_id is None or rec.numeric_id > MAX_JAVA_ID:
        return None
    # meta 0 is a real value
    meta = rec.meta if rec.meta is not None else glyphs["error"]
    return f"{glyphs['id']} {rec.numeric_id}:{meta}"


def compact_namespace_segment(entry: JoinedEntry, glyphs: GlyphTable) -> str:
    if not entry.record.namespace_path:
        return unknown_segment(glyphs)
    primary, _ = split_namespace(entry.record.namespace_path)
    return f"{glyphs['namespace']} {primary.split(COLOR_SUFFIX)[0].strip()}"


def detailed_namespace_segment(entry: JoinedEntry, glyphs: GlyphTable) -> str:
    if not entry.record.namespace_path:
        return unknown_segment(glyphs)
    primary, states = split_namespace(entry.record.namespace_path)
    segment = f"{glyphs['namespace']} {primary.strip()}"
    if states:
        segment += f" {glyphs['block_state']} {substitute_block_states(states, glyphs).strip()}"
    return segment


def _render(
    entry: JoinedEntry,
    glyphs: GlyphTable,
    namespace_segment: Callable[[JoinedEntry, GlyphTable], str],
) -> str:
    head = f"{entry.prefix}.{entry.key}.name={clean_name(entry.display_name)}"
    if entry.record.is_platform_exclusive:
        segments = [exclusive_segment(glyphs)]
    else:
        segments = [id_segment(entry, glyphs), namespace_segment(entry, glyphs)]
    return " ".join([head] + [s for s in segments if s]).rstrip()


def render_compact(entry: JoinedEntry, glyphs: GlyphTable) -> str:
    return _render(entry, glyphs, compact_namespace_segment)


def render_detailed(entry: JoinedEntry, glyphs: GlyphTable) -> str:
    return _render(entry, glyphs, detailed_namespace_segment)
