"""Split a .lang file into catalog lines and everything else."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

TILE_PREFIX = "tile."
ITEM_PREFIX = "item."
CATALOG_PREFIXES = (TILE_PREFIX, ITEM_PREFIX)


@dataclass
class ClassifiedLines:
    catalog: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` and ``\\r\\n``. A lone ``\\r`` is kept as content.

    A trailing newline yields a final empty line, like ``str.split``.
    """
    lines = text.split("\n")
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def is_catalog_line(line: str) -> bool:
    return line.startswith(CATALOG_PREFIXES)


def classify_lines(text: str) -> ClassifiedLines:
    """Partition lines into catalog (``tile.`` / ``item.``) and other lines.

    Relative order inside each group is preserved; blank lines are "other".
    """
    result = ClassifiedLines()
    for line in split_lines(text):
        if is_catalog_line(line):
            result.catalog.append(line)
        else:
            result.other.append(line)
    return result
