"""
Catalog key extraction.

A catalog line looks like ``tile.<key>.name=<display name>``. Only lines
that define the *name* of an entry are catalog keys; lines such as
``tile.netherreactor.active=Active!`` describe some other property of a
block and are handed back to the caller as pass-through lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .classifier import ITEM_PREFIX, TILE_PREFIX

NAME_MARKER = ".name"


class Category(str, Enum):
    TILE = "tile"
    ITEM = "item"


@dataclass(frozen=True)
class CatalogKey:
    key: str
    display_name: str
    category: Category
    raw: str

    @property
    def is_item(self) -> bool:
        return self.category is Category.ITEM


def display_name_of(line: str) -> str:
    """Text after the last ``=``; a line without ``=`` is its own name."""
    return line.rpartition("=")[2]


def strip_category(line: str) -> tuple[Optional[Category], str]:
    if line.startswith(TILE_PREFIX):
        return Category.TILE, line[len(TILE_PREFIX):]
    if line.startswith(ITEM_PREFIX):
        return Category.ITEM, line[len(ITEM_PREFIX):]
    return None, line


def strip_name_marker(rest: str) -> str:
    """Cut everything from the first ``.name`` that has text after it."""
    idx = rest.find(NAME_MARKER)
    if idx != -1 and idx + len(NAME_MARKER) < len(rest):
        return rest[:idx]
    return rest


def looks_like_assignment(key: str) -> bool:
    """True for keys still shaped like ``segment.more=value``.

    That is: a ``.``, at least one character, ``=``, at least one
    character, reaching the end of the string.
    """
    dot = key.find(".")
    if dot == -1:
        return False
    return "=" in key[dot + 2:-1]


def extract_key(line: str) -> Optional[CatalogKey]:
    """Derive the lookup key of a catalog line.

    Returns None when the line is not a name-defining entry; the caller
    keeps such lines verbatim.
    """
    category, rest = strip_category(line)
    if category is None:
        return None

    key = strip_name_marker(rest)
    if looks_like_assignment(key):
        return None

    return CatalogKey(
        key=key,
        display_name=display_name_of(line),
        category=category,
        raw=line,
    )
