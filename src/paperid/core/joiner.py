"""
Join catalog keys with the static block metadata table.

Unmatched keys are handled differently per category:

- ``item.`` entries without metadata are ordinary items and stay in the
  file unchanged.
- ``tile.`` entries without metadata are unknown blocks; they are logged
  and removed from the output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from rapidfuzz import fuzz, process

from ..utils.logger import TableError
from .extractor import CatalogKey, Category

logger = logging.getLogger(__name__)

# JSON field name -> (attribute, accepted types)
_RECORD_FIELDS = {
    "id": ("numeric_id", (int,)),
    "meta": ("meta", (int,)),
    "namespace": ("namespace_path", (str,)),
    "isItem": ("is_item_representation", (bool,)),
    "isBedrockOnly": ("is_platform_exclusive", (bool,)),
}


@dataclass(frozen=True)
class MetadataRecord:
    """Static data for one block: Java id/meta, namespace and flags."""

    numeric_id: Optional[int] = None
    meta: Optional[int] = None
    namespace_path: Optional[str] = None
    is_item_representation: bool = False
    is_platform_exclusive: bool = False

    @classmethod
    def from_json(cls, key: str, obj: Any) -> "MetadataRecord":
        """Build a record from its JSON object, ignoring unknown fields.

        Raises:
            TableError: ``obj`` is not an object or a field has the wrong type
        """
        if not isinstance(obj, dict):
            raise TableError("Metadata record must be an object", table="tiles", key=key)

        kwargs = {}
        for json_name, (attr, types) in _RECORD_FIELDS.items():
            value = obj.get(json_name)
            if value is None:
                continue
            # bool is an int subclass; ids must not be booleans
            if not isinstance(value, types) or (types == (int,) and isinstance(value, bool)):
                raise TableError(
                    f"Field '{json_name}' has wrong type {type(value).__name__}",
                    table="tiles",
                    key=key,
                )
            kwargs[attr] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class JoinedEntry:
    key: str
    display_name: str
    is_item: bool
    record: MetadataRecord

    @property
    def prefix(self) -> str:
        return Category.ITEM.value if self.is_item else Category.TILE.value


@dataclass
class JoinResult:
    entries: List[JoinedEntry] = field(default_factory=list)
    # raw lines handed back to the "other" group
    passthrough: List[str] = field(default_factory=list)
    # tile keys that had no metadata and were dropped
    unknown: List[str] = field(default_factory=list)


def suggest_key(key: str, known: Iterable[str], cutoff: float = 80.0) -> Optional[str]:
    """Closest known key by edit ratio, or None below ``cutoff``."""
    match = process.extractOne(key, known, scorer=fuzz.ratio, score_cutoff=cutoff)
    return match[0] if match else None


def join_entry(catalog_key: CatalogKey, record: MetadataRecord) -> JoinedEntry:
    return JoinedEntry(
        key=catalog_key.key,
        display_name=catalog_key.display_name,
        is_item=catalog_key.is_item,
        record=record,
    )


def join_entries(
    keys: Iterable[CatalogKey],
    tiles: Mapping[str, MetadataRecord],
    suggest: bool = False,
    suggest_cutoff: float = 80.0,
) -> JoinResult:
    """Look up every key in ``tiles``.

    Args:
        keys: extracted catalog keys, in file order
        tiles: read-only metadata table
        suggest: append a "did you mean" hint to unknown-tile warnings
        suggest_cutoff: minimum similarity (0-100) for a hint
    """
    result = JoinResult()
    for ck in keys:
        record = tiles.get(ck.key)
        if record is not None:
            result.entries.append(join_entry(ck, record))
            continue

        if ck.category is Category.ITEM:
            result.passthrough.append(ck.raw)
            continue

        result.unknown.append(ck.key)
        msg = f"Language file entry {ck.key} is unknown!"
        if suggest:
            hint = suggest_key(ck.key, tiles.keys(), suggest_cutoff)
            if hint:
                msg += f" Did you mean '{hint}'?"
        logger.warning(msg)
    return result
