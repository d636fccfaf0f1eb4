"""
Manifest stamping and the language index files.

``LanguageIndex`` collects the languages compiled during a build and
renders ``texts/languages.json`` and ``texts/language_names.json``.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

DETAILED_SUFFIX = "s"
COMPACT_SUFFIX = "p"

DETAILED_LABEL = "Modified to show Java IDs & Namespaces as well as some block states"
COMPACT_LABEL = "Modified to show Java IDs & Namespaces"


def version_string(version: Sequence[int], sep: str = ".") -> str:
    return sep.join(str(v) for v in version)


def pack_title(pack_name: str, version: Sequence[int]) -> str:
    """``PaperID v1.2.3``"""
    return f"{pack_name} v{version_string(version)}"


def new_uuid() -> str:
    return str(uuid.uuid4())


def stamp_manifest(
    template: dict,
    pack_name: str,
    version: Sequence[int],
    uuid_factory: Callable[[], str] = new_uuid,
) -> dict:
    """Return a copy of ``template`` with fresh uuids, version and name.

    The template itself is left untouched.
    """
    manifest = copy.deepcopy(template)
    header = manifest["header"]
    header["uuid"] = uuid_factory()
    header["version"] = list(version)
    header["name"] = pack_title(pack_name, version)

    module = manifest["modules"][0]
    module["uuid"] = uuid_factory()
    module["version"] = list(version)
    return manifest


def lang_basename(filename: str) -> str:
    """``en_US.lang`` -> ``en_US``; everything from the first dot is dropped."""
    return filename.split(".")[0]


@dataclass(frozen=True)
class LanguageEntry:
    language_id: str
    base: str
    detailed: bool


@dataclass
class LanguageIndex:
    entries: List[LanguageEntry] = field(default_factory=list)

    def add(self, base: str) -> None:
        """Register one compiled input file (detailed variant first)."""
        self.entries.append(LanguageEntry(f"{base}.{DETAILED_SUFFIX}", base, True))
        self.entries.append(LanguageEntry(f"{base}.{COMPACT_SUFFIX}", base, False))

    def merge(self, other: "LanguageIndex") -> "LanguageIndex":
        """Append ``other`` after this index, keeping both orders."""
        return LanguageIndex(self.entries + other.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def languages(self) -> List[str]:
        return [e.language_id for e in self.entries]

    def language_names(self, version: Sequence[int]) -> List[List[str]]:
        v = version_string(version)
        names = []
        for e in self.entries:
            label = DETAILED_LABEL if e.detailed else COMPACT_LABEL
            names.append([e.language_id, f"§a[{e.base}]§f v{v} {label}"])
        return names
