"""Zip the pack directory and copy it to a ``.mcpack``."""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from ..utils.logger import FileOperationError

logger = logging.getLogger(__name__)


def zip_directory(src_dir: Path, zip_path: Path, arc_root: str, compression_level: int = 9) -> int:
    """Write every file below ``src_dir`` into ``zip_path`` under ``arc_root/``.

    Entries are added in sorted path order. Returns the archive size in bytes.
    """
    src_dir, zip_path = Path(src_dir), Path(zip_path)
    try:
        zip_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(
            zip_path, "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=compression_level,
        ) as zout:
            for p in sorted(src_dir.rglob("*")):
                if p.is_file():
                    arcname = f"{arc_root}/{p.relative_to(src_dir).as_posix()}"
                    zout.write(p, arcname)
    except (OSError, zipfile.BadZipFile) as e:
        raise FileOperationError("Failed to create archive", file_path=zip_path, reason=str(e)) from e
    return zip_path.stat().st_size


def make_mcpack(zip_path: Path) -> Path:
    """Copy ``x.zip`` to ``x.mcpack`` next to it."""
    mcpack = Path(zip_path).with_suffix(".mcpack")
    try:
        shutil.copyfile(zip_path, mcpack)
    except OSError as e:
        raise FileOperationError("Failed to copy archive", file_path=Path(zip_path), target=str(mcpack)) from e
    return mcpack


def build_archives(src_dir: Path, out_dir: Path, archive_stem: str, arc_root: str, compression_level: int = 9) -> tuple[Path, Path]:
    zip_path = Path(out_dir) / f"{archive_stem}.zip"
    logger.info(f'Create "{archive_stem}.mcpack"')
    size = zip_directory(src_dir, zip_path, arc_root, compression_level)
    logger.info(f"{size / 1024:.1f} KB written to {zip_path.name}")
    return zip_path, make_mcpack(zip_path)
