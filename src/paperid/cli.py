#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PaperID - 命令行入口

Commands:
- build:    annotate every .lang file in a folder and package the pack
- annotate: annotate a single .lang file
- check:    verify the metadata table against the glyph table

用法:
    paperid build input -o output --pack-version 1.2.0
    paperid annotate en_US.lang -o out/
    paperid check --tiles tiles.json --glyphs glyphs.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from . import __version__
from .pack.builder import BuildResult, PackBuilder, write_lang_variants
from .utils.config import ConfigManager
from .utils.logger import PaperIDError, setup_logger
from .utils.tables import load_glyphs, load_tiles, missing_block_state_glyphs

console = Console()


def _add_table_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--tiles", help="方块元数据表 JSON（默认使用内置表）")
    p.add_argument("--glyphs", help="字形表 JSON（默认使用内置表）")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paperid",
        description="Annotate Bedrock .lang files with Java IDs and namespaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"paperid {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    parser.add_argument("--log-file", help="同时写入日志文件")
    parser.add_argument("--plain", action="store_true", help="不使用 rich 格式化日志")

    sub = parser.add_subparsers(dest="command")

    b = sub.add_parser("build", help="构建资源包")
    b.add_argument("input", nargs="?", help="输入 .lang 目录（默认取配置 input_dir）")
    b.add_argument("-o", "--out", help="输出目录（会被清空）")
    b.add_argument("--config", help="配置文件（默认 ./paperid.json 或 $PAPERID_CONFIG）")
    _add_table_args(b)
    b.add_argument("--manifest", help="manifest.json 模板")
    b.add_argument("--font-dir", help="字体目录，复制到包内 font/")
    b.add_argument("--icon", help="pack_icon.png 路径")
    b.add_argument("--name", help="资源包名称")
    b.add_argument("--pack-version", help="版本号 MAJOR.MINOR.PATCH")
    b.add_argument("--no-archive", action="store_true", help="不生成 .zip/.mcpack")
    b.add_argument("--no-suggest", action="store_true", help="未知方块警告中不给出相似键")

    a = sub.add_parser("annotate", help="处理单个 .lang 文件")
    a.add_argument("file", help=".lang 文件")
    a.add_argument("-o", "--out", help="输出目录（默认与输入同目录）")
    _add_table_args(a)

    c = sub.add_parser("check", help="检查元数据表引用的字形是否齐全")
    _add_table_args(c)

    return parser


def print_build_summary(result: BuildResult) -> None:
    table = Table(title=result.pack_dir.name)
    table.add_column("Language")
    table.add_column("Catalog", justify="right")
    table.add_column("Annotated", justify="right")
    table.add_column("Passed through", justify="right")
    table.add_column("Unknown", justify="right")
    for f in result.files:
        s = f.result.stats
        table.add_row(f.base, str(s.catalog), str(s.rendered), str(s.passthrough), str(s.dropped))
    console.print(table)
    if result.mcpack_path:
        console.print(f"[bold green]Pack ready[/]: {result.mcpack_path}")
    else:
        console.print(f"[bold green]Pack folder ready[/]: {result.pack_dir}")


def cmd_build(args: argparse.Namespace) -> int:
    config = ConfigManager(args.config).config.merged(
        input_dir=args.input,
        output_dir=args.out,
        tiles_path=args.tiles,
        glyphs_path=args.glyphs,
        manifest_path=args.manifest,
        font_dir=args.font_dir,
        pack_icon=args.icon,
        pack_name=args.name,
        version=args.pack_version,
        make_archive=False if args.no_archive else None,
        suggest_unknown=False if args.no_suggest else None,
    )
    if config.log_file and not args.log_file:
        setup_logger(
            level=logging.DEBUG if args.verbose else logging.INFO,
            log_file=Path(config.log_file),
            use_rich=not args.plain,
        )
    result = PackBuilder(config).build()
    print_build_summary(result)
    return 0


def cmd_annotate(args: argparse.Namespace) -> int:
    src = Path(args.file)
    out_dir = Path(args.out) if args.out else src.parent
    report = write_lang_variants(src, out_dir, load_tiles(args.tiles), load_glyphs(args.glyphs))
    console.print(f"Wrote [magenta]{report.compact_path}[/] and [magenta]{report.detailed_path}[/]")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    tiles = load_tiles(args.tiles)
    glyphs = load_glyphs(args.glyphs)
    report = missing_block_state_glyphs(tiles, glyphs)
    if not report:
        console.print(f"[green]OK[/]: {len(tiles)} entries, {len(glyphs)} glyphs")
        return 0
    for key, symbols in report.items():
        console.print(f"[red]{key}[/]: missing glyphs {', '.join(symbols)}")
    return 1


COMMANDS = {
    "build": cmd_build,
    "annotate": cmd_annotate,
    "check": cmd_check,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主入口函数"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    log = setup_logger(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
        use_rich=not args.plain,
    )

    try:
        return COMMANDS[args.command](args)
    except PaperIDError as e:
        log.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
