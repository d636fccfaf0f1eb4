#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
集成测试：测试完整构建流程

测试场景：
1. 单文件注释（分类 → 提取 → 合并 → 渲染）
2. 资源包构建（清单、语言索引、压缩包）
3. 命令行入口
"""

import json
import logging
import zipfile
from pathlib import Path

import pytest

from paperid.cli import main
from paperid.core.annotator import annotate_text
from paperid.pack.builder import PackBuilder
from paperid.utils.config import PackConfig
from paperid.utils.logger import ConfigurationError, FileOperationError, PackLogger


FOO_COMPACT = "tile.foo.name=Bar # 5:0 @ ns"
FOO_DETAILED = "tile.foo.name=Bar # 5:0 @ ns > F"
BED_COMPACT = "item.bed.name=Bed # 26:0 @ minecraft:red_bed"
BED_DETAILED = "item.bed.name=Bed # 26:0 @ minecraft:red_bed > Fc"
OTHER_LINES = [
    "## Blocks",
    "",
    "options.title=Options",
    "tile.netherreactor.active=Active!",
    "item.apple.name=Apple",
]


@pytest.fixture
def quiet_logger():
    return PackLogger(name="paperid.test", use_rich=False)


# ========================================
# 单文件注释
# ========================================

class TestAnnotateText:
    """测试 annotate_text"""

    def test_full_output(self, sample_lang, tiles, glyphs):
        result = annotate_text(sample_lang, tiles, glyphs)
        assert result.compact.split("\n") == [FOO_COMPACT, BED_COMPACT] + OTHER_LINES
        assert result.detailed.split("\n") == [FOO_DETAILED, BED_DETAILED] + OTHER_LINES

    def test_stats(self, sample_lang, tiles, glyphs):
        stats = annotate_text(sample_lang, tiles, glyphs).stats
        assert stats.catalog == 5
        assert stats.rendered == 2
        assert stats.passthrough == 2
        assert stats.dropped == 1

    def test_non_catalog_lines_unchanged_and_ordered(self, tiles, glyphs):
        text = "b=2\n\na=1\n  indented=yes\nz=26"
        result = annotate_text(text, tiles, glyphs)
        assert result.compact == text
        assert result.detailed == text

    def test_unknown_tile_dropped_with_warning(self, tiles, glyphs, caplog):
        with caplog.at_level(logging.WARNING):
            result = annotate_text("tile.mystery.name=Mystery Block\nx=1", tiles, glyphs)
        assert "Mystery" not in result.compact
        assert "Mystery" not in result.detailed
        assert result.unknown == ["mystery"]
        assert "mystery is unknown" in caplog.text

    def test_unknown_item_unchanged(self, tiles, glyphs):
        result = annotate_text("item.apple.name=Apple", tiles, glyphs)
        assert result.compact == "item.apple.name=Apple"
        assert result.detailed == "item.apple.name=Apple"

    def test_state_message_routed_verbatim(self, tiles, glyphs):
        result = annotate_text("tile.netherreactor.active=Active!", tiles, glyphs)
        assert result.compact == "tile.netherreactor.active=Active!"
        assert result.detailed == "tile.netherreactor.active=Active!"

    def test_platform_exclusive_same_in_both(self, tiles, glyphs):
        result = annotate_text("tile.netherreactor.name=Nether Reactor Core", tiles, glyphs)
        assert result.compact == "tile.netherreactor.name=Nether Reactor Core ! Bedrock Exclusive"
        assert result.compact == result.detailed

    def test_crlf_input_and_trailing_whitespace(self, tiles, glyphs):
        result = annotate_text("a=1   \r\ntile.foo.name=Bar#\r\n", tiles, glyphs)
        assert result.compact == f"{FOO_COMPACT}\na=1\n"

    def test_deterministic(self, sample_lang, tiles, glyphs):
        first = annotate_text(sample_lang, tiles, glyphs)
        second = annotate_text(sample_lang, tiles, glyphs)
        assert first.compact == second.compact
        assert first.detailed == second.detailed


# ========================================
# 资源包构建
# ========================================

class TestPackBuilder:
    """测试 PackBuilder"""

    def _config(self, ws, **kwargs):
        return PackConfig(
            input_dir=str(ws["input"]),
            output_dir=str(ws["output"]),
            version="1.2.3",
            **kwargs
        )

    def test_build_writes_pack(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        result = PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()

        pack_dir = ws["output"] / "PaperID v1.2.3"
        assert result.pack_dir == pack_dir
        texts = pack_dir / "texts"
        for name in ("en_US.p.lang", "en_US.s.lang", "de_DE.p.lang", "de_DE.s.lang"):
            assert (texts / name).is_file()

        compact = (texts / "en_US.p.lang").read_text(encoding="utf-8")
        assert compact.split("\n") == [FOO_COMPACT, BED_COMPACT] + OTHER_LINES

        de = (texts / "de_DE.s.lang").read_bytes().decode("utf-8")
        assert de == "tile.foo.name=Dings # 5:0 @ ns > F\n\nitem.apple.name=Apfel"

    def test_language_index_files(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()
        texts = ws["output"] / "PaperID v1.2.3" / "texts"

        languages = json.loads((texts / "languages.json").read_text(encoding="utf-8"))
        # 输入按路径排序：en_US.lang 在 nested/ 之前
        assert languages == ["en_US.s", "en_US.p", "de_DE.s", "de_DE.p"]

        names = json.loads((texts / "language_names.json").read_text(encoding="utf-8"))
        assert names[0] == [
            "en_US.s",
            "§a[en_US]§f v1.2.3 Modified to show Java IDs & Namespaces as well as some block states",
        ]
        assert names[1] == ["en_US.p", "§a[en_US]§f v1.2.3 Modified to show Java IDs & Namespaces"]

    def test_manifest_stamped(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()
        manifest = json.loads(
            (ws["output"] / "PaperID v1.2.3" / "manifest.json").read_text(encoding="utf-8")
        )
        header = manifest["header"]
        module = manifest["modules"][0]
        assert header["name"] == "PaperID v1.2.3"
        assert header["version"] == [1, 2, 3]
        assert module["version"] == [1, 2, 3]
        assert header["uuid"] and module["uuid"]
        assert header["uuid"] != module["uuid"]

    def test_archives(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        result = PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()
        assert result.zip_path == ws["output"] / "PaperID v1_2_3.zip"
        assert result.mcpack_path == ws["output"] / "PaperID v1_2_3.mcpack"
        assert result.mcpack_path.read_bytes() == result.zip_path.read_bytes()
        with zipfile.ZipFile(result.zip_path) as z:
            names = set(z.namelist())
        assert "PaperID v1.2.3/manifest.json" in names
        assert "PaperID v1.2.3/texts/en_US.p.lang" in names
        assert "PaperID v1.2.3/texts/languages.json" in names

    def test_no_archive(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        result = PackBuilder(self._config(ws, make_archive=False), tiles, glyphs, quiet_logger).build()
        assert result.zip_path is None
        assert not list(ws["output"].glob("*.zip"))

    def test_assets_copied(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        font = ws["root"] / "font"
        font.mkdir()
        (font / "glyph_E1.png").write_bytes(b"\x89PNG")
        (font / "default8.png").write_bytes(b"\x89PNG")
        icon = ws["root"] / "pack_icon.png"
        icon.write_bytes(b"\x89PNG icon")

        config = self._config(ws, font_dir=str(font), pack_icon=str(icon))
        PackBuilder(config, tiles, glyphs, quiet_logger).build()

        pack_dir = ws["output"] / "PaperID v1.2.3"
        assert (pack_dir / "font" / "glyph_E1.png").is_file()
        assert (pack_dir / "font" / "default8.png").is_file()
        assert (pack_dir / "pack_icon.png").read_bytes() == b"\x89PNG icon"

    def test_output_is_reset(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        ws["output"].mkdir()
        stale = ws["output"] / "stale.txt"
        stale.write_text("old", encoding="utf-8")
        PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()
        assert not stale.exists()

    def test_refuses_to_wipe_input(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        config = PackConfig(input_dir=str(ws["input"]), output_dir=str(ws["root"]), version="1.0.0")
        with pytest.raises(ConfigurationError):
            PackBuilder(config, tiles, glyphs, quiet_logger).build()
        assert (ws["input"] / "en_US.lang").exists()

    def test_refuses_output_inside_input(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        out = ws["input"] / "out"
        config = PackConfig(input_dir=str(ws["input"]), output_dir=str(out), version="1.0.0")
        with pytest.raises(ConfigurationError):
            PackBuilder(config, tiles, glyphs, quiet_logger).build()
        # 拒绝时不应生成任何输出（否则清单会被当作语言文件）
        assert not out.exists()
        assert sorted(p.name for p in ws["input"].rglob("*.lang")) == ["de_DE.lang", "en_US.lang"]

    def test_rebuild_is_byte_identical(self, lang_workspace, tiles, glyphs, quiet_logger):
        ws = lang_workspace
        out_a = ws["root"] / "out_a"
        out_b = ws["root"] / "out_b"
        for out in (out_a, out_b):
            config = PackConfig(
                input_dir=str(ws["input"]), output_dir=str(out),
                version="1.2.3", make_archive=False,
            )
            PackBuilder(config, tiles, glyphs, quiet_logger).build()

        texts_a = out_a / "PaperID v1.2.3" / "texts"
        texts_b = out_b / "PaperID v1.2.3" / "texts"
        names = sorted(p.name for p in texts_a.iterdir())
        assert names == sorted(p.name for p in texts_b.iterdir())
        assert "languages.json" in names and "language_names.json" in names
        for name in names:
            assert (texts_a / name).read_bytes() == (texts_b / name).read_bytes(), name

        def masked(out):
            manifest = json.loads(
                (out / "PaperID v1.2.3" / "manifest.json").read_text(encoding="utf-8")
            )
            uuids = [manifest["header"].pop("uuid"), manifest["modules"][0].pop("uuid")]
            return manifest, uuids

        manifest_a, uuids_a = masked(out_a)
        manifest_b, uuids_b = masked(out_b)
        assert manifest_a == manifest_b
        assert set(uuids_a).isdisjoint(uuids_b)

    def test_per_file_stats_logged_at_debug(self, lang_workspace, tiles, glyphs, quiet_logger, caplog):
        ws = lang_workspace
        with caplog.at_level(logging.DEBUG, logger="paperid.test"):
            PackBuilder(self._config(ws), tiles, glyphs, quiet_logger).build()
        debug = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any(
            m.endswith("en_US.lang: 5 catalog, 2 annotated, 2 unchanged, 1 dropped") for m in debug
        )

    def test_missing_input_is_fatal(self, tmp_path, tiles, glyphs, quiet_logger):
        config = PackConfig(
            input_dir=str(tmp_path / "nope"),
            output_dir=str(tmp_path / "out"),
            version="1.0.0",
        )
        with pytest.raises(FileOperationError):
            PackBuilder(config, tiles, glyphs, quiet_logger).build()

    def test_bundled_tables(self, lang_workspace, quiet_logger):
        ws = lang_workspace
        (ws["input"] / "en_US.lang").write_text(
            "tile.stone.granite.name=Granite\ntile.furnace.name=Furnace\n",
            encoding="utf-8",
        )
        (ws["input"] / "nested" / "de_DE.lang").unlink()
        PackBuilder(self._config(ws), log=quiet_logger).build()
        texts = ws["output"] / "PaperID v1.2.3" / "texts"
        compact = (texts / "en_US.p.lang").read_text(encoding="utf-8").split("\n")
        detailed = (texts / "en_US.s.lang").read_text(encoding="utf-8").split("\n")
        assert compact[0] == "tile.stone.granite.name=Granite \ue101 1:1 \ue102 minecraft:granite"
        assert detailed[1] == (
            "tile.furnace.name=Furnace \ue101 61:0 \ue102 minecraft:furnace \ue103 \ue104 \ue105"
        )


# ========================================
# 命令行
# ========================================

class TestCLI:
    """测试命令行入口"""

    def _write_tables(self, root: Path):
        tiles = root / "tiles.json"
        tiles.write_text(json.dumps({"foo": {"id": 5, "meta": 0, "namespace": "ns|$:flag"}}), encoding="utf-8")
        glyphs = root / "glyphs.json"
        glyphs.write_text(json.dumps({
            "error": "!", "id": "#", "namespace": "@", "block_state": ">", "flag": "F",
        }), encoding="utf-8")
        return tiles, glyphs

    def test_annotate(self, tmp_path):
        tiles, glyphs = self._write_tables(tmp_path)
        src = tmp_path / "en_US.lang"
        src.write_text("tile.foo.name=Bar#\nx=1", encoding="utf-8")
        out = tmp_path / "out"
        code = main(["--plain", "annotate", str(src), "-o", str(out),
                     "--tiles", str(tiles), "--glyphs", str(glyphs)])
        assert code == 0
        assert (out / "en_US.p.lang").read_text(encoding="utf-8") == f"{FOO_COMPACT}\nx=1"
        assert (out / "en_US.s.lang").read_text(encoding="utf-8") == f"{FOO_DETAILED}\nx=1"

    def test_build(self, lang_workspace):
        ws = lang_workspace
        code = main(["--plain", "build", str(ws["input"]), "-o", str(ws["output"]),
                     "--pack-version", "2.0.1", "--name", "IDPack", "--no-archive"])
        assert code == 0
        assert (ws["output"] / "IDPack v2.0.1" / "texts" / "en_US.p.lang").is_file()
        assert not (ws["output"] / "IDPack v2_0_1.zip").exists()

    def test_build_bad_version(self, lang_workspace):
        ws = lang_workspace
        code = main(["--plain", "build", str(ws["input"]), "-o", str(ws["output"]),
                     "--pack-version", "banana"])
        assert code == 1

    def test_check_reports_missing_glyphs(self, tmp_path):
        tiles, glyphs = self._write_tables(tmp_path)
        assert main(["--plain", "check", "--tiles", str(tiles), "--glyphs", str(glyphs)]) == 0

        tiles.write_text(json.dumps({"lever": {"namespace": "minecraft:lever|$:powered"}}), encoding="utf-8")
        assert main(["--plain", "check", "--tiles", str(tiles), "--glyphs", str(glyphs)]) == 1

    def test_check_bundled_tables(self):
        assert main(["--plain", "check"]) == 0

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
