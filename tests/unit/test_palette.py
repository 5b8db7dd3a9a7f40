"""Tests for palette regions, variants and color resolution."""

import logging

import pytest

from pocketbird.core import palette
from pocketbird.core.palette import (
    DEFAULT_COLORS,
    SHEET_COLOR_MAP,
    TEMPLATE_COLORS,
    Region,
    Variant,
    LITERAL_BASE,
    hex_to_rgba,
    literal_color,
    literal_region,
    normalize_hex,
    resolve_color,
)
from pocketbird.core.tags import TUFT, Tag


class TestRegion:
    def test_transparent_is_zero(self):
        assert Region.TRANSPARENT == 0

    def test_slot_names_are_kebab_case(self):
        assert Region.WING_EDGE.slot == "wing-edge"
        assert Region.THEME_HIGHLIGHT.slot == "theme-highlight"
        assert Region.FACE.slot == "face"

    def test_from_slot(self):
        assert Region.from_slot("wing-edge") is Region.WING_EDGE
        assert Region.from_slot(" Heart-Shine ") is Region.HEART_SHINE
        assert Region.from_slot(Region.BELLY) is Region.BELLY

    def test_from_slot_unknown(self):
        with pytest.raises(ValueError, match="Unknown palette slot"):
            Region.from_slot("tail")

    def test_every_region_fits_in_a_byte(self):
        assert max(Region) < 256


class TestSheetColors:
    def test_bucket_colors_map_to_regions(self):
        assert SHEET_COLOR_MAP["#639bff"] is Region.FACE
        assert SHEET_COLOR_MAP["#000000"] is Region.OUTLINE
        assert SHEET_COLOR_MAP["#373737"] is Region.FEATHER_SPINE

    def test_template_is_reverse_map(self):
        for color, region in SHEET_COLOR_MAP.items():
            assert TEMPLATE_COLORS[region] == color


class TestHex:
    def test_normalize_lowercases(self):
        assert normalize_hex("#AABBCC") == "#aabbcc"

    def test_normalize_drops_opaque_alpha(self):
        assert normalize_hex("#2d2d2dff") == "#2d2d2d"

    def test_normalize_keeps_partial_alpha(self):
        assert normalize_hex("#2d2d2d80") == "#2d2d2d80"

    @pytest.mark.parametrize("bad", ["red", "#12345", "#gggggg", "123456"])
    def test_normalize_rejects_garbage(self, bad):
        with pytest.raises(ValueError):
            normalize_hex(bad)

    def test_hex_to_rgba(self):
        assert hex_to_rgba("#ff8000") == (255, 128, 0, 255)
        assert hex_to_rgba("#00000080") == (0, 0, 0, 128)


class TestVariantCreate:
    def test_defaults_applied(self, variant):
        for region, color in DEFAULT_COLORS.items():
            assert variant.colors[region] == color

    def test_hood_and_nose_fall_back_to_face(self, variant):
        assert variant.colors[Region.HOOD] == "#112233"
        assert variant.colors[Region.NOSE] == "#112233"

    def test_explicit_hood_wins(self):
        v = Variant.create("x", "X", "", {"face": "#111111", "hood": "#222222"})
        assert v.colors[Region.HOOD] == "#222222"
        assert v.colors[Region.NOSE] == "#111111"

    def test_theme_highlight_explicit(self):
        v = Variant.create("x", "X", "", {"face": "#111111", "hood": "#222222", "theme-highlight": "#333333"})
        assert v.theme_highlight == "#333333"

    def test_theme_highlight_from_hood(self):
        v = Variant.create("x", "X", "", {"face": "#111111", "hood": "#222222"})
        assert v.theme_highlight == "#222222"

    def test_theme_highlight_from_face(self, variant):
        assert variant.theme_highlight == "#112233"

    def test_explicit_beak_overrides_default(self):
        v = Variant.create("x", "X", "", {"face": "#111111", "beak": "#d93619"})
        assert v.colors[Region.BEAK] == "#d93619"

    def test_unknown_slot_rejected(self):
        with pytest.raises(ValueError):
            Variant.create("x", "X", "", {"tail": "#111111"})

    def test_feature_tag(self, variant, tufted_variant):
        assert variant.feature_tag == Tag.BASE
        assert tufted_variant.feature_tag == TUFT

    def test_variants_are_hashable(self, variant):
        assert {variant: 1}[variant] == 1

    def test_colors_are_read_only(self, variant):
        with pytest.raises(TypeError):
            variant.colors[Region.FACE] = "#000000"
        assert variant.colors[Region.FACE] == "#112233"


class TestResolveColor:
    def test_transparent_paints_nothing(self, variant):
        assert resolve_color(variant, Region.TRANSPARENT) is None

    def test_explicit_color(self, variant):
        assert resolve_color(variant, Region.WING) == "#445566"

    def test_default_color(self, variant):
        assert resolve_color(variant, Region.OUTLINE) == "#000000"
        assert resolve_color(variant, Region.HEART) == "#c82e2e"

    def test_accepts_raw_ints(self, variant):
        assert resolve_color(variant, int(Region.WING)) == "#445566"

    def test_no_variant_uses_template(self):
        assert resolve_color(None, Region.FACE) == "#639bff"
        assert resolve_color(None, Region.TRANSPARENT) is None

    def test_unset_region_paints_nothing(self, variant):
        # the test variant never sets a foot color
        assert resolve_color(variant, Region.FOOT) is None

    def test_unknown_region_warns_once(self, variant, monkeypatch, caplog):
        monkeypatch.setattr(palette, "_warned_regions", set())
        with caplog.at_level(logging.WARNING, logger="pocketbird.core.palette"):
            assert resolve_color(variant, 200) is None
            assert resolve_color(variant, 200) is None
        warnings = [r for r in caplog.records if "Unknown palette region" in r.getMessage()]
        assert len(warnings) == 1


class TestLiteralColors:
    @pytest.fixture(autouse=True)
    def fresh_table(self, monkeypatch):
        monkeypatch.setattr(palette, "_literal_colors", {})
        monkeypatch.setattr(palette, "_literal_codes", {})

    def test_codes_sit_above_regions(self):
        code = literal_region("#201125")
        assert code == LITERAL_BASE
        assert code > max(Region)
        assert literal_region("#201125") == code
        assert literal_region("#8f563b") == code + 1

    def test_painted_verbatim_for_any_variant(self, variant):
        code = literal_region("#8F563B")
        assert literal_color(code) == "#8f563b"
        assert resolve_color(variant, code) == "#8f563b"
        assert resolve_color(None, code) == "#8f563b"

    def test_code_space_runs_out(self, monkeypatch):
        monkeypatch.setattr(palette, "MAX_CODE", LITERAL_BASE)
        literal_region("#010101")
        with pytest.raises(ValueError, match="No pixel code"):
            literal_region("#020202")
