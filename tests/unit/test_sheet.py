"""Tests for sprite sheet decoding and slicing."""

import logging

import numpy as np
import pytest
from PIL import Image

from pocketbird.core.errors import SpriteSheetError
from pocketbird.core.palette import LITERAL_BASE, Region, literal_color
from pocketbird.core.tags import TUFT, Tag
from pocketbird.sprites.sheet import (
    BIRD_SHEET,
    FEATHER_SHEET,
    HATS_SHEET,
    decode_image,
    load_sheet,
    slice_count,
    slice_layer,
)


def make_image(pixels):
    """RGBA image from rows of (r, g, b, a) tuples."""
    height, width = len(pixels), len(pixels[0])
    image = Image.new("RGBA", (width, height))
    for y, row in enumerate(pixels):
        for x, rgba in enumerate(row):
            image.putpixel((x, y), rgba)
    return image


FACE = (0x63, 0x9B, 0xFF, 255)
OUTLINE = (0, 0, 0, 255)
CLEAR = (0, 0, 0, 0)
ODD = (1, 2, 3, 255)


class TestDecode:
    def test_bucket_colors(self):
        grid = decode_image(make_image([[FACE, OUTLINE], [CLEAR, FACE]]))
        assert grid.dtype == np.uint8
        assert grid.tolist() == [
            [Region.FACE, Region.OUTLINE],
            [Region.TRANSPARENT, Region.FACE],
        ]

    def test_alpha_zero_is_transparent_whatever_the_color(self):
        grid = decode_image(make_image([[(0x63, 0x9B, 0xFF, 0)]]))
        assert grid[0, 0] == Region.TRANSPARENT

    def test_unknown_color_is_transparent_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pocketbird.sprites.sheet"):
            grid = decode_image(make_image([[ODD, ODD, FACE]]))
        assert grid.tolist() == [[Region.TRANSPARENT, Region.TRANSPARENT, Region.FACE]]
        assert sum("#010203" in r.getMessage() for r in caplog.records) == 1

    def test_unknown_color_kept_as_literal(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pocketbird.sprites.sheet"):
            grid = decode_image(make_image([[ODD, FACE]]), literal_colors=True)
        assert grid[0, 1] == Region.FACE
        assert grid[0, 0] >= LITERAL_BASE
        assert literal_color(grid[0, 0]) == "#010203"
        assert not any("Unknown sheet color" in r.getMessage() for r in caplog.records)

    def test_rgb_images_accepted(self):
        image = Image.new("RGB", (2, 1), (0x63, 0x9B, 0xFF))
        assert decode_image(image).tolist() == [[Region.FACE, Region.FACE]]


class TestLoadSheet:
    def test_missing_file(self, tmp_path):
        with pytest.raises(SpriteSheetError, match="not found"):
            load_sheet(tmp_path / "missing.png")

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(SpriteSheetError):
            load_sheet(path)

    def test_round_trip_through_png(self, tmp_path):
        path = tmp_path / "tiny.png"
        make_image([[FACE, CLEAR]]).save(path)
        assert load_sheet(path).tolist() == [[Region.FACE, Region.TRANSPARENT]]

    def test_bundled_bird_sheet(self):
        sheet = load_sheet(BIRD_SHEET)
        assert sheet.shape == (32, 320)
        assert slice_count(sheet) == 10
        assert int(sheet.max()) <= max(Region)

    def test_bundled_feather_sheet(self):
        sheet = load_sheet(FEATHER_SHEET)
        assert sheet.shape == (32, 32)
        assert np.any(sheet != Region.TRANSPARENT)

    def test_bundled_hats_sheet(self):
        sheet = load_sheet(HATS_SHEET, literal_colors=True)
        assert sheet.shape == (12, 96)
        assert slice_count(sheet, 12) == 8


class TestSliceLayer:
    @pytest.fixture
    def sheet(self):
        # three 2x2 slices: slice i filled with value i + 1
        sheet = np.zeros((2, 6), dtype=np.uint8)
        for i in range(3):
            sheet[:, i * 2:(i + 1) * 2] = i + 1
        return sheet

    def test_slices_are_columns(self, sheet):
        assert slice_layer(sheet, 1, width=2).pixels.tolist() == [[2, 2], [2, 2]]

    def test_tag_attached(self, sheet):
        assert slice_layer(sheet, 0, width=2).tag == Tag.BASE
        assert slice_layer(sheet, 0, width=2, tag="tuft").tag == TUFT

    def test_out_of_range(self, sheet):
        with pytest.raises(SpriteSheetError):
            slice_layer(sheet, 3, width=2)
        with pytest.raises(SpriteSheetError):
            slice_layer(sheet, -1, width=2)

    def test_slice_taller_than_sheet(self, sheet):
        with pytest.raises(SpriteSheetError):
            slice_layer(sheet, 0, width=3)

    def test_bundled_base_slice_has_pixels(self):
        layer = slice_layer(load_sheet(BIRD_SHEET), 0)
        assert layer.width == 32 and layer.height == 32
        assert not layer.is_empty()
