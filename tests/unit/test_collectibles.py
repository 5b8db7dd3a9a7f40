"""Tests for feather and hat collectibles."""

import pytest

from pocketbird.collectibles import (
    SWAY_AMPLITUDE,
    FeatherDrop,
    HatDrop,
    choose_hat_to_unlock,
    choose_species_to_unlock,
)
from pocketbird.core.geometry import Rect, Size


class TestChooseSpecies:
    def test_only_locked_species(self, scripted):
        assert choose_species_to_unlock(["a", "b", "c"], ["a"], scripted()) == "b"

    def test_everything_unlocked(self):
        assert choose_species_to_unlock(["a", "b"], ["b", "a"]) is None

    def test_default_rng(self):
        assert choose_species_to_unlock(["a", "b"], ["a"]) == "b"


class TestFeatherDrop:
    def test_spawn_above_viewport_away_from_edges(self, scripted):
        feather = FeatherDrop.spawn("robin", Size(800, 600), 32, scripted([0.0]))
        assert feather.x == 64
        assert feather.top == -32
        feather = FeatherDrop.spawn("robin", Size(800, 600), 32, scripted([1.0]))
        assert feather.x == 800 - 64

    def test_fall_and_sway(self):
        feather = FeatherDrop("robin", x=100, top=0, size=32)
        feather.fall(Size(800, 600), ticks=30, speed=2)
        assert feather.top == 2
        assert feather.sway == pytest.approx(SWAY_AMPLITUDE)
        assert feather.left == pytest.approx(100 + SWAY_AMPLITUDE)

    def test_lands_on_the_floor(self):
        viewport = Size(800, 600)
        feather = FeatherDrop("robin", x=100, top=567, size=32)
        feather.fall(viewport, ticks=30)
        assert feather.top == 568
        assert feather.landed(viewport)
        assert feather.sway == 0
        feather.fall(viewport, ticks=31)
        assert feather.top == 568


class TestChooseHat:
    def test_first_locked_hat(self, scripted):
        assert choose_hat_to_unlock(["none", "top-hat"], scripted()) == "viking-helmet"

    def test_invisible_hat_never_dropped(self, scripted):
        wearable = [
            "top-hat", "viking-helmet", "cowboy-hat", "bowler-hat",
            "fez", "wizard-hat", "baseball-cap", "flower-hat",
        ]
        assert choose_hat_to_unlock(wearable, scripted()) is None


class TestHatDrop:
    def test_centered_on_top_edge(self):
        hat = HatDrop.place("fez", Rect(100, 200, 400, 50), 14)
        assert hat.left == 100 + 200 - 7
        assert hat.top == 200 - 14

    def test_page_coordinates_include_scroll(self):
        hat = HatDrop.place("fez", Rect(100, 200, 400, 50), 14, scroll_y=300)
        assert hat.top == 486
