"""Tests for frame sequencing and redraw memoization."""

import pytest

from pocketbird.core.errors import AnimationConstructionError
from pocketbird.core.geometry import Direction
from pocketbird.core.palette import Region
from pocketbird.sprites.animation import Animation
from pocketbird.sprites.frame import Frame
from pocketbird.sprites.layer import Layer


def solid_frame(region, width=2, height=2):
    return Frame([Layer([[region] * width for _ in range(height)])])


@pytest.fixture
def frame_a():
    return solid_frame(Region.FACE)


@pytest.fixture
def frame_b():
    return solid_frame(Region.WING)


@pytest.fixture
def looping(frame_a, frame_b):
    return Animation([frame_a, frame_b], [80, 80])


class TestConstruction:
    def test_needs_frames(self):
        with pytest.raises(AnimationConstructionError):
            Animation([], [])

    def test_lengths_must_match(self, frame_a):
        with pytest.raises(AnimationConstructionError, match="durations"):
            Animation([frame_a], [10, 20])

    @pytest.mark.parametrize("bad", [0, -5, 1.5, True])
    def test_durations_positive_ints(self, frame_a, bad):
        with pytest.raises(AnimationConstructionError):
            Animation([frame_a], [bad])

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            Animation([], [])

    def test_totals(self, looping):
        assert looping.duration == 160
        assert (looping.width, looping.height) == (2, 2)


class TestFrameSelection:
    def test_looping_wraps(self, looping):
        assert looping.frame_index_at(0) == 0
        assert looping.frame_index_at(79) == 0
        assert looping.frame_index_at(80) == 1
        assert looping.frame_index_at(160) == 0
        assert looping.frame_index_at(250) == 1

    def test_non_looping_holds_last_frame(self, frame_a, frame_b):
        anim = Animation([frame_a, frame_b, frame_a], [60, 80, 250], loop=False)
        assert anim.frame_index_at(389) == 2
        assert anim.frame_index_at(390) == 2
        assert anim.frame_index_at(10_000) == 2

    def test_current_frame_index_ignores_loop(self, looping):
        assert looping.current_frame_index(500) == 1


class TestDraw:
    def test_frames_over_time(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        first = {fill[4] for fill in target.fills}
        target.reset()
        looping.draw(target, Direction.LEFT, 0, 1, now=80)
        second = {fill[4] for fill in target.fills}
        target.reset()
        looping.draw(target, Direction.LEFT, 0, 1, now=160)
        third = {fill[4] for fill in target.fills}
        assert first != second
        assert third == first

    def test_completion_flag(self, frame_a, frame_b, target):
        anim = Animation([frame_a, frame_b, frame_a], [60, 80, 250], loop=False)
        assert anim.draw(target, Direction.LEFT, 0, 1, now=389) is False
        assert anim.draw(target, Direction.LEFT, 0, 1, now=390) is True

    def test_looping_never_completes(self, looping, target):
        assert looping.draw(target, Direction.LEFT, 0, 1, now=10_000) is False

    def test_same_frame_is_not_redrawn(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        target.reset()
        looping.draw(target, Direction.LEFT, 0, 1, now=40)
        assert target.fills == [] and target.clears == []

    def test_direction_change_redraws(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        target.reset()
        looping.draw(target, Direction.RIGHT, 0, 1, now=10)
        assert target.fills

    def test_hat_change_redraws(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        target.reset()
        looping.draw(target, Direction.LEFT, 0, 1, now=10, hat="fez")
        assert target.fills

    def test_new_start_time_redraws(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        target.reset()
        looping.draw(target, Direction.LEFT, 500, 1, now=500)
        assert target.fills

    def test_invalidate_forces_redraw(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0)
        looping.invalidate()
        target.reset()
        looping.draw(target, Direction.LEFT, 0, 1, now=1)
        assert target.fills

    def test_redraw_clears_animation_area(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 3, now=0)
        assert target.clears == [(0, 0, 6, 6)]

    def test_no_clear_when_disabled(self, looping, target):
        looping.draw(target, Direction.LEFT, 0, 1, now=0, clear=False)
        assert target.clears == []
