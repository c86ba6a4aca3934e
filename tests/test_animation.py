"""
Tests for virion/animation.py

Covers:
- Per-alignment coefficients
- Frame state at known times
- FrameClock with an injected time source
"""

import math

import pytest

from virion.animation import FrameClock, animation_params, frame_state
from virion.models import Alignment


class FakeTime:
    """Manually advanced monotonic clock."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, dt):
        self.now += dt


@pytest.fixture
def fake_time():
    return FakeTime()


class TestAnimationParams:

    def test_symbiotic_values(self):
        p = animation_params(Alignment.SYMBIOTIC)
        assert p.rotation_rate == 0.12
        assert p.sway_rate == 0.2
        assert p.sway_amplitude == 0.05
        assert p.base_scale == 1.8

    def test_parasitic_faster_and_twitchier(self):
        sym = animation_params(Alignment.SYMBIOTIC)
        par = animation_params(Alignment.PARASITIC)
        assert par.rotation_rate > sym.rotation_rate
        assert par.pulse_rate > sym.pulse_rate
        assert par.pulse_amplitude > sym.pulse_amplitude

    def test_same_alignment_same_params(self):
        assert animation_params(1) == animation_params(Alignment.PARASITIC)

    def test_unknown_alignment(self):
        with pytest.raises(ValueError):
            animation_params(5)


class TestFrameState:

    def test_rest_pose(self):
        s = frame_state(animation_params(Alignment.SYMBIOTIC), 0.0)
        assert s.rotation_y == 0.0
        assert s.rotation_z == 0.0
        assert s.scale == pytest.approx(1.8)
        assert s.float_offset == 0.0

    def test_rotation_linear_in_time(self):
        p = animation_params(Alignment.SYMBIOTIC)
        assert frame_state(p, 10.0).rotation_y == pytest.approx(1.2)

    def test_sway_and_pulse(self):
        p = animation_params(Alignment.SYMBIOTIC)
        t = 3.0
        s = frame_state(p, t)
        assert s.rotation_z == pytest.approx(math.sin(0.2 * t) * 0.05)
        assert s.scale == pytest.approx(1.8 * (1.0 + math.sin(1.5 * t) * 0.02))

    def test_scale_bounded(self):
        p = animation_params(Alignment.PARASITIC)
        for i in range(200):
            s = frame_state(p, i * 0.07)
            assert p.base_scale * (1 - p.pulse_amplitude) - 1e-12 <= s.scale
            assert s.scale <= p.base_scale * (1 + p.pulse_amplitude) + 1e-12


class TestFrameClock:

    def test_elapsed_follows_time_source(self, fake_time):
        clock = FrameClock(animation_params(Alignment.SYMBIOTIC), time_source=fake_time)
        fake_time.advance(2.5)
        assert clock.elapsed == pytest.approx(2.5)

    def test_tick_counts_frames(self, fake_time):
        clock = FrameClock(animation_params(Alignment.SYMBIOTIC), time_source=fake_time)
        for _ in range(3):
            fake_time.advance(1 / 60)
            clock.tick()
        assert clock.frames == 3

    def test_dropped_frames_do_not_change_state(self, fake_time):
        """State depends on elapsed time only, not on how many ticks ran."""
        params = animation_params(Alignment.PARASITIC)
        smooth = FrameClock(params, time_source=fake_time)
        choppy = FrameClock(params, time_source=fake_time)
        for i in range(10):
            fake_time.advance(0.1)
            state = smooth.tick()
            if i % 4 == 0:
                choppy.tick()
        assert choppy.tick() == state
        assert choppy.frames < smooth.frames

    def test_reset(self, fake_time):
        clock = FrameClock(animation_params(Alignment.SYMBIOTIC), time_source=fake_time)
        fake_time.advance(5.0)
        clock.tick()
        clock.reset()
        assert clock.elapsed == 0.0
        assert clock.frames == 0
