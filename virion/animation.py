"""
virion/animation.py
Presentation-layer animation: per-alignment coefficients and frame ticks

Parameters are fixed per alignment. Frame timing is advisory only; a
skipped frame changes smoothness, never traits.
"""

import math
import time
from typing import Callable, Optional

from .config import ANIMATION_CONFIGS
from .models import Alignment, AnimationParams, FrameState


def animation_params(alignment: Alignment) -> AnimationParams:
    """Animation coefficients for an alignment."""
    cfg = ANIMATION_CONFIGS[int(Alignment(alignment))]
    return AnimationParams(
        rotation_rate=cfg.rotation_rate,
        sway_rate=cfg.sway_rate,
        sway_amplitude=cfg.sway_amplitude,
        pulse_rate=cfg.pulse_rate,
        pulse_amplitude=cfg.pulse_amplitude,
        base_scale=cfg.base_scale,
        float_speed=cfg.float_speed,
        float_amplitude=cfg.float_amplitude,
    )


def frame_state(params: AnimationParams, t: float) -> FrameState:
    """Root transform at elapsed time t (seconds)."""
    return FrameState(
        rotation_y=t * params.rotation_rate,
        rotation_z=math.sin(t * params.sway_rate) * params.sway_amplitude,
        scale=params.base_scale * (1.0 + math.sin(t * params.pulse_rate) * params.pulse_amplitude),
        float_offset=math.sin(t * params.float_speed) * params.float_amplitude,
    )


class FrameClock:
    """
    Cooperative per-frame tick.

    The display loop calls tick() whenever it gets to draw; the state
    depends only on elapsed time, so dropped frames are harmless.
    """

    def __init__(self, params: AnimationParams,
                 time_source: Optional[Callable[[], float]] = None):
        self.params = params
        self._time = time_source or time.monotonic
        self._start = self._time()
        self._frames = 0

    @property
    def elapsed(self) -> float:
        return self._time() - self._start

    @property
    def frames(self) -> int:
        return self._frames

    def reset(self) -> None:
        self._start = self._time()
        self._frames = 0

    def tick(self) -> FrameState:
        self._frames += 1
        return frame_state(self.params, self.elapsed)
