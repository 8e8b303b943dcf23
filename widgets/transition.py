from enum import Enum
from typing import Optional

from service.clock import get_default_clock

FRAME_INTERVAL = 16  # milliseconds


class AnimationMode(Enum):
    LINEAR = 1
    EASE_IN_OUT_QUAD = 2


def ease(mode: AnimationMode, t: float) -> float:
    """Map linear progress t in [0, 1] onto the easing curve."""
    if mode == AnimationMode.EASE_IN_OUT_QUAD:
        if t < 0.5:
            return 2 * t * t
        return 1 - pow(-2 * t + 2, 2) / 2
    return t


class Transition:
    """Animates one numeric GObject property towards a target value."""

    def __init__(
        self,
        target,
        prop: str,
        to: float,
        duration: int,
        mode: AnimationMode = AnimationMode.EASE_IN_OUT_QUAD,
        clock=None,
        on_stopped=None,
    ):
        self._target = target
        self._prop = prop
        self._from = float(target.get_property(prop))
        self._to = float(to)
        self._duration = duration
        self._mode = mode
        self._clock = clock or get_default_clock()
        self._on_stopped = on_stopped
        self._start_time: Optional[float] = None
        self._source_id: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._source_id is not None

    @property
    def final_value(self) -> float:
        return self._to

    def start(self) -> None:
        if self._duration <= 0:
            self._apply(self._to)
            self._finish()
            return
        self._start_time = self._clock.now()
        self._source_id = self._clock.timeout_add(FRAME_INTERVAL, self._tick)

    def stop(self) -> None:
        """Stop where it is, without jumping to the final value."""
        if self._source_id is not None:
            self._clock.source_remove(self._source_id)
            self._source_id = None

    def _tick(self):
        elapsed = self._clock.now() - self._start_time
        progress = min(1.0, elapsed / self._duration)
        self._apply(self._from + (self._to - self._from) * ease(self._mode, progress))

        if progress >= 1.0:
            self._source_id = None
            self._finish()
            return False
        return True

    def _apply(self, value: float) -> None:
        if isinstance(self._target.get_property(self._prop), int):
            value = round(value)
        self._target.set_property(self._prop, value)

    def _finish(self) -> None:
        if self._on_stopped:
            self._on_stopped(self)
