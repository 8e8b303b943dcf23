import pytest
from gi.repository import GObject

from widgets.transition import FRAME_INTERVAL, AnimationMode, Transition, ease


class Target(GObject.Object):
    value = GObject.Property(type=float, default=0.0)
    level = GObject.Property(type=int, default=0)


@pytest.mark.parametrize("mode", list(AnimationMode))
def test_easing_curves_start_and_end(mode):
    assert ease(mode, 0.0) == 0.0
    assert ease(mode, 1.0) == 1.0


def test_ease_in_out_quad_is_symmetric():
    assert ease(AnimationMode.EASE_IN_OUT_QUAD, 0.5) == 0.5
    assert ease(AnimationMode.EASE_IN_OUT_QUAD, 0.25) == 0.125
    assert ease(AnimationMode.EASE_IN_OUT_QUAD, 0.75) == 0.875


def test_linear_transition_reaches_target(clock):
    target = Target()
    stopped = []
    transition = Transition(target, "value", 100, 160, AnimationMode.LINEAR, clock, stopped.append)

    transition.start()
    clock.advance(FRAME_INTERVAL * 5)
    assert target.value == pytest.approx(50.0)

    clock.advance(FRAME_INTERVAL * 5)
    assert target.value == 100.0
    assert not transition.running
    assert stopped == [transition]


def test_stop_keeps_current_value(clock):
    target = Target()
    stopped = []
    transition = Transition(target, "value", 100, 160, AnimationMode.LINEAR, clock, stopped.append)

    transition.start()
    clock.advance(FRAME_INTERVAL * 2)
    transition.stop()
    clock.advance(1000)

    assert target.value == pytest.approx(20.0)
    assert stopped == []


def test_zero_duration_applies_immediately(clock):
    target = Target()
    transition = Transition(target, "level", 42, 0, clock=clock)

    transition.start()

    assert target.level == 42
    assert clock.pending == 0


def test_int_properties_are_rounded(clock):
    target = Target()
    transition = Transition(target, "level", 255, 100, AnimationMode.LINEAR, clock)

    transition.start()
    clock.advance(FRAME_INTERVAL)

    assert target.level == round(255 * FRAME_INTERVAL / 100)
