"""
Animation timing model.

Every animation of a layer runs inside one repeating cycle:

    cycle = loop delay + reset duration

Inside the cycle an animation holds its "from" state until its delay has
passed, interpolates to "to" over its duration, holds "to" until the loop
delay ends, then snaps back to "from" (KEYFRAME_RESET_EPSILON percent
later) and holds it through the reset pause. Because the whole schedule
is expressed as keyframe percentages, the exported document loops with
plain CSS and no timers.

Loop count semantics: -1 repeats forever, 0 plays once and holds at
"to", N repeats N times.
"""

from dataclasses import dataclass
from typing import List

from constants import KEYFRAME_RESET_EPSILON, KEYFRAME_PRECISION

FROM = 'from'
TO = 'to'


@dataclass
class Keyframe:
    """One keyframe stop: a cycle percentage and which endpoint it holds"""
    offset: float
    state: str

    @property
    def percent(self) -> str:
        return f"{format_percent(self.offset)}%"


@dataclass
class AnimationTiming:
    cycle_ms: float
    iteration_count: str
    keyframes: List[Keyframe]


def format_percent(value: float) -> str:
    """Round to KEYFRAME_PRECISION decimals and drop trailing zeros

    83.33333 -> "83.3333", 5.0 -> "5", 0.0 -> "0"
    """
    text = f"{value:.{KEYFRAME_PRECISION}f}".rstrip('0').rstrip('.')
    if text in ('', '-0'):
        return '0'
    return text


def iteration_count(loop: int) -> str:
    """CSS animation-iteration-count for a loop setting"""
    if loop == -1:
        return 'infinite'
    if loop == 0:
        return '1'
    return str(loop)


def cycle_length_ms(loop_delay_ms: float, reset_duration_ms: float,
                    delay_ms: float = 0.0, duration_ms: float = 0.0) -> float:
    """Length of one cycle; falls back to the animation's own extent
    (at least 1 ms) when loop delay plus reset is not positive"""
    cycle = loop_delay_ms + reset_duration_ms
    if cycle <= 0:
        cycle = max(delay_ms + duration_ms, 1.0)
    return cycle


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def compute_keyframes(delay_ms: float, duration_ms: float, loop_delay_ms: float,
                      reset_duration_ms: float, loop: int) -> List[Keyframe]:
    """Keyframe stops for one animation

    Looping (loop != 0):
        0% from, start% from, end% to, reset% to, reset+eps% from, 100% from
    Play once (loop == 0):
        0% from, start% from, end% to, 100% to

    Offsets are clamped so the sequence never decreases: the animation
    window stays inside [0, reset%] when looping and [0, 100] otherwise.
    """
    cycle = cycle_length_ms(loop_delay_ms, reset_duration_ms, delay_ms, duration_ms)
    start = 100.0 * delay_ms / cycle
    end = 100.0 * (delay_ms + duration_ms) / cycle

    if loop == 0:
        start = _clamp(start, 0.0, 100.0)
        end = _clamp(end, start, 100.0)
        return [
            Keyframe(0.0, FROM),
            Keyframe(start, FROM),
            Keyframe(end, TO),
            Keyframe(100.0, TO),
        ]

    reset = _clamp(100.0 * loop_delay_ms / cycle, 0.0, 100.0)
    start = _clamp(start, 0.0, reset)
    end = _clamp(end, start, reset)
    return [
        Keyframe(0.0, FROM),
        Keyframe(start, FROM),
        Keyframe(end, TO),
        Keyframe(reset, TO),
        Keyframe(min(reset + KEYFRAME_RESET_EPSILON, 100.0), FROM),
        Keyframe(100.0, FROM),
    ]


def compute_timing(animation, loop_delay, reset_duration, loop: int) -> AnimationTiming:
    """Full timing for an Animation

    Args:
        animation: Animation with duration/delay TimeValues
        loop_delay: TimeValue for the layer (or scene default)
        reset_duration: TimeValue for the layer (or scene default)
        loop: -1, 0 or N
    """
    delay_ms = max(animation.delay.to_ms(), 0.0)
    duration_ms = max(animation.duration.to_ms(), 0.0)
    loop_delay_ms = loop_delay.to_ms()
    reset_ms = reset_duration.to_ms()
    return AnimationTiming(
        cycle_ms=cycle_length_ms(loop_delay_ms, reset_ms, delay_ms, duration_ms),
        iteration_count=iteration_count(loop),
        keyframes=compute_keyframes(delay_ms, duration_ms, loop_delay_ms, reset_ms, loop),
    )
