"""
Tests for the animation timing model and animated CSS properties.

Covers:
- Keyframe offsets for looping and play-once animations
- Clamping when an animation overruns its cycle
- Loop-count mapping
- Preset and custom animation property resolution with fallbacks
"""
import pytest

from models.scene import Animation, ImageLayer, LayerStyles, SizeConfig, TimeValue, ValueUnit
from services.animation_timing import (
    compute_keyframes, compute_timing, cycle_length_ms, format_percent, iteration_count,
)
from services.animation_css import animated_property


def offsets(frames):
    return [(frame.percent, frame.state) for frame in frames]


# ══════════════════════════════════════════════════════════════════════════
# Keyframes
# ══════════════════════════════════════════════════════════════════════════

class TestKeyframes:

    # ── looping ─────────────────────────────────────────────────────

    def test_default_cycle(self):
        frames = compute_keyframes(0, 300, 5000, 1000, -1)
        assert offsets(frames) == [
            ('0%', 'from'),
            ('0%', 'from'),
            ('5%', 'to'),
            ('83.3333%', 'to'),
            ('83.3433%', 'from'),
            ('100%', 'from'),
        ]

    def test_offsets_never_decrease(self):
        for delay, duration in [(0, 300), (1000, 2000), (4900, 300), (7000, 500)]:
            values = [f.offset for f in compute_keyframes(delay, duration, 5000, 1000, 3)]
            assert values == sorted(values)

    def test_overrun_clamped_to_reset(self):
        frames = compute_keyframes(4900, 300, 5000, 1000, -1)
        reset = 100.0 * 5000 / 6000
        assert frames[2].offset == pytest.approx(reset)
        assert frames[3].offset == pytest.approx(reset)

    def test_delay_shifts_start(self):
        frames = compute_keyframes(600, 300, 5000, 1000, -1)
        assert frames[1].percent == '10%'
        assert frames[2].percent == '15%'

    def test_reset_epsilon_capped(self):
        # No reset pause: the snap back can not pass 100%
        frames = compute_keyframes(0, 300, 1000, 0, -1)
        assert frames[4].offset == 100.0

    # ── play once ───────────────────────────────────────────────────

    def test_play_once_holds_to(self):
        frames = compute_keyframes(0, 300, 5000, 1000, 0)
        assert offsets(frames) == [('0%', 'from'), ('0%', 'from'), ('5%', 'to'), ('100%', 'to')]

    def test_play_once_overrun_clamped(self):
        frames = compute_keyframes(5000, 3000, 5000, 1000, 0)
        assert [f.offset for f in frames][2:] == [100.0, 100.0]

    # ── cycle ───────────────────────────────────────────────────────

    def test_cycle_length(self):
        assert cycle_length_ms(5000, 1000) == 6000

    def test_non_positive_cycle_falls_back(self):
        assert cycle_length_ms(0, 0, 200, 300) == 500
        assert cycle_length_ms(0, 0) == 1.0


class TestLoopMapping:

    @pytest.mark.parametrize('loop, expected', [(-1, 'infinite'), (0, '1'), (7, '7')])
    def test_iteration_count(self, loop, expected):
        assert iteration_count(loop) == expected

    def test_compute_timing_uses_time_units(self):
        animation = Animation(id='sa-1', name='A', duration=TimeValue(0.3, 's'), delay=TimeValue(0, 'ms'))
        timing = compute_timing(animation, TimeValue(5, 's'), TimeValue(1000, 'ms'), 7)
        assert timing.cycle_ms == 6000
        assert timing.iteration_count == '7'
        assert timing.keyframes[2].percent == '5%'

    @pytest.mark.parametrize('value, text', [(83.33333, '83.3333'), (5.0, '5'), (0.0, '0'), (12.5, '12.5')])
    def test_format_percent(self, value, text):
        assert format_percent(value) == text


# ══════════════════════════════════════════════════════════════════════════
# Animated properties
# ══════════════════════════════════════════════════════════════════════════

class TestAnimatedProperty:

    @pytest.fixture
    def layer(self):
        return ImageLayer(styles=LayerStyles(opacity=0.46, color='#ff0000', background_color='#00ff00'))

    @pytest.fixture
    def config(self):
        return SizeConfig(ValueUnit.px(0), ValueUnit.px(0), ValueUnit.px(120), ValueUnit.px(60))

    def make(self, anim_type='fadeIn', prop=None, from_value=None, to_value=None):
        return Animation(id='sa-1', name='A', type=anim_type, property=prop,
                         from_value=from_value, to_value=to_value)

    # ── presets ─────────────────────────────────────────────────────

    def test_fade_in_defaults_to_layer_opacity(self, layer, config):
        prop = animated_property(self.make(), layer, config)
        assert (prop.css_property, prop.from_value, prop.to_value) == ('opacity', '0', '0.46')

    def test_fade_in_explicit_values(self, layer, config):
        prop = animated_property(self.make(from_value=ValueUnit(0.2, ''), to_value=ValueUnit(1, '')), layer, config)
        assert (prop.from_value, prop.to_value) == ('0.2', '1')

    @pytest.mark.parametrize('anim_type, start', [
        ('slideLeft', 'translateX(100%)'),
        ('slideRight', 'translateX(-100%)'),
        ('slideUp', 'translateY(100%)'),
        ('slideDown', 'translateY(-100%)'),
    ])
    def test_slides(self, layer, config, anim_type, start):
        prop = animated_property(self.make(anim_type), layer, config)
        assert prop.is_transform
        assert prop.from_value == start
        assert prop.to_value.endswith('(0%)')

    def test_scale_preset(self, layer, config):
        prop = animated_property(self.make('scale'), layer, config)
        assert prop.declaration('from') == 'transform: scale(0)'
        assert prop.declaration('to') == 'transform: scale(1)'

    # ── custom ──────────────────────────────────────────────────────

    def test_custom_x_uses_translate(self, layer, config):
        prop = animated_property(self.make('custom', 'x', ValueUnit(-20, 'px')), layer, config)
        assert (prop.from_value, prop.to_value) == ('translateX(-20px)', 'translateX(0px)')

    def test_custom_width_defaults_to_config(self, layer, config):
        prop = animated_property(self.make('custom', 'width'), layer, config)
        assert (prop.css_property, prop.from_value, prop.to_value) == ('width', '0px', '120px')

    def test_custom_background_color(self, layer, config):
        prop = animated_property(self.make('custom', 'backgroundColor'), layer, config)
        assert (prop.css_property, prop.from_value, prop.to_value) == ('background-color', 'transparent', '#00ff00')

    def test_unknown_custom_property_skipped(self, layer, config):
        assert animated_property(self.make('custom', 'rotation'), layer, config) is None

    def test_malformed_value_falls_back(self, layer, config):
        prop = animated_property(self.make('scale', from_value='huge'), layer, config)
        assert prop.from_value == 'scale(0)'

    def test_malformed_color_falls_back(self, layer, config):
        prop = animated_property(self.make('custom', 'color', to_value='red;}'), layer, config)
        assert prop.to_value == '#ff0000'
