"""
Tests for compiling scenes into responsive HTML documents.

Covers:
- Per-size visibility (base rules and @media blocks)
- Keyframe names, animation shorthand and loop settings
- Element markup: escaping, buttons, video controls, toggle icons
- Google Fonts link
- Determinism and input validation
"""
import pytest

from models.scene import Animation, ImageLayer, Scene
from services.fonts import GoogleFontsService
from services.scene_compiler import SceneCompiler, compile_scene
from conftest import fade_in, geometry


def make_scene(layers, sizes=('300x250', '728x90'), **fields):
    data = {'name': 'Compiled', 'allowedSizes': list(sizes), 'layers': layers}
    data.update(fields)
    return Scene.from_dict(data)


def image(layer_id, export_id=None, configs=None, **fields):
    data = {
        'id': layer_id,
        'type': 'image',
        'label': layer_id,
        'url': f"{layer_id}.png",
        'sizeConfig': configs or {'300x250': geometry(0, 0, 100, 100)},
    }
    if export_id:
        data['attributes'] = {'id': export_id}
    data.update(fields)
    return data


def button(layer_id, **fields):
    data = {
        'id': layer_id,
        'type': 'button',
        'label': layer_id,
        'text': 'Play',
        'sizeConfig': {'300x250': geometry(10, 200, 120, 40)},
    }
    data.update(fields)
    return data


def line_of(document, marker):
    return next(line for line in document.splitlines() if marker in line)


# ══════════════════════════════════════════════════════════════════════════
# Per-size rules
# ══════════════════════════════════════════════════════════════════════════

class TestSizeRules:

    def test_layer_hidden_where_not_configured(self, text_only_scene):
        document = compile_scene(text_only_scene, ['300x250', '728x90'])
        base, media = document.split('@media', 1)

        assert '#headline {' in base
        assert 'display: block;' in base
        assert 'left: 10px;' in base
        assert 'font-size: 18px;' in base
        assert '#headline { display: none; }' not in base
        assert media.startswith(' (min-width: 728px) and (min-height: 90px) {')
        assert '#headline { display: none; }' in media

    def test_first_size_is_unconditional(self, text_only_scene):
        document = compile_scene(text_only_scene, ['728x90', '300x250'])
        base, media = document.split('@media', 1)
        assert '#headline { display: none; }' in base
        assert 'min-width: 728px;' in base
        assert 'left: 10px;' in media

    def test_container_size_per_block(self, text_only_scene):
        document = compile_scene(text_only_scene)
        assert 'width: 300px;' in document
        assert 'width: 728px;' in document

    def test_defaults_to_scene_sizes(self, text_only_scene):
        assert compile_scene(text_only_scene) == compile_scene(text_only_scene, ['300x250', '728x90'])

    def test_size_outside_scene_hides_everything(self, text_only_scene):
        document = compile_scene(text_only_scene, ['300x250', '160x600'])
        media = document.split('@media', 1)[1]
        assert '(min-width: 160px) and (min-height: 600px)' in media
        assert '#headline { display: none; }' in media

    def test_repeated_sizes_dropped(self, text_only_scene):
        document = compile_scene(text_only_scene, ['300x250', '300x250'])
        assert '@media' not in document

    def test_no_sizes(self, text_only_scene):
        with pytest.raises(ValueError, match="At least one target size"):
            compile_scene(text_only_scene, [])

    def test_malformed_size(self, text_only_scene):
        with pytest.raises(ValueError, match="Invalid ad size"):
            compile_scene(text_only_scene, ['300 by 250'])

    def test_border_radius(self):
        scene = make_scene([
            image('a', configs={'300x250': geometry(0, 0, 50, 50, borderRadius=8)}),
            image('b', configs={'300x250': geometry(0, 0, 50, 50, borderRadius={
                'topLeft': 1, 'topRight': 2, 'bottomRight': 3, 'bottomLeft': 4})}),
        ])
        document = compile_scene(scene)
        assert 'border-radius: 8px;' in document
        assert 'border-radius: 1px 2px 3px 4px;' in document

    def test_percent_geometry_kept(self):
        config = geometry(0, 0, 50, 50)
        config['width'] = {'value': 50, 'unit': '%'}
        document = compile_scene(make_scene([image('a', configs={'300x250': config})]))
        assert 'width: 50%;' in document

    def test_button_layout_in_size_rules(self):
        document = compile_scene(make_scene([button('cta')]))
        base, media = document.split('@media', 1)
        assert 'display' not in line_of(document, '<a id="cta"')
        assert 'display: flex;' in base
        assert 'align-items: center;' in base
        assert '#cta { display: none; }' in media

    def test_font_size_only_in_size_rules(self):
        scene = make_scene([{
            'id': 't1', 'type': 'text', 'content': 'A', 'styles': {'fontSize': '30px'},
            'sizeConfig': {'300x250': geometry(0, 0, 100, 40, fontSize='18px'),
                           '728x90': geometry(0, 0, 100, 40)},
        }])
        document = compile_scene(scene)
        base, media = document.split('@media', 1)
        assert 'font-size' not in line_of(document, '<div id="t1"')
        assert 'font-size: 18px;' in base
        assert 'font-size: 30px;' in media

    def test_font_size_reset_where_unset(self):
        scene = make_scene([{
            'id': 't1', 'type': 'text', 'content': 'A',
            'sizeConfig': {'300x250': geometry(0, 0, 100, 40, fontSize='18px'),
                           '728x90': geometry(0, 0, 100, 40)},
        }])
        media = compile_scene(scene).split('@media', 1)[1]
        assert 'font-size: inherit;' in media

    def test_digit_leading_id_uses_attribute_selector(self):
        scene = make_scene([image('6d8a74ab')])
        document = compile_scene(scene)
        assert '[id="6d8a74ab"] {' in document
        assert '[id="6d8a74ab"] { display: none; }' in document
        assert '#6d8a74ab' not in document
        assert '<img id="6d8a74ab"' in document

    def test_generated_ids_are_selectors(self):
        scene = make_scene([image('a')])
        duplicate = scene.get_layer(scene.duplicate_layer('a'))
        for layer in (ImageLayer(), ImageLayer(), duplicate):
            assert layer.id.startswith('layer-')
            assert SceneCompiler.selector(layer) == f"#{layer.id}"


# ══════════════════════════════════════════════════════════════════════════
# Animations
# ══════════════════════════════════════════════════════════════════════════

class TestAnimations:

    @pytest.fixture
    def animated_scene(self):
        configs = {
            '300x250': geometry(0, 0, 100, 100, animations=[fade_in('sa-1')]),
            '728x90': geometry(0, 0, 90, 90),
        }
        return make_scene([image('layer-1', export_id='hero', configs=configs)])

    def test_keyframes_block(self, animated_scene):
        document = compile_scene(animated_scene)
        assert '@keyframes anim-hero-sa-1-300x250 {' in document
        stops = [
            '  0% { opacity: 0; }',
            '  5% { opacity: 1; }',
            '  83.3333% { opacity: 1; }',
            '  83.3433% { opacity: 0; }',
            '  100% { opacity: 0; }',
        ]
        for stop in stops:
            assert stop in document

    def test_shorthand_published(self, animated_scene):
        document = compile_scene(animated_scene)
        assert '--ad-animation: anim-hero-sa-1-300x250 6000ms linear 0s infinite normal both;' in document

    def test_size_without_animations(self, animated_scene):
        media = compile_scene(animated_scene).split('@media', 1)[1]
        assert '@keyframes' not in media
        assert '--ad-animation: none;' in media

    def test_static_size_restores_opacity(self, animated_scene):
        base, media = compile_scene(animated_scene).split('@media', 1)
        assert '  opacity: 0;' in base
        assert '  opacity: 1;' in media

    def test_static_size_restores_transform_and_radius(self):
        slide = dict(fade_in('sa-1'), type='slideLeft', **{'from': None, 'to': None})
        configs = {
            '300x250': geometry(0, 0, 100, 100, borderRadius=8, animations=[slide]),
            '728x90': geometry(0, 0, 90, 90),
        }
        base, media = compile_scene(make_scene([image('a', configs=configs)])).split('@media', 1)
        assert 'transform: translateX(100%);' in base
        assert 'transform: none;' not in base
        assert 'transform: none;' in media
        assert 'border-radius: 0;' in media

    def test_base_restores_opacity_animated_elsewhere(self):
        configs = {
            '300x250': geometry(0, 0, 100, 100),
            '728x90': geometry(0, 0, 90, 90, animations=[fade_in('sa-1')]),
        }
        scene = make_scene([image('a', configs=configs, styles={'opacity': 0.5})])
        base = compile_scene(scene).split('@media', 1)[0]
        assert '  opacity: 0.5;' in base

    def test_animated_marker_and_fade_opacity(self, animated_scene):
        element = line_of(compile_scene(animated_scene), '<img id="hero"')
        assert 'data-animated' in element
        assert 'opacity' not in element

    def test_static_layer_keeps_opacity(self):
        scene = make_scene([image('a', styles={'opacity': 0.5})])
        element = line_of(compile_scene(scene), '<img id="a"')
        assert 'opacity: 0.5;' in element
        assert 'data-animated' not in element

    def test_play_once(self):
        configs = {'300x250': geometry(0, 0, 100, 100, animations=[fade_in('sa-1')])}
        scene = make_scene([image('a', configs=configs)], animationLoop=0)
        document = compile_scene(scene)
        assert '  100% { opacity: 1; }' in document
        assert ' 1 normal both;' in document

    def test_bounded_loop(self):
        configs = {'300x250': geometry(0, 0, 100, 100, animations=[fade_in('sa-1')])}
        document = compile_scene(make_scene([image('a', configs=configs)], animationLoop=3))
        assert ' 3 normal both;' in document

    def test_layer_loop_timing_overrides_scene(self):
        config = geometry(0, 0, 100, 100, animations=[fade_in('sa-1', delay_ms=500, duration_ms=500)],
                          animationLoopDelay={'value': 2, 'unit': 's'},
                          animationResetDuration={'value': 0, 'unit': 'ms'})
        document = compile_scene(make_scene([image('a', configs={'300x250': config})]))
        assert 'anim-a-sa-1-300x250 2000ms' in document
        assert '  25% { opacity: 0; }' in document
        assert '  50% { opacity: 1; }' in document

    def test_transforms_combined_in_initial_state(self):
        slide = dict(fade_in('sa-1'), type='slideLeft', **{'from': None, 'to': None})
        grow = dict(fade_in('sa-2'), type='scale', **{'from': None, 'to': None})
        configs = {'300x250': geometry(0, 0, 100, 100, animations=[slide, grow])}
        document = compile_scene(make_scene([image('a', configs=configs)]))
        assert 'transform: translateX(100%) scale(0);' in document
        assert 'anim-a-sa-1-300x250 6000ms linear 0s infinite normal both, anim-a-sa-2-300x250' in document

    def test_malformed_values_use_defaults(self):
        broken = dict(fade_in('sa-1'), type='custom', property='width', **{'from': 'wide', 'to': 'wider'})
        configs = {'300x250': geometry(0, 0, 100, 80, animations=[broken])}
        document = compile_scene(make_scene([image('a', configs=configs)]))
        assert '{ width: 0px; }' in document
        assert '{ width: 100px; }' in document

    def test_unknown_property_skipped(self):
        odd = dict(fade_in('sa-1'), type='custom', property='rotation')
        configs = {'300x250': geometry(0, 0, 100, 80, animations=[odd])}
        document = compile_scene(make_scene([image('a', configs=configs)]))
        assert '@keyframes' not in document
        assert '--ad-animation: none;' in document

    def test_keyframes_name(self):
        scene = make_scene([image('layer-9', export_id='logo')])
        layer = scene.get_layer('layer-9')
        animation = Animation(id='sa-7', name='Animation 1')
        name = SceneCompiler.keyframes_name(layer, animation, scene.sizes[1])
        assert name == 'anim-logo-sa-7-728x90'


# ══════════════════════════════════════════════════════════════════════════
# Markup
# ══════════════════════════════════════════════════════════════════════════

class TestMarkup:

    def test_title_escaped(self, text_only_scene):
        text_only_scene.name = '<Ad & Co>'
        assert '<title>&lt;Ad &amp; Co&gt;</title>' in compile_scene(text_only_scene)

    def test_attributes_escaped(self):
        scene = make_scene([image('a', url='a"b.png', label='<logo>')])
        element = line_of(compile_scene(scene), '<img id="a"')
        assert 'src="a&quot;b.png"' in element
        assert 'alt="&lt;logo&gt;"' in element

    def test_text_content_verbatim(self, text_only_scene):
        assert '>Hello</div>' in compile_scene(text_only_scene)

    def test_stacking_order(self):
        scene = make_scene([image('top'), image('bottom')])
        document = compile_scene(scene)
        assert 'z-index: 2;' in line_of(document, '<img id="top"')
        assert 'z-index: 1;' in line_of(document, '<img id="bottom"')

    def test_link_button(self):
        scene = make_scene([button('cta', url='https://example.com/?a=1&b=2')])
        element = line_of(compile_scene(scene), 'id="cta"')
        assert element.strip().startswith('<a id="cta"')
        assert 'href="https://example.com/?a=1&amp;b=2"' in element
        assert 'target="_blank"' in element

    def test_video_control_button(self):
        scene = make_scene([
            button('play-btn', actionType='videoControl',
                   videoControl={'targetElementId': 'promo', 'action': 'togglePlayPause'}),
            {'id': 'promo', 'type': 'video', 'url': 'promo.mp4',
             'sizeConfig': {'300x250': geometry(0, 0, 300, 150)}},
        ])
        element = line_of(compile_scene(scene), 'id="play-btn"')
        assert element.strip().startswith('<button id="play-btn"')
        assert 'document.getElementById(&quot;promo&quot;); if (v) {' in element
        assert 'v.paused ? v.play() : v.pause();' in element

    def test_missing_video_target_is_guarded(self):
        scene = make_scene([
            button('play-btn', actionType='videoControl',
                   videoControl={'targetElementId': 'gone', 'action': 'play'}),
        ])
        element = line_of(compile_scene(scene), 'id="play-btn"')
        assert 'if (v) { v.play(); }' in element

    @pytest.mark.parametrize('autoplay, shown, hidden', [
        (True, '<rect x="6"', '<polygon'),
        (False, '<polygon', '<rect x="6"'),
    ])
    def test_toggle_icon_initial_state(self, autoplay, shown, hidden):
        scene = make_scene([
            button('play-btn', actionType='videoControl', icon={'type': 'toggle-filled'},
                   videoControl={'targetElementId': 'promo', 'action': 'togglePlayPause'}),
            {'id': 'promo', 'type': 'video', 'url': 'promo.mp4', 'properties': {'autoplay': autoplay},
             'sizeConfig': {'300x250': geometry(0, 0, 300, 150)}},
        ])
        element = line_of(compile_scene(scene), 'id="play-btn"')
        assert 'class="btn-icon" data-play-icon="' in element
        assert 'data-pause-icon="' in element
        assert shown in element
        assert hidden not in element
        assert 'iconEl.dataset.playIcon' in element

    def test_autoplay_video_flags(self):
        scene = make_scene([{'id': 'promo', 'type': 'video', 'url': 'promo.mp4',
                             'properties': {'autoplay': True, 'controls': False},
                             'sizeConfig': {'300x250': geometry(0, 0, 300, 150)}}])
        element = line_of(compile_scene(scene), '<video id="promo"')
        assert ' autoplay muted playsinline loop' in element
        assert ' controls' not in element


# ══════════════════════════════════════════════════════════════════════════
# Fonts and determinism
# ══════════════════════════════════════════════════════════════════════════

class TestDocument:

    def test_google_fonts_link(self):
        scene = make_scene([
            {'id': 't1', 'type': 'text', 'content': 'A', 'styles': {'fontFamily': 'Playfair Display'},
             'sizeConfig': {'300x250': geometry(0, 0, 100, 40)}},
            {'id': 't2', 'type': 'text', 'content': 'B', 'styles': {'fontFamily': 'Arial'},
             'sizeConfig': {'300x250': geometry(0, 50, 100, 40)}},
        ])
        link = line_of(compile_scene(scene), '<link href=')
        assert 'family=Playfair%20Display:wght@300;400;700' in link
        assert 'family=Arial' not in link
        assert 'display=swap' in link

    def test_no_fonts_no_link(self, text_only_scene):
        assert '<link' not in compile_scene(text_only_scene)

    def test_custom_font_catalog(self):
        scene = make_scene([
            {'id': 't1', 'type': 'text', 'content': 'A', 'styles': {'fontFamily': 'Roboto'},
             'sizeConfig': {'300x250': geometry(0, 0, 100, 40)}},
        ])
        assert '<link' not in compile_scene(scene, font_service=GoogleFontsService(catalog=['Lato']))

    def test_output_is_deterministic(self, sample_scene):
        assert compile_scene(sample_scene) == compile_scene(sample_scene)

    def test_scene_not_modified(self, sample_scene):
        before = sample_scene.get_snapshot()
        compile_scene(sample_scene)
        assert sample_scene.get_snapshot() == before

    def test_document_shape(self, sample_scene):
        document = compile_scene(sample_scene)
        assert document.startswith('<!DOCTYPE html>\n<html>')
        assert document.endswith('</html>\n')
        assert '<div class="ad-container">' in document
        assert "getPropertyValue('--ad-animation')" in document
