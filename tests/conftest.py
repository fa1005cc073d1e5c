"""
Shared fixtures for Ad Canvas Editor tests.

Provides reusable Scene instances, layer builders and an engine fixture.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))


# ── Builders ─────────────────────────────────────────────────────────────

def px(value):
    return {'value': value, 'unit': 'px'}


def geometry(x, y, width, height, **extra):
    """sizeConfig entry in the scene document format"""
    config = {'positionX': px(x), 'positionY': px(y), 'width': px(width), 'height': px(height)}
    config.update(extra)
    return config


def fade_in(anim_id, delay_ms=0, duration_ms=300):
    return {
        'id': anim_id,
        'name': 'Animation 1',
        'type': 'fadeIn',
        'from': 0,
        'to': 1,
        'duration': {'value': duration_ms, 'unit': 'ms'},
        'delay': {'value': delay_ms, 'unit': 'ms'},
        'easing': 'linear',
    }


def add_box(scene, layer_id, rect, size='300x250', **fields):
    """Add an image layer occupying rect=(x, y, w, h) at one size only"""
    from models.scene import ImageLayer, SizeConfig, ValueUnit

    x, y, w, h = rect
    layer = ImageLayer(id=layer_id, label=layer_id, url=f"{layer_id}.png", **fields)
    layer.size_config[size] = SizeConfig(ValueUnit.px(x), ValueUnit.px(y), ValueUnit.px(w), ValueUnit.px(h))
    scene.add_layer(layer, index=len(scene.layers))
    return layer


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def scene():
    """Empty two-size scene (300x250 base, 728x90)"""
    from models.scene import Scene
    scene = Scene(name='Test Ad', sizes=['300x250', '728x90'])
    Scene.set_active(scene)
    return scene


@pytest.fixture
def sample_scene():
    """Fresh copy of the built-in demo creative"""
    from models.scene import Scene, create_sample_scene
    scene = create_sample_scene()
    Scene.set_active(scene)
    return scene


@pytest.fixture
def text_only_scene():
    """One text layer present at 300x250 and absent at 728x90"""
    from models.scene import Scene
    return Scene.from_dict({
        'name': 'Text Only',
        'allowedSizes': ['300x250', '728x90'],
        'layers': [{
            'id': 'layer-1',
            'type': 'text',
            'label': 'Headline',
            'attributes': {'id': 'headline'},
            'content': 'Hello',
            'sizeConfig': {'300x250': geometry(10, 20, 200, 40, fontSize='18px')},
        }],
    })


@pytest.fixture
def engine(scene):
    """Transform engine on the empty scene at 300x250, zoom 1"""
    from components.transform import TransformEngine
    return TransformEngine(scene, '300x250')
