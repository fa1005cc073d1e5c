"""Demo creative loaded by the editor on startup and by `adcanvas-export --sample`"""

from .core import Scene


def _px(value):
    return {'value': value, 'unit': 'px'}


def _geometry(x, y, width, height, font_size=None, **extra):
    config = {
        'positionX': x if isinstance(x, dict) else _px(x),
        'positionY': y if isinstance(y, dict) else _px(y),
        'width': _px(width),
        'height': _px(height),
    }
    if font_size:
        config['fontSize'] = font_size
    config.update(extra)
    return config


def _fade_in(anim_id, delay_s):
    return [{
        'id': anim_id,
        'name': 'Animation 1',
        'type': 'fadeIn',
        'from': 0,
        'to': 1,
        'duration': {'value': 1, 'unit': 's'},
        'delay': {'value': delay_s, 'unit': 's'},
        'easing': 'ease-in-out',
    }]


SAMPLE_SCENE = {
    'name': 'Sample HTML5 Ad',
    'allowedSizes': ['300x250', '336x280', '728x90', '160x600'],
    'styles': {'backgroundColor': '#ffffff'},
    'animationLoop': -1,
    'layers': [
        {
            'id': 'sample-headline',
            'label': 'Headline',
            'type': 'richtext',
            'aspectRatioLocked': False,
            'attributes': {'id': 'headline'},
            'sizeConfig': {
                '300x250': _geometry(10, 121, 280, 35, '20px', animations=_fade_in('sa-headline-300x250', 0.1)),
                '336x280': _geometry(10, 137, 316, 35, '24px', animations=_fade_in('sa-headline-336x280', 0.1)),
                '728x90': _geometry(124, 15, 234, 30, '20px'),
                '160x600': _geometry(10, 244, 140, 40, '20px'),
            },
            'content': '<strong>Holiday Sale!</strong>',
            'styles': {'color': '#ff0000', 'fontFamily': 'Playfair Display', 'textAlign': 'center', 'opacity': 1},
        },
        {
            'id': 'sample-description',
            'label': 'Get 50% off on your first purchase. Limited time offer!',
            'type': 'text',
            'attributes': {'id': 'description'},
            'sizeConfig': {
                '300x250': _geometry(10, 156, 280, 39, '14px', animations=_fade_in('sa-description-300x250', 0.2)),
                '336x280': _geometry(21, 177, 294, 36, '14px', animations=_fade_in('sa-description-336x280', 0.2)),
                '728x90': _geometry(98, 45, 284, 36, '14px'),
                '160x600': _geometry(10, 284, 140, 53, '14px'),
            },
            'content': 'Get 50% off on your first purchase.\nLimited time offer!',
            'styles': {'color': '#000000', 'fontFamily': 'Arial', 'textAlign': 'center', 'opacity': 1},
        },
        {
            'id': 'sample-video',
            'label': 'Demo Video',
            'type': 'video',
            'aspectRatioLocked': True,
            'attributes': {'id': 'demo-video'},
            'sizeConfig': {
                '300x250': _geometry(68, 19, 164, 92, animations=_fade_in('sa-video-300x250', 0)),
                '336x280': _geometry(69, {'value': 5, 'unit': '%'}, 198, 111,
                                     animations=_fade_in('sa-video-336x280', 0)),
                '728x90': _geometry(568, 0, 160, 90),
                '160x600': _geometry(-100, 0, 360.8, 201),
            },
            'url': 'https://test-videos.co.uk/vids/bigbuckbunny/mp4/h264/360/Big_Buck_Bunny_360_10s_1MB.mp4',
            'properties': {'autoplay': True, 'controls': False},
            'styles': {'opacity': 1},
        },
        {
            'id': 'sample-cta',
            'label': 'CTA Button',
            'type': 'button',
            'attributes': {'id': 'cta'},
            'sizeConfig': {
                '300x250': _geometry(100, 206, 100, 32, '14px', animations=_fade_in('sa-cta-300x250', 0.3)),
                '336x280': _geometry(120, 230, 100, 32, '14px', animations=_fade_in('sa-cta-336x280', 0.3)),
                '728x90': _geometry(421, 29, 100, 32, '14px'),
                '160x600': _geometry(30, 364, 100, 32, '14px'),
            },
            'text': 'Shop Now',
            'url': 'https://www.google.com',
            'actionType': 'link',
            'styles': {'backgroundColor': '#0d821b', 'color': '#ffffff', 'fontFamily': 'Arial', 'opacity': 1},
        },
        {
            'id': 'sample-background',
            'label': 'Background Image',
            'type': 'image',
            'locked': True,
            'attributes': {},
            'sizeConfig': {
                '300x250': _geometry(0, 0, 300, 250),
                '336x280': _geometry(0, 0, 336, 280),
                '728x90': _geometry(0, 0, 728, 90),
                '160x600': _geometry(0, 0, 160, 600),
            },
            'url': 'https://images.pexels.com/photos/1303098/pexels-photo-1303098.jpeg',
            'styles': {'opacity': 0.46},
        },
    ],
}


def create_sample_scene() -> Scene:
    """Fresh copy of the demo creative"""
    return Scene.from_dict(SAMPLE_SCENE)
