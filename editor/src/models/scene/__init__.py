"""Scene model package"""

from .query_mixin import SceneQueryMixin
from .layer_mixin import SceneLayerMixin
from .geometry_mixin import SceneGeometryMixin
from .serialization_mixin import SceneSerializationMixin
from .core import Scene
from .sample import create_sample_scene
from ._internal import (
    ValueUnit, TimeValue, AdSize, format_number,
    Animation, CornerRadii, SizeConfig, GEOMETRY_FIELDS,
    Layer, LayerStyles,
    TextLayer, RichtextLayer, ImageLayer, VideoLayer, ButtonLayer,
    VideoProperties, VideoControl, ButtonIcon,
    LAYER_TYPES, layer_from_dict, new_layer_id,
)

__all__ = [
    'Scene',
    'create_sample_scene',
    'SceneQueryMixin',
    'SceneLayerMixin',
    'SceneGeometryMixin',
    'SceneSerializationMixin',
    'ValueUnit',
    'TimeValue',
    'AdSize',
    'format_number',
    'Animation',
    'CornerRadii',
    'SizeConfig',
    'GEOMETRY_FIELDS',
    'Layer',
    'LayerStyles',
    'TextLayer',
    'RichtextLayer',
    'ImageLayer',
    'VideoLayer',
    'ButtonLayer',
    'VideoProperties',
    'VideoControl',
    'ButtonIcon',
    'LAYER_TYPES',
    'layer_from_dict',
    'new_layer_id',
]
