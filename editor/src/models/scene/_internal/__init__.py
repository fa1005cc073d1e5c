"""Internal value types for the Scene model. Import from models.scene instead."""

from .values import ValueUnit, TimeValue, AdSize, format_number
from .size_config import Animation, CornerRadii, SizeConfig, GEOMETRY_FIELDS
from .layer import (
    Layer, LayerStyles,
    TextLayer, RichtextLayer, ImageLayer, VideoLayer, ButtonLayer,
    VideoProperties, VideoControl, ButtonIcon,
    LAYER_TYPES, layer_from_dict, new_layer_id,
)
