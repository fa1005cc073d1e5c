"""Per-size layer configuration: geometry, typography and animations"""

import copy
import uuid as uuid_module
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from constants import (
    DEFAULT_LAYER_X, DEFAULT_LAYER_Y,
    DEFAULT_LAYER_WIDTH, DEFAULT_LAYER_HEIGHT,
    DEFAULT_ANIMATION_DURATION, DEFAULT_ANIMATION_DELAY, DEFAULT_ANIMATION_EASING,
    ANIMATION_TYPES,
)
from .values import ValueUnit, TimeValue


AnimationValue = Union[ValueUnit, str, None]


def _parse_animation_value(data: Any) -> AnimationValue:
    """Animation endpoints are {value, unit} records or color strings.

    Bare numbers (an older editor representation) are accepted as
    unitless values. Anything else is kept as None so the compiler can
    substitute the type's default.
    """
    if isinstance(data, str):
        return data
    return ValueUnit.from_dict(data, default_unit='')


def _dump_animation_value(value: AnimationValue) -> Any:
    if isinstance(value, ValueUnit):
        return value.to_dict()
    return value


@dataclass
class Animation:
    """One animation step applied to a layer at one ad size

    from_value/to_value hold either a ValueUnit or a color string,
    depending on type/property.
    """
    id: str
    name: str
    type: str = 'fadeIn'
    from_value: AnimationValue = None
    to_value: AnimationValue = None
    property: Optional[str] = None
    duration: TimeValue = field(default_factory=lambda: TimeValue.from_tuple(DEFAULT_ANIMATION_DURATION))
    delay: TimeValue = field(default_factory=lambda: TimeValue.from_tuple(DEFAULT_ANIMATION_DELAY))
    easing: str = DEFAULT_ANIMATION_EASING

    @classmethod
    def create(cls, number: int = 1, anim_type: str = 'fadeIn') -> 'Animation':
        """New animation with the editor's defaults ("Animation N", fade 0 -> 1)"""
        return cls(
            id=f"sa-{uuid_module.uuid4()}",
            name=f"Animation {number}",
            type=anim_type,
            from_value=ValueUnit(0, ''),
            to_value=ValueUnit(1, ''),
        )

    def copy_with_new_id(self) -> 'Animation':
        clone = copy.deepcopy(self)
        clone.id = f"sa-{uuid_module.uuid4()}"
        return clone

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'from': _dump_animation_value(self.from_value),
            'to': _dump_animation_value(self.to_value),
            'duration': self.duration.to_dict(),
            'delay': self.delay.to_dict(),
            'easing': self.easing,
        }
        if self.property is not None:
            data['property'] = self.property
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Animation':
        anim_type = data.get('type', 'fadeIn')
        if anim_type not in ANIMATION_TYPES:
            anim_type = 'custom'
        return cls(
            id=str(data.get('id') or f"sa-{uuid_module.uuid4()}"),
            name=str(data.get('name', '')),
            type=anim_type,
            from_value=_parse_animation_value(data.get('from')),
            to_value=_parse_animation_value(data.get('to')),
            property=data.get('property'),
            duration=TimeValue.from_dict(data.get('duration'), TimeValue.from_tuple(DEFAULT_ANIMATION_DURATION)),
            delay=TimeValue.from_dict(data.get('delay'), TimeValue.from_tuple(DEFAULT_ANIMATION_DELAY)),
            easing=str(data.get('easing') or DEFAULT_ANIMATION_EASING),
        )


@dataclass
class CornerRadii:
    """Four-corner border radius in pixels"""
    top_left: float = 0
    top_right: float = 0
    bottom_right: float = 0
    bottom_left: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            'topLeft': self.top_left,
            'topRight': self.top_right,
            'bottomRight': self.bottom_right,
            'bottomLeft': self.bottom_left,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CornerRadii':
        return cls(
            data.get('topLeft', 0),
            data.get('topRight', 0),
            data.get('bottomRight', 0),
            data.get('bottomLeft', 0),
        )


BorderRadius = Union[float, CornerRadii, None]

# Fields copied by "copy to other sizes" on the property tab
GEOMETRY_FIELDS = ('position_x', 'position_y', 'width', 'height', 'font_size', 'icon_size', 'border_radius')


@dataclass
class SizeConfig:
    """Geometry, style and animation values of one layer for one ad size"""
    position_x: ValueUnit
    position_y: ValueUnit
    width: ValueUnit
    height: ValueUnit
    font_size: Optional[Union[str, float]] = None
    icon_size: Optional[float] = None
    border_radius: BorderRadius = None
    animations: List[Animation] = field(default_factory=list)
    animation_loop_delay: Optional[TimeValue] = None
    animation_reset_duration: Optional[TimeValue] = None

    @classmethod
    def default(cls, font_size: Optional[str] = None) -> 'SizeConfig':
        return cls(
            position_x=ValueUnit.px(DEFAULT_LAYER_X),
            position_y=ValueUnit.px(DEFAULT_LAYER_Y),
            width=ValueUnit.px(DEFAULT_LAYER_WIDTH),
            height=ValueUnit.px(DEFAULT_LAYER_HEIGHT),
            font_size=font_size,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'positionX': self.position_x.to_dict(),
            'positionY': self.position_y.to_dict(),
            'width': self.width.to_dict(),
            'height': self.height.to_dict(),
        }
        if self.font_size is not None:
            data['fontSize'] = self.font_size
        if self.icon_size is not None:
            data['iconSize'] = self.icon_size
        if isinstance(self.border_radius, CornerRadii):
            data['borderRadius'] = self.border_radius.to_dict()
        elif self.border_radius is not None:
            data['borderRadius'] = self.border_radius
        if self.animations:
            data['animations'] = [a.to_dict() for a in self.animations]
        if self.animation_loop_delay is not None:
            data['animationLoopDelay'] = self.animation_loop_delay.to_dict()
        if self.animation_reset_duration is not None:
            data['animationResetDuration'] = self.animation_reset_duration.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SizeConfig':
        def length(key, default):
            return ValueUnit.from_dict(data.get(key)) or ValueUnit.px(default)

        radius = data.get('borderRadius')
        if isinstance(radius, dict):
            radius = CornerRadii.from_dict(radius)

        return cls(
            position_x=length('positionX', DEFAULT_LAYER_X),
            position_y=length('positionY', DEFAULT_LAYER_Y),
            width=length('width', DEFAULT_LAYER_WIDTH),
            height=length('height', DEFAULT_LAYER_HEIGHT),
            font_size=data.get('fontSize'),
            icon_size=data.get('iconSize'),
            border_radius=radius,
            animations=[Animation.from_dict(a) for a in data.get('animations') or []],
            animation_loop_delay=TimeValue.from_dict(data.get('animationLoopDelay')),
            animation_reset_duration=TimeValue.from_dict(data.get('animationResetDuration')),
        )
