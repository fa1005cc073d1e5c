"""
CSS values for animation endpoints.

Each animation animates exactly one CSS property. Preset types map to a
fixed property and default endpoints; custom animations name a property
of their own. Missing or malformed endpoints fall back to the default
for that property so compilation never fails on bad animation data.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional

from constants import DEFAULT_BUTTON_BACKGROUND, DEFAULT_BUTTON_COLOR, DEFAULT_TEXT_COLOR
from models.scene import ValueUnit, format_number

logger = logging.getLogger(__name__)

_LENGTH_RE = re.compile(r'^-?\d+(\.\d+)?(px|%)?$')
_NUMBER_RE = re.compile(r'^-?\d+(\.\d+)?$')

# type -> (transform function, default from, default to)
_PRESET_TRANSFORMS = {
    'slideLeft': ('translateX', '100%', '0%'),
    'slideRight': ('translateX', '-100%', '0%'),
    'slideUp': ('translateY', '100%', '0%'),
    'slideDown': ('translateY', '-100%', '0%'),
}

_CUSTOM_TRANSFORMS = {
    'x': 'translateX',
    'y': 'translateY',
    'scale': 'scale',
}

_COLOR_PROPERTIES = {
    'color': 'color',
    'backgroundColor': 'background-color',
}


@dataclass
class AnimatedProperty:
    """One CSS declaration at both ends of an animation

    For transforms, css_property is 'transform' and the values are whole
    transform functions such as 'translateX(100%)'.
    """
    css_property: str
    from_value: str
    to_value: str

    @property
    def is_transform(self) -> bool:
        return self.css_property == 'transform'

    def declaration(self, which: str) -> str:
        value = self.from_value if which == 'from' else self.to_value
        return f"{self.css_property}: {value}"


def _number(value, default: str, context: str) -> str:
    """Unitless endpoint (opacity, scale)"""
    if value is None:
        return default
    if isinstance(value, ValueUnit) and value.is_finite():
        return value.css()
    if isinstance(value, str) and _NUMBER_RE.match(value.strip()):
        return value.strip()
    logger.warning(f"Malformed {context} value {value!r}, using {default}")
    return default


def _length(value, default: str, context: str) -> str:
    """Length endpoint (translate, width, height); unitless numbers are px"""
    if value is None:
        return default
    if isinstance(value, ValueUnit) and value.is_finite():
        return f"{format_number(value.value)}{value.unit or 'px'}"
    if isinstance(value, str) and _LENGTH_RE.match(value.strip()):
        text = value.strip()
        return text if text.endswith(('px', '%')) else f"{text}px"
    logger.warning(f"Malformed {context} value {value!r}, using {default}")
    return default


def _color(value, default: str, context: str) -> str:
    if value is None:
        return default
    if isinstance(value, str) and value.strip() and not any(c in value for c in ';{}<>"'):
        return value.strip()
    logger.warning(f"Malformed {context} value {value!r}, using {default}")
    return default


def _opacity_default(layer) -> str:
    opacity = layer.styles.opacity
    if not isinstance(opacity, (int, float)) or not math.isfinite(opacity):
        return '1'
    return format_number(opacity)


def resting_value(layer, css_property: str) -> Optional[str]:
    """Value an animated property takes where no animation drives it

    Returns None for properties the size rules always declare themselves
    (width, height).
    """
    styles = layer.styles
    if css_property == 'opacity':
        return _opacity_default(layer)
    if css_property == 'transform':
        return 'none'
    if css_property == 'color':
        default = DEFAULT_BUTTON_COLOR if layer.kind == 'button' else DEFAULT_TEXT_COLOR
        return styles.color or default
    if css_property == 'background-color':
        default = DEFAULT_BUTTON_BACKGROUND if layer.kind == 'button' else 'transparent'
        return styles.background_color or default
    return None


def animated_property(animation, layer, config=None) -> Optional[AnimatedProperty]:
    """Resolve an animation to the CSS property it drives

    Args:
        animation: Animation record
        layer: Owning layer (its opacity/colors are fade and color defaults)
        config: SizeConfig at the compiled size (width/height defaults)

    Returns:
        AnimatedProperty, or None for an unknown custom property
    """
    anim_type = animation.type
    context = f"{anim_type} animation {animation.id}"

    if anim_type == 'fadeIn':
        return AnimatedProperty(
            'opacity',
            _number(animation.from_value, '0', context),
            _number(animation.to_value, _opacity_default(layer), context),
        )

    if anim_type in _PRESET_TRANSFORMS:
        func, default_from, default_to = _PRESET_TRANSFORMS[anim_type]
        return AnimatedProperty(
            'transform',
            f"{func}({_length(animation.from_value, default_from, context)})",
            f"{func}({_length(animation.to_value, default_to, context)})",
        )

    if anim_type == 'scale':
        return AnimatedProperty(
            'transform',
            f"scale({_number(animation.from_value, '0', context)})",
            f"scale({_number(animation.to_value, '1', context)})",
        )

    prop = animation.property or 'opacity'
    if prop == 'opacity':
        return AnimatedProperty(
            'opacity',
            _number(animation.from_value, '0', context),
            _number(animation.to_value, '1', context),
        )
    if prop == 'scale':
        return AnimatedProperty(
            'transform',
            f"scale({_number(animation.from_value, '0', context)})",
            f"scale({_number(animation.to_value, '1', context)})",
        )
    if prop in _CUSTOM_TRANSFORMS:
        func = _CUSTOM_TRANSFORMS[prop]
        return AnimatedProperty(
            'transform',
            f"{func}({_length(animation.from_value, '0px', context)})",
            f"{func}({_length(animation.to_value, '0px', context)})",
        )
    if prop in ('width', 'height'):
        size_value = getattr(config, prop, None) if config is not None else None
        default_to = size_value.css() if isinstance(size_value, ValueUnit) else '100%'
        return AnimatedProperty(
            prop,
            _length(animation.from_value, '0px', context),
            _length(animation.to_value, default_to, context),
        )
    if prop in _COLOR_PROPERTIES:
        if prop == 'color':
            default_to = layer.styles.color or DEFAULT_TEXT_COLOR
        else:
            default_to = layer.styles.background_color or 'transparent'
        return AnimatedProperty(
            _COLOR_PROPERTIES[prop],
            _color(animation.from_value, 'transparent', context),
            _color(animation.to_value, default_to, context),
        )

    logger.warning(f"Unknown animation property '{prop}' on {context}, skipping")
    return None
