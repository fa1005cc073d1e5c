"""Unit-carrying scalar values and ad sizes used throughout the scene model"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from constants import HTML5_AD_SIZES


_SIZE_KEY_RE = re.compile(r'^(\d+)x(\d+)$')

LENGTH_UNITS = ('px', '%')
TIME_UNITS = ('ms', 's')


def format_number(value: float) -> str:
    """Format a number the way it should appear in CSS/markup

    Integral floats drop the fractional part (10.0 -> "10"); everything
    else uses the shortest round-tripping representation (0.46 -> "0.46").
    """
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        return str(value)
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass
class ValueUnit:
    """A number paired with a unit, e.g. {value: 10, unit: 'px'}

    Geometry uses 'px' or '%'. Animation endpoints may also carry an
    empty unit for unitless values (opacity, scale).
    """
    value: float
    unit: str = 'px'

    def to_px(self, extent: float) -> float:
        """Resolve to canvas pixels; '%' is relative to extent"""
        if self.unit == '%':
            return self.value * extent / 100.0
        return float(self.value)

    def css(self) -> str:
        return f"{format_number(self.value)}{self.unit}"

    def is_finite(self) -> bool:
        return isinstance(self.value, (int, float)) and math.isfinite(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'unit': self.unit}

    @classmethod
    def px(cls, value: float) -> 'ValueUnit':
        return cls(float(value), 'px')

    @classmethod
    def from_dict(cls, data: Any, default_unit: str = 'px') -> Optional['ValueUnit']:
        """Build from a {value, unit} mapping or a bare number

        Returns:
            ValueUnit, or None when data has no usable numeric value
        """
        if isinstance(data, ValueUnit):
            return ValueUnit(data.value, data.unit)
        if isinstance(data, bool):
            return None
        if isinstance(data, (int, float)):
            return cls(data, default_unit)
        if not isinstance(data, dict):
            return None
        value = data.get('value')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        unit = data.get('unit')
        if unit is None:
            unit = default_unit
        return cls(value, str(unit))


@dataclass
class TimeValue:
    """A duration such as {value: 0.3, unit: 's'}"""
    value: float
    unit: str = 'ms'

    def to_ms(self) -> float:
        if self.unit == 's':
            return self.value * 1000.0
        return float(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'unit': self.unit}

    @classmethod
    def from_tuple(cls, pair) -> 'TimeValue':
        value, unit = pair
        return cls(value, unit)

    @classmethod
    def from_dict(cls, data: Any, default: Optional['TimeValue'] = None) -> Optional['TimeValue']:
        if isinstance(data, TimeValue):
            return TimeValue(data.value, data.unit)
        if not isinstance(data, dict):
            return default
        value = data.get('value')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return default
        unit = data.get('unit', 'ms')
        if unit not in TIME_UNITS:
            return default
        return cls(value, unit)


@dataclass(frozen=True)
class AdSize:
    """One fixed width x height the creative must support"""
    width: int
    height: int

    @property
    def key(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def name(self) -> str:
        entry = HTML5_AD_SIZES.get(self.key)
        return entry['name'] if entry else self.key

    def __str__(self) -> str:
        return self.key

    @classmethod
    def parse(cls, size) -> 'AdSize':
        """Accept an AdSize or a "WxH" key

        Raises:
            ValueError: If the key is malformed or has a zero dimension
        """
        if isinstance(size, AdSize):
            return size
        match = _SIZE_KEY_RE.match(str(size).strip())
        if not match:
            raise ValueError(f"Invalid ad size '{size}' (expected 'WIDTHxHEIGHT')")
        width, height = int(match.group(1)), int(match.group(2))
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid ad size '{size}' (dimensions must be positive)")
        return cls(width, height)
