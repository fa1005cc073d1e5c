"""Drag context dataclass for the transform engine.

One object per active gesture instead of a pile of boolean flags.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.transform import Rect, Vec2


@dataclass
class DragContext:
    """State of one drag or resize gesture, from pointer-down to pointer-up.

    Start rectangles are recorded in canvas pixels when the gesture begins;
    every move tick recomputes geometry from them, never from the previous
    tick.
    """
    operation: str  # 'drag' or 'resize'
    size_key: str
    pointer_start: Vec2
    layer_ids: List[str] = field(default_factory=list)
    start_rects: Dict[str, Rect] = field(default_factory=dict)
    direction: Optional[str] = None  # resize only
    modifiers: set = field(default_factory=set)  # {'shift', 'alt'} of the latest tick
    changed: bool = False

    @property
    def is_resize(self) -> bool:
        return self.operation == 'resize'

    def start_rect(self) -> Rect:
        """Start rectangle of the single resized layer"""
        return self.start_rects[self.layer_ids[0]]
