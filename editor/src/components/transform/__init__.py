"""Canvas transform components (drag, resize, snapping)

Host-independent: the UI forwards pointer and key events, the engine
writes geometry to the Scene.
"""

from .drag_context import DragContext
from .handles import Handle, CornerHandle, EdgeHandle, create_handle
from .engine import TransformEngine

__all__ = [
    'DragContext',
    'Handle',
    'CornerHandle',
    'EdgeHandle',
    'create_handle',
    'TransformEngine',
]
