"""Editor components

- transform: gesture engine and resize handles for the canvas
"""

from .transform import TransformEngine

__all__ = [
    'TransformEngine',
]
