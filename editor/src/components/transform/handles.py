"""Resize handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- Where it sits on a layer rectangle (normalized coordinates)
- How to test if a pointer position hits it
- How a pointer delta resizes the rectangle it belongs to
- How to re-derive that resize when one of its edges snaps

Four resize modes come from two flags:

    free            opposite edge(s) fixed
    center (alt)    both edges move symmetrically, center fixed
    aspect          ratio kept; corner keeps the opposite corner fixed,
                    edge keeps the center of the opposite edge fixed
    aspect + center ratio kept, scaled about the center

Aspect mode is on when the layer is aspect-locked or shift is held.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from constants import HANDLE_SIZE, HANDLE_HIT_TOLERANCE, MIN_LAYER_SIZE
from models.transform import Rect, Vec2
from services.snap_solver import EDGE_AXIS, GUIDE_ORIENTATION, SnapCandidate, SnapGuide, SnapSolver

logger = logging.getLogger(__name__)


class Handle(ABC):
    """Abstract base class for resize handles.

    Args:
        direction: Compass direction ('nw', 'n', 'e', ...)
        handle_size: Visual radius in screen pixels
        hit_tolerance: Extra screen pixels for hit detection
    """

    NORMALS = {}

    def __init__(self, direction: str, handle_size: float = HANDLE_SIZE,
                 hit_tolerance: float = HANDLE_HIT_TOLERANCE):
        if direction not in self.NORMALS:
            raise ValueError(f"Unknown {type(self).__name__} direction '{direction}'")
        self.direction = direction
        self.handle_size = handle_size
        self.hit_tolerance = hit_tolerance

        # -1 moves the low edge, 1 the high edge, 0 leaves the axis alone
        self.norm_x, self.norm_y = self.NORMALS[direction]

    # ========================================
    # Placement and hit testing
    # ========================================

    @property
    def moved_edges(self) -> List[str]:
        """Edges this handle moves, horizontal axis first"""
        edges = []
        if self.norm_x:
            edges.append('right' if self.norm_x > 0 else 'left')
        if self.norm_y:
            edges.append('bottom' if self.norm_y > 0 else 'top')
        return edges

    def position(self, rect: Rect) -> Vec2:
        """Handle position in canvas pixels"""
        return Vec2(rect.center_x + self.norm_x * rect.width / 2.0,
                    rect.center_y + self.norm_y * rect.height / 2.0)

    def hit_test(self, point: Vec2, rect: Rect, zoom: float = 1.0) -> bool:
        """Test if a canvas-space point hits this handle.

        The hit radius is defined in screen pixels, so it shrinks in
        canvas units as zoom grows.
        """
        pos = self.position(rect)
        distance = math.hypot(point.x - pos.x, point.y - pos.y)
        return distance <= (self.handle_size + self.hit_tolerance) / zoom

    @abstractmethod
    def get_cursor(self) -> str:
        """CSS cursor name shown while hovering this handle"""

    # ========================================
    # Resize
    # ========================================

    @abstractmethod
    def _aspect_scale(self, start: Rect, raw_w: float, raw_h: float,
                      dx: float, dy: float) -> float:
        """Uniform scale factor for aspect mode"""

    @staticmethod
    def _modes(modifiers, aspect_locked: bool, start: Rect) -> Tuple[bool, bool]:
        """(center, aspect) for one tick; aspect needs a non-degenerate start"""
        center = 'alt' in modifiers
        aspect = (aspect_locked or 'shift' in modifiers) and start.width > 0 and start.height > 0
        return center, aspect

    def _place(self, start: Rect, width: float, height: float, center: bool) -> Rect:
        """Position a width x height rectangle around this handle's anchor"""
        x = self._place_axis(start.x, start.width, width, self.norm_x, center)
        y = self._place_axis(start.y, start.height, height, self.norm_y, center)
        return Rect(x, y, width, height)

    @staticmethod
    def _place_axis(start_pos: float, start_extent: float, extent: float,
                    norm: int, center: bool) -> float:
        if extent == start_extent:
            return start_pos
        if center or norm == 0:
            return start_pos + (start_extent - extent) / 2.0
        if norm > 0:
            return start_pos
        return start_pos + start_extent - extent

    def drag(self, start: Rect, dx: float, dy: float, modifiers=frozenset(),
             aspect_locked: bool = False, min_size: float = MIN_LAYER_SIZE) -> Rect:
        """Resize a rectangle by a canvas-space pointer delta.

        Args:
            start: Layer rectangle when the gesture began
            dx, dy: Pointer delta since the gesture began (canvas units)
            modifiers: Held keys, subset of {'shift', 'alt'}
            aspect_locked: The layer's persistent aspect lock
            min_size: Floor for both dimensions

        Returns:
            Rect: New rectangle; never smaller than min_size on a moved axis
        """
        center, aspect = self._modes(modifiers, aspect_locked, start)
        factor = 2.0 if center else 1.0
        raw_w = start.width + dx * self.norm_x * factor
        raw_h = start.height + dy * self.norm_y * factor

        if aspect:
            scale = self._aspect_scale(start, raw_w, raw_h, dx, dy)
            width, height = start.width * scale, start.height * scale
            if width < min_size or height < min_size:
                # Smaller side lands exactly on the floor, ratio kept
                if start.width <= start.height:
                    width, height = min_size, min_size * start.height / start.width
                else:
                    width, height = min_size * start.width / start.height, min_size
        else:
            width = max(min_size, raw_w) if self.norm_x else start.width
            height = max(min_size, raw_h) if self.norm_y else start.height

        return self._place(start, width, height, center)

    # ========================================
    # Snapping
    # ========================================

    @staticmethod
    def _extent_from_edge(edge: str, target: float, start: Rect, center: bool) -> float:
        """Extent along the edge's axis that puts the edge on target"""
        if center:
            mid = start.center_x if EDGE_AXIS[edge] == 'x' else start.center_y
            return 2.0 * (target - mid) if edge in ('right', 'bottom') else 2.0 * (mid - target)
        if edge == 'right':
            return target - start.left
        if edge == 'left':
            return start.right - target
        if edge == 'bottom':
            return target - start.top
        return start.bottom - target

    def snap(self, rect: Rect, start: Rect, solver: SnapSolver,
             candidates: Sequence[SnapCandidate], modifiers=frozenset(),
             aspect_locked: bool = False,
             min_size: float = MIN_LAYER_SIZE) -> Tuple[Rect, List[SnapGuide]]:
        """Snap the edges this handle moves, keeping the resize mode's contract.

        A snapped edge fixes the extent on its axis; the rectangle is then
        placed again with the same anchor as drag(). In aspect mode the
        other axis follows the ratio and the first snapped edge wins.
        Snaps that would push a dimension under min_size are ignored.
        Center alignments with the canvas or siblings add guides only.

        Returns:
            (rect, guides)
        """
        center, aspect = self._modes(modifiers, aspect_locked, start)
        guides = []
        for edge in self.moved_edges:
            axis = EDGE_AXIS[edge]
            target = solver.snap_edge(edge, getattr(rect, edge), candidates)
            if target is None:
                continue

            extent = self._extent_from_edge(edge, target, start, center)
            if axis == 'x':
                width = extent
                height = extent * start.height / start.width if aspect else rect.height
            else:
                height = extent
                width = extent * start.width / start.height if aspect else rect.width
            if width < min_size or height < min_size:
                logger.debug(f"Ignored {edge} snap to {target:.3f}: "
                             f"{width:.3f}x{height:.3f} under the size floor")
                continue

            rect = self._place(start, width, height, center)
            guides.append(SnapGuide(GUIDE_ORIENTATION[axis], target))
            if aspect:
                break
        guides.extend(solver.center_guides(rect, candidates))
        return rect, guides


class CornerHandle(Handle):
    """Corner handle: moves one horizontal and one vertical edge."""

    NORMALS = {
        'nw': (-1, -1),
        'ne': (1, -1),
        'sw': (-1, 1),
        'se': (1, 1),
    }

    def _aspect_scale(self, start, raw_w, raw_h, dx, dy):
        # The axis the pointer moved further along drives the scale
        if abs(dx) >= abs(dy):
            return raw_w / start.width
        return raw_h / start.height

    def get_cursor(self) -> str:
        return 'nwse-resize' if self.direction in ('nw', 'se') else 'nesw-resize'


class EdgeHandle(Handle):
    """Edge handle: moves a single edge."""

    NORMALS = {
        'n': (0, -1),
        'e': (1, 0),
        's': (0, 1),
        'w': (-1, 0),
    }

    def _aspect_scale(self, start, raw_w, raw_h, dx, dy):
        if self.norm_x:
            return raw_w / start.width
        return raw_h / start.height

    def get_cursor(self) -> str:
        return 'ew-resize' if self.norm_x else 'ns-resize'


def create_handle(direction: str, **kwargs) -> Handle:
    """Handle object for a compass direction

    Raises:
        ValueError: If direction is not one of the eight resize directions
    """
    if direction in CornerHandle.NORMALS:
        return CornerHandle(direction, **kwargs)
    if direction in EdgeHandle.NORMALS:
        return EdgeHandle(direction, **kwargs)
    raise ValueError(f"Unknown resize direction '{direction}'")
