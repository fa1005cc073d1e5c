"""
Ad Canvas Editor - Transform Engine

Turns pointer gestures into geometry writes on the Scene for one active
ad size. The host UI forwards pointer-down/move/up and key state; the
engine owns the selection and at most one active gesture.

    Idle --begin_drag/begin_resize--> Dragging|Resizing --end/cancel--> Idle

Every move tick recomputes geometry from the positions recorded at begin
(never from the previous tick), snaps it, and writes pixel units back
with notify=False. end() announces the finished gesture once: scene
listeners are notified and the commit hook (history) receives a snapshot.
Geometry written during the gesture stays applied on cancel().

Misuse (space held, locked layer, resize on a multi-selection, no
configuration at the active size) is a logged no-op.

Usage:
    engine = TransformEngine(scene, '300x250', commit_hook=history.save_state)
    engine.begin_drag(layer_id, Vec2(120, 80))
    engine.move(Vec2(150, 95))
    engine.end()
"""

import logging
from typing import Callable, List, Optional

from constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_LAYER_SIZE, MIN_ZOOM, RESIZE_DIRECTIONS, SNAP_THRESHOLD
from models.scene import AdSize
from models.transform import Rect, Vec2
from services.snap_solver import SnapGuide, SnapSolver, build_candidates
from .drag_context import DragContext
from .handles import Handle, create_handle


class TransformEngine:
    """Drag/resize state machine over a Scene

    Args:
        scene: Scene to mutate
        size: Active ad size ("WxH" or AdSize); defaults to the scene's first size
        zoom: Screen pixels per canvas pixel
        snap_threshold: Snap distance in canvas units
        snapping_enabled: False disables all snapping
        min_size: Size floor for interactive resizes
        commit_hook: Called as commit_hook(snapshot, description) after a
            gesture that changed geometry (e.g. HistoryManager.save_state)
    """

    def __init__(self, scene, size=None, zoom: float = DEFAULT_ZOOM,
                 snap_threshold: float = SNAP_THRESHOLD, snapping_enabled: bool = True,
                 min_size: float = MIN_LAYER_SIZE,
                 commit_hook: Optional[Callable[[dict, str], None]] = None):
        self._logger = logging.getLogger('TransformEngine')
        self.scene = scene
        self._size = None
        self._zoom = DEFAULT_ZOOM
        self.zoom = zoom
        self.pan = Vec2(0.0, 0.0)
        self.solver = SnapSolver(snap_threshold)
        self.snapping_enabled = snapping_enabled
        self.min_size = min_size
        self.commit_hook = commit_hook

        self.space_pressed = False
        self._selection: List[str] = []
        self._context: Optional[DragContext] = None
        self._guides: List[SnapGuide] = []
        self._handles = {direction: create_handle(direction) for direction in RESIZE_DIRECTIONS}

        if size is not None:
            self.set_active_size(size)
        elif scene.sizes:
            self._size = scene.sizes[0]

    @classmethod
    def from_settings(cls, scene, settings, size=None, commit_hook=None) -> 'TransformEngine':
        """Engine configured from an EditorSettings record"""
        return cls(
            scene, size,
            zoom=settings.default_zoom,
            snap_threshold=settings.snap_threshold,
            snapping_enabled=settings.snapping_enabled,
            min_size=settings.min_layer_size,
            commit_hook=commit_hook,
        )

    # ========================================
    # View state
    # ========================================

    @property
    def active_size(self) -> Optional[AdSize]:
        return self._size

    def set_active_size(self, size):
        """Switch the size being edited; an active gesture is ended first

        Raises:
            ValueError: If the scene does not support the size
        """
        ad_size = AdSize.parse(size)
        if not self.scene.has_size(ad_size):
            raise ValueError(f"Size '{ad_size.key}' not found")
        if self._context is not None:
            self.end()
        self._size = ad_size
        self._logger.debug(f"Active size: {ad_size.key}")

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value: float):
        self._zoom = max(MIN_ZOOM, min(MAX_ZOOM, float(value)))

    def screen_to_canvas(self, point: Vec2) -> Vec2:
        """Screen pixels (host widget) to canvas pixels for the active size"""
        return (point - self.pan).scaled(1.0 / self._zoom)

    def set_space_pressed(self, pressed: bool):
        """Space held: the host pans the canvas and layers ignore the pointer"""
        self.space_pressed = bool(pressed)

    @property
    def guides(self) -> List[SnapGuide]:
        """Alignment lines of the latest move tick"""
        return list(self._guides)

    # ========================================
    # Selection
    # ========================================

    @property
    def selection(self) -> List[str]:
        return list(self._selection)

    def select(self, layer_ids):
        """Replace the selection (order kept, repeats dropped)

        Raises:
            ValueError: If a layer id is not in the scene
        """
        ids = []
        for layer_id in layer_ids:
            if not self.scene.has_layer(layer_id):
                raise ValueError(f"Layer with id '{layer_id}' not found")
            if layer_id not in ids:
                ids.append(layer_id)
        self._selection = ids
        self._logger.debug(f"Selection: {ids}")

    def clear_selection(self):
        self._selection = []

    def _prune_selection(self):
        """Drop ids deleted from the scene since they were selected"""
        self._selection = [i for i in self._selection if self.scene.has_layer(i)]

    # ========================================
    # Gesture state
    # ========================================

    @property
    def is_active(self) -> bool:
        return self._context is not None

    @property
    def is_dragging(self) -> bool:
        return self._context is not None and self._context.operation == 'drag'

    @property
    def is_resizing(self) -> bool:
        return self._context is not None and self._context.is_resize

    @property
    def context(self) -> Optional[DragContext]:
        return self._context

    def handle(self, direction: str) -> Handle:
        return self._handles[direction]

    def handle_at(self, point: Vec2) -> Optional[str]:
        """Resize direction under a screen point, for a single selection"""
        if len(self._selection) != 1 or self._size is None:
            return None
        rect = self.scene.get_layer_rect(self._selection[0], self._size)
        if rect is None:
            return None
        canvas_point = self.screen_to_canvas(point)
        for direction in RESIZE_DIRECTIONS:
            if self._handles[direction].hit_test(canvas_point, rect, self._zoom):
                return direction
        return None

    def _can_interact(self, layer_id: str, action: str) -> bool:
        if self.space_pressed:
            self._logger.debug(f"Ignored {action}: space held")
            return False
        if self._context is not None:
            self._logger.warning(f"Ignored {action}: a {self._context.operation} is in progress")
            return False
        if self._size is None:
            self._logger.warning(f"Ignored {action}: no active size")
            return False
        if not self.scene.has_layer(layer_id):
            self._logger.warning(f"Ignored {action}: layer '{layer_id}' not found")
            return False
        return True

    def _pointer_delta(self, pointer: Vec2) -> Vec2:
        return (pointer - self._context.pointer_start).scaled(1.0 / self._zoom)

    def _candidates(self, exclude):
        siblings = self.scene.get_layer_rects(self._size, exclude=exclude)
        return build_candidates(self._size.width, self._size.height, siblings)

    # ========================================
    # Drag
    # ========================================

    def begin_drag(self, layer_id: str, pointer: Vec2, shift: bool = False) -> bool:
        """Pointer-down on a layer body

        Selection rules: shift toggles the layer's membership (a layer
        toggled off starts no drag); a plain click on an unselected layer
        selects only it; a plain click on a selected layer keeps the
        whole selection.

        Returns:
            True if a drag started
        """
        if not self._can_interact(layer_id, 'drag'):
            return False
        self._prune_selection()

        if shift:
            if layer_id in self._selection:
                self._selection.remove(layer_id)
                self._logger.debug(f"Deselected {layer_id}")
                return False
            self._selection.append(layer_id)
        elif layer_id not in self._selection:
            self._selection = [layer_id]

        start_rects = {}
        for selected_id in self._selection:
            if self.scene.get_layer(selected_id).locked:
                continue
            rect = self.scene.get_layer_rect(selected_id, self._size)
            if rect is not None:
                start_rects[selected_id] = rect
        if not start_rects:
            self._logger.debug(f"Ignored drag: nothing movable at {self._size.key}")
            return False

        self._context = DragContext(
            operation='drag',
            size_key=self._size.key,
            pointer_start=Vec2(pointer.x, pointer.y),
            layer_ids=list(start_rects),
            start_rects=start_rects,
        )
        self._guides = []
        self._logger.debug(f"Begin drag of {list(start_rects)} at {self._size.key}")
        return True

    def _move_drag(self, delta: Vec2):
        ctx = self._context
        offset_x, offset_y = 0.0, 0.0
        self._guides = []
        if self.snapping_enabled:
            box = Rect.union(rect.translated(delta.x, delta.y) for rect in ctx.start_rects.values())
            # Every selected layer is excluded, locked ones included
            result = self.solver.solve(box, self._candidates(self._selection))
            offset_x, offset_y = result.offset_x, result.offset_y
            self._guides = result.guides

        dx, dy = delta.x + offset_x, delta.y + offset_y
        for layer_id, rect in ctx.start_rects.items():
            self.scene.set_layer_position(layer_id, self._size, rect.x + dx, rect.y + dy, notify=False)

    # ========================================
    # Resize
    # ========================================

    def begin_resize(self, layer_id: str, direction: str, pointer: Vec2) -> bool:
        """Pointer-down on a resize handle

        Returns:
            True if a resize started

        Raises:
            ValueError: If direction is not one of the eight handle directions
        """
        if direction not in self._handles:
            raise ValueError(f"Unknown resize direction '{direction}'")
        if not self._can_interact(layer_id, 'resize'):
            return False
        self._prune_selection()

        if len(self._selection) > 1:
            self._logger.debug("Ignored resize: more than one layer selected")
            return False
        layer = self.scene.get_layer(layer_id)
        if layer.locked:
            self._logger.debug(f"Ignored resize: layer {layer_id} is locked")
            return False
        rect = self.scene.get_layer_rect(layer_id, self._size)
        if rect is None:
            self._logger.debug(f"Ignored resize: {layer_id} has no configuration at {self._size.key}")
            return False

        self._selection = [layer_id]
        self._context = DragContext(
            operation='resize',
            size_key=self._size.key,
            pointer_start=Vec2(pointer.x, pointer.y),
            layer_ids=[layer_id],
            start_rects={layer_id: rect},
            direction=direction,
        )
        self._guides = []
        self._logger.debug(f"Begin resize of {layer_id} ({direction}) at {self._size.key}")
        return True

    def _move_resize(self, delta: Vec2, modifiers: set):
        ctx = self._context
        layer_id = ctx.layer_ids[0]
        aspect_locked = self.scene.get_layer(layer_id).aspect_ratio_locked
        handle = self._handles[ctx.direction]
        start = ctx.start_rect()

        rect = handle.drag(start, delta.x, delta.y, modifiers, aspect_locked, self.min_size)
        self._guides = []
        if self.snapping_enabled:
            rect, self._guides = handle.snap(
                rect, start, self.solver, self._candidates([layer_id]),
                modifiers, aspect_locked, self.min_size,
            )
        self.scene.set_layer_geometry(layer_id, self._size, rect.x, rect.y,
                                      rect.width, rect.height, notify=False)

    # ========================================
    # Shared
    # ========================================

    def move(self, pointer: Vec2, shift: bool = False, alt: bool = False) -> bool:
        """Pointer-move during a gesture

        Args:
            pointer: Screen position (same space as the begin pointer)
            shift: Held shift (transient aspect lock while resizing)
            alt: Held alt (resize from center)

        Returns:
            True if geometry was written
        """
        ctx = self._context
        if ctx is None:
            return False
        if any(not self.scene.has_layer(layer_id) for layer_id in ctx.layer_ids):
            self._logger.warning("Layer removed during gesture; cancelling")
            self.cancel()
            return False

        ctx.modifiers = {name for name, held in (('shift', shift), ('alt', alt)) if held}
        delta = self._pointer_delta(pointer)
        if ctx.is_resize:
            self._move_resize(delta, ctx.modifiers)
        else:
            self._move_drag(delta)
        ctx.changed = ctx.changed or self._geometry_changed()
        return True

    def _geometry_changed(self) -> bool:
        ctx = self._context
        for layer_id, start in ctx.start_rects.items():
            if self.scene.get_layer_rect(layer_id, ctx.size_key) != start:
                return True
        return False

    def end(self) -> bool:
        """Pointer-up: finish the gesture

        Returns:
            True if the gesture changed geometry (and was committed)
        """
        ctx = self._context
        if ctx is None:
            return False
        self._context = None
        self._guides = []

        changed = ctx.changed and all(self.scene.has_layer(i) for i in ctx.layer_ids)
        if changed:
            if ctx.is_resize:
                description = 'Resize layer'
            else:
                description = 'Move layers' if len(ctx.layer_ids) > 1 else 'Move layer'
            self.scene.notify_changed(description)
            if self.commit_hook is not None:
                self.commit_hook(self.scene.get_snapshot(), description)
        self._logger.debug(f"End {ctx.operation} (changed={changed})")
        return changed

    def cancel(self):
        """Escape: reset the gesture, keeping geometry already applied"""
        if self._context is None:
            return
        self._logger.debug(f"Cancel {self._context.operation}")
        self.end()
