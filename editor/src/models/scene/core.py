"""
Ad Canvas Editor - Scene Data Model

THE MODEL of the editor. Owns the creative being edited.

This class handles:
- Supported ad sizes (ordered, addressed by "WxH" key)
- Layers collection (z-order = list order, topmost first)
- Per-size geometry/style/animation writes (geometry mixin)
- Layer management (add, remove, reorder, duplicate, export ids)
- Query API (rects in canvas pixels, bounding boxes)
- Snapshot API (for the undo/redo history collaborator)
- JSON serialization (CLI input format)

The Scene model is INDEPENDENT of UI:
- No rendering logic
- No selection state (that's TransformEngine)
- No undo stack (HistoryManager manages that with snapshots)

Usage:
    scene = Scene(name='Spring Promo', sizes=['300x250', '728x90'])

    layer_id = scene.add_layer(TextLayer(label='Headline', content='Sale!'))
    scene.set_layer_position(layer_id, '300x250', 20, 40)

    snapshot = scene.get_snapshot()
    scene.set_snapshot(snapshot)
"""

import logging
from typing import Callable, List, Optional, Union

from ._internal.values import AdSize, TimeValue
from ._internal.layer import Layer
from .query_mixin import SceneQueryMixin
from .layer_mixin import SceneLayerMixin
from .geometry_mixin import SceneGeometryMixin
from .serialization_mixin import SceneSerializationMixin
from constants import (
    DEFAULT_AD_SIZES,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_ANIMATION_LOOP,
    DEFAULT_LOOP_DELAY,
    DEFAULT_RESET_DURATION,
)


SizeLike = Union[str, AdSize]


class Scene(SceneGeometryMixin, SceneLayerMixin, SceneSerializationMixin, SceneQueryMixin):
    """Ad creative data model with full operation API

    Active Instance Pattern:
        Scene.set_active(scene) - Set the active scene
        Scene.get_active() - Get the active scene
        Scene.has_active() - Check if active instance exists

    Properties:
        name: Creative name (used for export file names)
        background_color: Canvas background color
        animation_loop: -1 infinite, 0 play once, N repeat N times
        animation_loop_delay: Scene-wide loop delay default
        animation_reset_duration: Scene-wide reset duration default
        layers: Layer list, topmost first (copy)
        sizes: Supported AdSize list (copy)
    """

    _active_instance = None

    @classmethod
    def set_active(cls, instance: 'Scene'):
        cls._active_instance = instance

    @classmethod
    def get_active(cls) -> 'Scene':
        """Get the active Scene instance

        Raises:
            RuntimeError: If no active instance set
        """
        if cls._active_instance is None:
            raise RuntimeError("No active Scene instance set. Call Scene.set_active() first.")
        return cls._active_instance

    @classmethod
    def has_active(cls) -> bool:
        return cls._active_instance is not None

    def __init__(self, name: str = 'Untitled', sizes: Optional[List[SizeLike]] = None):
        """Create an empty scene

        Args:
            name: Creative name
            sizes: Supported sizes ("WxH" keys or AdSize); defaults to DEFAULT_AD_SIZES

        Raises:
            ValueError: If a size key is malformed or repeated
        """
        self._logger = logging.getLogger('Scene')

        self.name = name
        self.background_color = DEFAULT_BACKGROUND_COLOR
        self.animation_loop = DEFAULT_ANIMATION_LOOP
        self.animation_loop_delay = TimeValue.from_tuple(DEFAULT_LOOP_DELAY)
        self.animation_reset_duration = TimeValue.from_tuple(DEFAULT_RESET_DURATION)

        self._layers: List[Layer] = []
        self._sizes: List[AdSize] = []
        self._listeners: List[Callable[[str], None]] = []

        for size in (DEFAULT_AD_SIZES if sizes is None else sizes):
            self._append_size(AdSize.parse(size))

        self._logger.debug(f"Created scene '{name}' with sizes {self.size_keys}")

    def clear(self):
        """Remove every layer (sizes and scene settings are kept)"""
        self._layers = []
        self._logger.debug("Cleared scene layers")
        self._notify("Clear layers")

    # ========================================
    # Properties
    # ========================================

    @property
    def layers(self) -> List[Layer]:
        """Layers topmost first. The list is a copy; the layers are live."""
        return list(self._layers)

    @property
    def sizes(self) -> List[AdSize]:
        return list(self._sizes)

    @property
    def size_keys(self) -> List[str]:
        return [size.key for size in self._sizes]

    # ========================================
    # Sizes
    # ========================================

    def _append_size(self, size: AdSize):
        if size in self._sizes:
            raise ValueError(f"Size '{size.key}' already exists")
        self._sizes.append(size)

    def _require_size(self, size: SizeLike) -> AdSize:
        """Parse a size and check the scene supports it

        Raises:
            ValueError: If the key is malformed or not a scene size
        """
        ad_size = AdSize.parse(size)
        if ad_size not in self._sizes:
            raise ValueError(f"Size '{ad_size.key}' is not supported by this scene")
        return ad_size

    def add_size(self, size: SizeLike, copy_from: Optional[SizeLike] = None) -> str:
        """Add a supported size

        Layers get no configuration for the new size (they stay hidden there)
        unless copy_from names an existing size to clone configurations from.

        Returns:
            Key of the added size

        Raises:
            ValueError: If the size is malformed or already present
        """
        ad_size = AdSize.parse(size)
        source = self._require_size(copy_from).key if copy_from is not None else None
        self._append_size(ad_size)

        if source is not None:
            for layer in self._layers:
                config = layer.size_config.get(source)
                if config is not None:
                    layer.size_config[ad_size.key] = self._copy_config(config)

        self._logger.debug(f"Added size {ad_size.key} (copied from {source})")
        self._notify(f"Add size {ad_size.key}")
        return ad_size.key

    def remove_size(self, size: SizeLike):
        """Remove a supported size and every layer configuration for it

        Raises:
            ValueError: If the size is not a scene size
        """
        ad_size = self._require_size(size)
        self._sizes.remove(ad_size)
        for layer in self._layers:
            layer.size_config.pop(ad_size.key, None)
        self._logger.debug(f"Removed size {ad_size.key}")
        self._notify(f"Remove size {ad_size.key}")

    # ========================================
    # Listeners
    # ========================================

    def add_listener(self, callback: Callable[[str], None]):
        """Register a callback run after every completed mutation

        Args:
            callback: Receives a short description of the change
        """
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def notify_changed(self, description: str):
        """Announce mutations written with notify=False (a finished gesture)"""
        self._notify(description)

    def _notify(self, description: str):
        for callback in list(self._listeners):
            try:
                callback(description)
            except Exception:
                self._logger.exception(f"Scene listener failed for '{description}'")

    # ========================================
    # Snapshot API (for undo/redo)
    # ========================================

    def get_snapshot(self) -> dict:
        """Get complete state snapshot (for undo)

        Returns:
            Serializable dictionary sharing nothing with the live scene
        """
        return self.to_dict()

    def set_snapshot(self, snapshot: dict):
        """Restore state from snapshot (for undo)

        Args:
            snapshot: Dictionary from get_snapshot()
        """
        self._load_dict(snapshot)
        self._logger.debug("Restored from snapshot")
        self._notify("Restore snapshot")
