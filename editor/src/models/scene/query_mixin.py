"""
Query Mixin for Scene Model

Read-only queries used by the transform engine, the compiler and the
host UI.

All query methods follow these conventions:
- Prefix with get_ for retrieving data
- Raise ValueError if a layer id is not found
- A layer without configuration for a size is not an error; geometry
  queries return None for it
"""

from typing import Iterable, List, Optional, Tuple

from models.transform import Rect
from ._internal.layer import Layer
from ._internal.size_config import SizeConfig
from ._internal.values import AdSize, TimeValue


class SceneQueryMixin:
    """Mixin providing query API for Scene

    This mixin assumes the class has:
    - self._layers: List[Layer], topmost first
    - self._sizes: List[AdSize]
    - self.animation_loop_delay / self.animation_reset_duration: TimeValue
    """

    # ========================================
    # Layer lookup
    # ========================================

    def _find_layer(self, layer_id: str) -> Layer:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        raise ValueError(f"Layer with id '{layer_id}' not found")

    def get_layer(self, layer_id: str) -> Layer:
        """Get a layer by id

        Raises:
            ValueError: If id not found
        """
        return self._find_layer(layer_id)

    def has_layer(self, layer_id: str) -> bool:
        return any(layer.id == layer_id for layer in self._layers)

    def get_layer_ids(self) -> List[str]:
        """Layer ids topmost first"""
        return [layer.id for layer in self._layers]

    def get_layer_index(self, layer_id: str) -> int:
        for index, layer in enumerate(self._layers):
            if layer.id == layer_id:
                return index
        raise ValueError(f"Layer with id '{layer_id}' not found")

    def get_layer_count(self) -> int:
        return len(self._layers)

    def get_export_id(self, layer) -> str:
        """HTML id for a layer (attributes.id, else its layer id)

        Args:
            layer: Layer object or layer id
        """
        if not isinstance(layer, Layer):
            layer = self._find_layer(layer)
        return layer.export_id

    def find_layer_by_export_id(self, export_id: str) -> Optional[Layer]:
        for layer in self._layers:
            if layer.export_id == export_id:
                return layer
        return None

    # ========================================
    # Sizes
    # ========================================

    def has_size(self, size) -> bool:
        try:
            return AdSize.parse(size) in self._sizes
        except ValueError:
            return False

    # ========================================
    # Per-size geometry
    # ========================================

    def get_size_config(self, layer_id: str, size) -> Optional[SizeConfig]:
        """Live SizeConfig of a layer for a size, or None when absent

        Raises:
            ValueError: If id not found or size key malformed
        """
        return self._find_layer(layer_id).size_config.get(AdSize.parse(size).key)

    def get_layer_rect(self, layer_id: str, size) -> Optional[Rect]:
        """Layer footprint in canvas pixels for a size

        Percentage units resolve against the size's own dimensions
        (x and width against its width, y and height against its height).

        Returns:
            Rect, or None when the layer has no configuration for the size

        Raises:
            ValueError: If id not found or size key malformed
        """
        ad_size = AdSize.parse(size)
        config = self._find_layer(layer_id).size_config.get(ad_size.key)
        if config is None:
            return None
        return Rect(
            config.position_x.to_px(ad_size.width),
            config.position_y.to_px(ad_size.height),
            config.width.to_px(ad_size.width),
            config.height.to_px(ad_size.height),
        )

    def get_layers_rect(self, layer_ids: Iterable[str], size) -> Optional[Rect]:
        """Bounding box of several layers for a size

        Layers without configuration for the size are skipped.

        Returns:
            Rect, or None when no listed layer is present at the size
        """
        rects = [self.get_layer_rect(layer_id, size) for layer_id in layer_ids]
        rects = [rect for rect in rects if rect is not None]
        if not rects:
            return None
        return Rect.union(rects)

    def get_layer_rects(self, size, exclude: Iterable[str] = ()) -> List[Tuple[str, Rect]]:
        """(layer id, Rect) for every layer present at size, in layer order"""
        excluded = set(exclude)
        result = []
        for layer in self._layers:
            if layer.id in excluded:
                continue
            rect = self.get_layer_rect(layer.id, size)
            if rect is not None:
                result.append((layer.id, rect))
        return result

    # ========================================
    # Animation timing inputs
    # ========================================

    def get_loop_timing(self, layer_id: str, size) -> Tuple[TimeValue, TimeValue]:
        """(loop delay, reset duration) for a layer at a size

        Values set on the layer's SizeConfig win over the scene defaults.
        """
        config = self.get_size_config(layer_id, size)
        loop_delay = self.animation_loop_delay
        reset_duration = self.animation_reset_duration
        if config is not None:
            if config.animation_loop_delay is not None:
                loop_delay = config.animation_loop_delay
            if config.animation_reset_duration is not None:
                reset_duration = config.animation_reset_duration
        return loop_delay, reset_duration

    def layer_has_animation_type(self, layer_id: str, anim_type: str) -> bool:
        """True if the layer uses anim_type at any size"""
        layer = self._find_layer(layer_id)
        return any(
            animation.type == anim_type
            for config in layer.size_config.values()
            for animation in config.animations
        )
