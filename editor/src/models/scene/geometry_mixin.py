"""
Scene Geometry Mixin

Per-size field writes: geometry from the transform engine, everything
else from property/animation editors, plus the copy-to-other-sizes
operations.

Geometry written here is always stored in pixel units. No clamping
happens in the model; the transform engine enforces the minimum size.
"""

import copy
import math
from typing import Iterable, List

from ._internal.size_config import Animation, SizeConfig, GEOMETRY_FIELDS
from ._internal.values import AdSize, ValueUnit


class SceneGeometryMixin:
    """Mixin providing per-size write operations for Scene

    This mixin assumes the parent class has:
        - self._find_layer(layer_id)
        - self._require_size(size)
        - self._logger: logging.Logger instance
        - self._notify(description)
    """

    def _require_config(self, layer_id: str, size) -> SizeConfig:
        """Live SizeConfig for a layer at a scene size

        Raises:
            ValueError: If the layer, the size or the configuration is missing
        """
        layer = self._find_layer(layer_id)
        key = self._require_size(size).key
        config = layer.size_config.get(key)
        if config is None:
            raise ValueError(f"Layer '{layer_id}' has no configuration for size {key}")
        return config

    @staticmethod
    def _copy_config(config: SizeConfig) -> SizeConfig:
        clone = copy.deepcopy(config)
        clone.animations = [animation.copy_with_new_id() for animation in config.animations]
        return clone

    @staticmethod
    def _check_finite(**values):
        for name, value in values.items():
            if value is not None and not math.isfinite(value):
                raise ValueError(f"Geometry value {name} must be finite, got {value}")

    # ========================================
    # Geometry
    # ========================================

    def set_layer_geometry(self, layer_id: str, size, x: float, y: float,
                           width: float, height: float, notify: bool = True):
        """Replace a layer's rectangle at one size (stored as px)

        Args:
            notify: False during a gesture tick; the gesture announces
                completion itself

        Raises:
            ValueError: If the layer/size/configuration is missing or a
                value is not finite
        """
        self._check_finite(x=x, y=y, width=width, height=height)
        config = self._require_config(layer_id, size)
        config.position_x = ValueUnit.px(x)
        config.position_y = ValueUnit.px(y)
        config.width = ValueUnit.px(width)
        config.height = ValueUnit.px(height)
        self._logger.debug(f"Set geometry of {layer_id} at {size}: ({x}, {y}, {width}, {height})")
        if notify:
            self._notify("Set geometry")

    def set_layer_position(self, layer_id: str, size, x: float, y: float, notify: bool = True):
        """Replace a layer's position at one size (stored as px)

        Raises:
            ValueError: If the layer/size/configuration is missing or a
                value is not finite
        """
        self._check_finite(x=x, y=y)
        config = self._require_config(layer_id, size)
        config.position_x = ValueUnit.px(x)
        config.position_y = ValueUnit.px(y)
        self._logger.debug(f"Set position of {layer_id} at {size}: ({x}, {y})")
        if notify:
            self._notify("Move layer")

    # ========================================
    # Arbitrary per-size fields
    # ========================================

    def set_size_config_field(self, layer_id: str, size, field_name: str, value):
        """Replace one SizeConfig field (fontSize, borderRadius, ...)

        Raises:
            ValueError: If the layer/size/configuration is missing or the
                field does not exist
        """
        config = self._require_config(layer_id, size)
        if field_name.startswith('_') or not hasattr(config, field_name):
            raise ValueError(f"Unknown size config field '{field_name}'")
        setattr(config, field_name, value)
        self._logger.debug(f"Set {field_name} of {layer_id} at {size}: {value}")
        self._notify(f"Set {field_name}")

    def ensure_size_config(self, layer_id: str, size) -> SizeConfig:
        """Get the layer's configuration at a size, creating a default one"""
        layer = self._find_layer(layer_id)
        key = self._require_size(size).key
        config = layer.size_config.get(key)
        if config is None:
            config = SizeConfig.default()
            layer.size_config[key] = config
            self._logger.debug(f"Created configuration for {layer_id} at {key}")
            self._notify("Show layer at size")
        return config

    def remove_size_config(self, layer_id: str, size):
        """Hide a layer at one size by dropping its configuration there"""
        layer = self._find_layer(layer_id)
        key = AdSize.parse(size).key
        if layer.size_config.pop(key, None) is not None:
            self._logger.debug(f"Removed configuration for {layer_id} at {key}")
            self._notify("Hide layer at size")

    # ========================================
    # Animations
    # ========================================

    def set_animations(self, layer_id: str, size, animations: List[Animation]):
        """Replace the animation list of a layer at one size"""
        config = self._require_config(layer_id, size)
        config.animations = list(animations)
        self._logger.debug(f"Set {len(config.animations)} animation(s) on {layer_id} at {size}")
        self._notify("Set animations")

    def add_animation(self, layer_id: str, size, anim_type: str = 'fadeIn') -> Animation:
        """Append a new default animation ("Animation N") and return it"""
        config = self._require_config(layer_id, size)
        animation = Animation.create(len(config.animations) + 1, anim_type)
        config.animations.append(animation)
        self._logger.debug(f"Added animation {animation.id} to {layer_id} at {size}")
        self._notify("Add animation")
        return animation

    # ========================================
    # Copy to other sizes
    # ========================================

    def copy_geometry_to_sizes(self, layer_id: str, source, targets: Iterable) -> List[str]:
        """Copy position, size, font/icon size and border radius to other sizes

        Targets where the layer has no configuration are skipped, as are
        the source itself and repeated targets.

        Returns:
            Keys of the sizes that were updated

        Raises:
            ValueError: If the layer or the source configuration is missing,
                or a target is not a scene size
        """
        source_config = self._require_config(layer_id, source)
        source_key = AdSize.parse(source).key
        layer = self._find_layer(layer_id)

        updated = []
        for target in targets:
            key = self._require_size(target).key
            config = layer.size_config.get(key)
            if key == source_key or key in updated:
                continue
            if config is None:
                self._logger.debug(f"Skipping {key}: layer {layer_id} is not present there")
                continue
            for field_name in GEOMETRY_FIELDS:
                setattr(config, field_name, copy.deepcopy(getattr(source_config, field_name)))
            updated.append(key)

        self._logger.debug(f"Copied geometry of {layer_id} from {source_key} to {updated}")
        if updated:
            self._notify("Copy geometry to sizes")
        return updated

    def copy_animation_to_sizes(self, layer_id: str, source, animation_id: str,
                                targets: Iterable) -> List[str]:
        """Append a copy of one animation (with a fresh id) to other sizes

        Targets where the layer has no configuration are skipped.

        Returns:
            Keys of the sizes that received the copy

        Raises:
            ValueError: If the layer, source configuration or animation is
                missing, or a target is not a scene size
        """
        source_config = self._require_config(layer_id, source)
        animation = next((a for a in source_config.animations if a.id == animation_id), None)
        if animation is None:
            raise ValueError(f"Animation '{animation_id}' not found on layer '{layer_id}' at {source}")
        layer = self._find_layer(layer_id)

        updated = []
        for target in targets:
            key = self._require_size(target).key
            config = layer.size_config.get(key)
            if config is None or key in updated:
                continue
            config.animations.append(animation.copy_with_new_id())
            updated.append(key)

        self._logger.debug(f"Copied animation {animation_id} of {layer_id} to {updated}")
        if updated:
            self._notify("Copy animation to sizes")
        return updated
