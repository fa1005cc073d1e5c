"""
Scene Layer Management Mixin

Layer CRUD, ordering and export-id operations for the Scene model.

Methods:
    - add_layer
    - remove_layer
    - remove_layers
    - reorder_layer
    - duplicate_layer
    - update_layer
    - set_export_id
"""

import re
from typing import Iterable, List

from ._internal.layer import Layer, new_layer_id
from ._internal.size_config import SizeConfig
from constants import DEFAULT_LAYER_FONT_SIZE, TEXT_LAYER_KINDS


# Export ids become HTML id attributes and CSS selectors
_INVALID_EXPORT_ID_RE = re.compile(r'^\d|\s')

# Fields update_layer must never replace
_PROTECTED_FIELDS = ('id', 'kind')


class SceneLayerMixin:
    """Mixin providing layer management operations for Scene

    This mixin assumes the parent class has:
        - self._layers: List[Layer]
        - self._sizes: List[AdSize]
        - self._logger: logging.Logger instance
        - self._notify(description)
    """

    # ========================================
    # Layer CRUD Operations
    # ========================================

    def add_layer(self, layer: Layer, index: int = 0) -> str:
        """Insert a layer

        A layer with an empty size_config gets a default SizeConfig for
        every supported size; text-bearing kinds also get the default
        font size.

        Args:
            layer: Layer to insert (owned by the scene afterwards)
            index: Position in the layer list; 0 puts it on top

        Returns:
            Id of the added layer

        Raises:
            ValueError: If the layer id or its export id is already used
        """
        if self.has_layer(layer.id):
            raise ValueError(f"Layer with id '{layer.id}' already exists")
        export_id = layer.attributes.get('id')
        if export_id and self.find_layer_by_export_id(export_id) is not None:
            raise ValueError(f"Export id '{export_id}' is already used by another layer")

        if not layer.size_config:
            font_size = DEFAULT_LAYER_FONT_SIZE if layer.kind in TEXT_LAYER_KINDS else None
            for size in self._sizes:
                layer.size_config[size.key] = SizeConfig.default(font_size)

        index = max(0, min(index, len(self._layers)))
        self._layers.insert(index, layer)

        self._logger.debug(f"Added {layer.kind} layer {layer.id} at index {index}")
        self._notify(f"Add {layer.kind} layer")
        return layer.id

    def remove_layer(self, layer_id: str):
        """Remove a layer by id

        Nothing referencing the layer is touched; a button that targets a
        removed video keeps its now dangling target id.

        Raises:
            ValueError: If id not found
        """
        layer = self._find_layer(layer_id)
        self._layers.remove(layer)
        self._logger.debug(f"Removed layer: {layer_id}")
        self._notify("Delete layer")

    def remove_layers(self, layer_ids: Iterable[str]) -> int:
        """Remove several layers at once

        Returns:
            Number of layers removed

        Raises:
            ValueError: If any id is not found (nothing is removed then)
        """
        layer_ids = list(layer_ids)
        for layer_id in layer_ids:
            self._find_layer(layer_id)

        doomed = set(layer_ids)
        before = len(self._layers)
        self._layers = [layer for layer in self._layers if layer.id not in doomed]
        removed = before - len(self._layers)

        self._logger.debug(f"Removed {removed} layer(s)")
        self._notify(f"Delete {removed} layers")
        return removed

    def reorder_layer(self, from_index: int, to_index: int):
        """Move the layer at from_index so it ends up at to_index

        Raises:
            ValueError: If either index is out of range
        """
        count = len(self._layers)
        if not (0 <= from_index < count) or not (0 <= to_index < count):
            raise ValueError(f"Layer index out of range: {from_index} -> {to_index} (count {count})")
        layer = self._layers.pop(from_index)
        self._layers.insert(to_index, layer)
        self._logger.debug(f"Moved layer {layer.id} from {from_index} to {to_index}")
        self._notify("Reorder layers")

    def duplicate_layer(self, layer_id: str) -> str:
        """Duplicate a layer directly above the original

        The copy gets a new id, fresh animation ids and no export id.

        Returns:
            Id of the new layer

        Raises:
            ValueError: If id not found
        """
        layer = self._find_layer(layer_id)
        clone = layer.clone()
        clone.id = new_layer_id()
        clone.attributes.pop('id', None)
        if clone.label:
            clone.label = f"{clone.label} copy"
        for config in clone.size_config.values():
            config.animations = [animation.copy_with_new_id() for animation in config.animations]

        index = self._layers.index(layer)
        self._layers.insert(index, clone)

        self._logger.debug(f"Duplicated layer {layer_id} -> {clone.id}")
        self._notify("Duplicate layer")
        return clone.id

    def update_layer(self, layer_id: str, **fields):
        """Replace arbitrary layer fields

        No value validation happens here; callers own clamping.

        Raises:
            ValueError: If id not found, or a field does not exist on the
                layer's kind or is protected (id, kind)
        """
        layer = self._find_layer(layer_id)
        for name in fields:
            if name in _PROTECTED_FIELDS or name.startswith('_') or not hasattr(layer, name):
                raise ValueError(f"Cannot update field '{name}' on {layer.kind} layer")
        for name, value in fields.items():
            setattr(layer, name, value)
        self._logger.debug(f"Updated layer {layer_id}: {sorted(fields)}")
        self._notify(f"Update {', '.join(sorted(fields))}")

    def set_export_id(self, layer_id: str, export_id: str):
        """Set the HTML id a layer is exported with

        The empty string clears it (the layer id is used instead).

        Raises:
            ValueError: If id not found, the value starts with a digit,
                contains whitespace, or is used by another layer
        """
        layer = self._find_layer(layer_id)
        if not export_id:
            layer.attributes.pop('id', None)
            self._logger.debug(f"Cleared export id of layer {layer_id}")
            self._notify("Clear export id")
            return

        if _INVALID_EXPORT_ID_RE.search(export_id):
            raise ValueError(f"Invalid export id '{export_id}' (must not start with a digit or contain whitespace)")
        other = self.find_layer_by_export_id(export_id)
        if other is not None and other is not layer:
            raise ValueError(f"Export id '{export_id}' is already used by another layer")

        layer.attributes['id'] = export_id
        self._logger.debug(f"Set export id of layer {layer_id}: {export_id}")
        self._notify("Set export id")

    def get_locked_layer_ids(self) -> List[str]:
        return [layer.id for layer in self._layers if layer.locked]
