"""
Scene Serialization Mixin

Converts the whole scene to and from plain dictionaries and JSON. The
dictionary layout follows the editor's canvas document (camelCase keys,
`allowedSizes`, `styles.backgroundColor`), so documents saved by the
browser editor load unchanged.
"""

import json
from typing import Any, Dict

from ._internal.layer import layer_from_dict
from ._internal.values import AdSize, TimeValue
from constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_ANIMATION_LOOP,
    DEFAULT_LOOP_DELAY,
    DEFAULT_RESET_DURATION,
)


class SceneSerializationMixin:
    """Mixin providing dict/JSON serialization for Scene"""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'allowedSizes': self.size_keys,
            'styles': {'backgroundColor': self.background_color},
            'animationLoop': self.animation_loop,
            'animationLoopDelay': self.animation_loop_delay.to_dict(),
            'animationResetDuration': self.animation_reset_duration.to_dict(),
            'layers': [layer.to_dict() for layer in self._layers],
        }

    def _load_dict(self, data: Dict[str, Any]):
        """Replace all scene state from a dictionary

        Layers are loaded as stored, without export-id validation.

        Raises:
            ValueError: On malformed sizes, unknown layer types or
                repeated layer ids
        """
        sizes = []
        for key in data.get('allowedSizes') or []:
            size = AdSize.parse(key)
            if size in sizes:
                raise ValueError(f"Size '{size.key}' listed twice")
            sizes.append(size)

        layers = [layer_from_dict(item) for item in data.get('layers') or []]
        seen = set()
        for layer in layers:
            if layer.id in seen:
                raise ValueError(f"Layer with id '{layer.id}' listed twice")
            seen.add(layer.id)

        loop = data.get('animationLoop', DEFAULT_ANIMATION_LOOP)
        if isinstance(loop, bool) or not isinstance(loop, int) or loop < -1:
            self._logger.warning(f"Invalid animationLoop {loop!r}, using {DEFAULT_ANIMATION_LOOP}")
            loop = DEFAULT_ANIMATION_LOOP

        self.name = str(data.get('name') or 'Untitled')
        self.background_color = (data.get('styles') or {}).get('backgroundColor') or DEFAULT_BACKGROUND_COLOR
        self.animation_loop = loop
        self.animation_loop_delay = TimeValue.from_dict(
            data.get('animationLoopDelay'), TimeValue.from_tuple(DEFAULT_LOOP_DELAY))
        self.animation_reset_duration = TimeValue.from_dict(
            data.get('animationResetDuration'), TimeValue.from_tuple(DEFAULT_RESET_DURATION))
        self._sizes = sizes
        self._layers = layers

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build a scene from its dictionary form

        Raises:
            ValueError: If the document is malformed
        """
        scene = cls(sizes=[])
        scene._load_dict(data)
        scene._logger.debug(f"Loaded scene '{scene.name}' with {len(scene._layers)} layer(s)")
        return scene

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str):
        """Build a scene from a JSON document

        Raises:
            ValueError: If the text is not JSON or the document is malformed
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid scene JSON: {e}")
        if not isinstance(data, dict):
            raise ValueError("Invalid scene JSON: top level must be an object")
        return cls.from_dict(data)
