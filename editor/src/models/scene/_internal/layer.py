"""
Ad Canvas Editor - Layer Data Model

One class per layer kind (text, richtext, image, video, button). All
kinds share identity, lock flags, export attributes, styles and the
per-size SizeConfig map; each kind adds only its own content fields.

This is part of the MODEL layer - pure data, no UI logic.

Usage:
    layer = TextLayer(label='Headline', content='Holiday Sale!')
    layer.size_config['300x250'] = SizeConfig.default()

    data = layer.to_dict()
    same = layer_from_dict(data)
"""

import copy
import uuid as uuid_module
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional

from constants import DEFAULT_ICON_SIZE
from .size_config import SizeConfig


@dataclass
class LayerStyles:
    """Style bag shared by every layer kind (not every kind uses every field)"""
    opacity: float = 1.0
    color: Optional[str] = None
    background_color: Optional[str] = None
    object_fit: Optional[str] = None
    text_align: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[str] = None

    _KEYS = (
        ('opacity', 'opacity'),
        ('color', 'color'),
        ('background_color', 'backgroundColor'),
        ('object_fit', 'objectFit'),
        ('text_align', 'textAlign'),
        ('font_family', 'fontFamily'),
        ('font_size', 'fontSize'),
    )

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for attr, key in self._KEYS:
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'LayerStyles':
        data = data or {}
        styles = cls()
        for attr, key in cls._KEYS:
            if key in data:
                setattr(styles, attr, data[key])
        opacity = data.get('opacity', 1.0)
        if isinstance(opacity, bool) or not isinstance(opacity, (int, float)):
            opacity = 1.0
        styles.opacity = max(0.0, min(1.0, float(opacity)))
        return styles


def new_layer_id() -> str:
    """Layer ids start with a letter so they double as HTML ids and CSS selectors"""
    return f"layer-{uuid_module.uuid4()}"


@dataclass
class Layer:
    """Base layer: identity, flags, export attributes, styles, per-size config

    size_config is keyed by ad size key ("300x250") and may be sparse; a
    layer with no entry for a size is not rendered at that size.
    """
    kind: ClassVar[str] = ''

    id: str = field(default_factory=new_layer_id)
    label: str = ''
    locked: bool = False
    aspect_ratio_locked: bool = False
    attributes: Dict[str, str] = field(default_factory=dict)
    styles: LayerStyles = field(default_factory=LayerStyles)
    size_config: Dict[str, SizeConfig] = field(default_factory=dict)

    @property
    def export_id(self) -> str:
        """HTML id used in exported markup (attributes.id, else the layer id)"""
        return self.attributes.get('id') or self.id

    def get_config(self, size_key: str) -> Optional[SizeConfig]:
        return self.size_config.get(size_key)

    def has_size(self, size_key: str) -> bool:
        return size_key in self.size_config

    def clone(self) -> 'Layer':
        return copy.deepcopy(self)

    # ========================================
    # Serialization
    # ========================================

    def _content_dict(self) -> Dict[str, Any]:
        return {}

    def _load_content(self, data: Dict[str, Any]):
        pass

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'type': self.kind,
            'label': self.label,
            'locked': self.locked,
            'aspectRatioLocked': self.aspect_ratio_locked,
            'attributes': dict(self.attributes),
            'styles': self.styles.to_dict(),
            'sizeConfig': {key: cfg.to_dict() for key, cfg in self.size_config.items()},
        }
        data.update(self._content_dict())
        return data

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> 'Layer':
        layer = cls(
            id=str(data.get('id') or new_layer_id()),
            label=str(data.get('label', '')),
            locked=bool(data.get('locked', False)),
            aspect_ratio_locked=bool(data.get('aspectRatioLocked', False)),
            attributes=dict(data.get('attributes') or {}),
            styles=LayerStyles.from_dict(data.get('styles')),
            size_config={
                key: SizeConfig.from_dict(cfg)
                for key, cfg in (data.get('sizeConfig') or {}).items()
                if cfg
            },
        )
        layer._load_content(data)
        return layer


@dataclass
class TextLayer(Layer):
    """Plain text, emitted verbatim with whitespace preserved"""
    kind: ClassVar[str] = 'text'
    content: str = ''

    def _content_dict(self):
        return {'content': self.content}

    def _load_content(self, data):
        self.content = str(data.get('content', ''))


@dataclass
class RichtextLayer(Layer):
    """Formatted text; content is an opaque markup blob never parsed here"""
    kind: ClassVar[str] = 'richtext'
    content: str = ''

    def _content_dict(self):
        return {'content': self.content}

    def _load_content(self, data):
        self.content = str(data.get('content', ''))


@dataclass
class ImageLayer(Layer):
    kind: ClassVar[str] = 'image'
    url: str = ''

    def _content_dict(self):
        return {'url': self.url}

    def _load_content(self, data):
        self.url = str(data.get('url', ''))


@dataclass
class VideoProperties:
    autoplay: bool = False
    controls: bool = True


@dataclass
class VideoLayer(Layer):
    kind: ClassVar[str] = 'video'
    url: str = ''
    properties: VideoProperties = field(default_factory=VideoProperties)

    def _content_dict(self):
        return {
            'url': self.url,
            'properties': {
                'autoplay': self.properties.autoplay,
                'controls': self.properties.controls,
            },
        }

    def _load_content(self, data):
        self.url = str(data.get('url', ''))
        props = data.get('properties') or {}
        self.properties = VideoProperties(
            autoplay=bool(props.get('autoplay', False)),
            controls=props.get('controls') is not False,
        )


@dataclass
class VideoControl:
    """Which video a button drives, and how"""
    target_element_id: str = ''
    action: str = 'play'


@dataclass
class ButtonIcon:
    type: str = 'none'
    position: str = 'before'
    size: int = DEFAULT_ICON_SIZE
    color: Optional[str] = None
    custom_image: Optional[str] = None
    custom_play_image: Optional[str] = None
    custom_pause_image: Optional[str] = None

    _KEYS = (
        ('type', 'type'),
        ('position', 'position'),
        ('size', 'size'),
        ('color', 'color'),
        ('custom_image', 'customImage'),
        ('custom_play_image', 'customPlayImage'),
        ('custom_pause_image', 'customPauseImage'),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in self._KEYS if getattr(self, attr) is not None}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ButtonIcon':
        icon = cls()
        for attr, key in cls._KEYS:
            if data and data.get(key) is not None:
                setattr(icon, attr, data[key])
        return icon


@dataclass
class ButtonLayer(Layer):
    """Call-to-action: a link anchor or a video-control button"""
    kind: ClassVar[str] = 'button'
    text: str = ''
    url: str = ''
    action_type: str = 'link'
    video_control: Optional[VideoControl] = None
    icon: ButtonIcon = field(default_factory=ButtonIcon)

    def _content_dict(self):
        data = {
            'text': self.text,
            'url': self.url,
            'actionType': self.action_type,
            'icon': self.icon.to_dict(),
        }
        if self.video_control is not None:
            data['videoControl'] = {
                'targetElementId': self.video_control.target_element_id,
                'action': self.video_control.action,
            }
        return data

    def _load_content(self, data):
        self.text = str(data.get('text', ''))
        self.url = str(data.get('url', ''))
        self.action_type = data.get('actionType') or 'link'
        control = data.get('videoControl')
        if control:
            self.video_control = VideoControl(
                target_element_id=str(control.get('targetElementId', '')),
                action=control.get('action') or 'play',
            )
        self.icon = ButtonIcon.from_dict(data.get('icon'))


LAYER_TYPES = {
    cls.kind: cls
    for cls in (TextLayer, RichtextLayer, ImageLayer, VideoLayer, ButtonLayer)
}


def layer_from_dict(data: Dict[str, Any]) -> Layer:
    """Build the right Layer subclass from its serialized form

    Raises:
        ValueError: If the layer type is missing or unknown
    """
    kind = data.get('type')
    layer_cls = LAYER_TYPES.get(kind)
    if layer_cls is None:
        raise ValueError(f"Unknown layer type '{kind}'")
    return layer_cls._from_dict(data)
