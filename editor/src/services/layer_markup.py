"""
Layer markup for exported documents.

One element per layer, emitted once and shared by every ad size: the
stylesheet alone decides where (and whether) a layer appears at each
size. Inline styles carry only what never changes between sizes.

Text and rich text content is written verbatim; attribute values are
HTML-escaped.
"""

import html
import json
import logging

from constants import (
    DEFAULT_TEXT_COLOR, DEFAULT_FONT_FAMILY, DEFAULT_OBJECT_FIT,
    DEFAULT_BUTTON_BACKGROUND, DEFAULT_BUTTON_COLOR,
    DEFAULT_ICON_SIZE, BUTTON_ICON_GAP,
)
from models.scene import format_number

logger = logging.getLogger(__name__)


def attr(value) -> str:
    return html.escape(str(value), quote=True)


# ======================================================================
# Button icons
# ======================================================================

_PLAY_SHAPE = '<polygon points="5 3 19 12 5 21 5 3"></polygon>'
_PAUSE_SHAPE = '<rect x="6" y="4" width="4" height="16"></rect><rect x="14" y="4" width="4" height="16"></rect>'
_REPLAY_SHAPE = '<path d="M3 12a9 9 0 1 0 9-9 9.75 9.75 0 0 0-6.74 2.74L3 8"></path><path d="M3 3v5h5"></path>'


def _svg(shape: str, color: str, filled: bool, size: int = DEFAULT_ICON_SIZE) -> str:
    color = attr(color)
    if filled:
        paint = f'fill="{color}" stroke="none"'
    else:
        paint = f'fill="none" stroke="{color}" stroke-width="2"'
        if shape == _REPLAY_SHAPE:
            paint += ' stroke-linecap="round" stroke-linejoin="round"'
    return f'<svg width="{size}" height="{size}" viewBox="0 0 24 24" {paint}>{shape}</svg>'


def _image_icon(url: str, size: int = DEFAULT_ICON_SIZE) -> str:
    return f'<img src="{attr(url)}" width="{size}" height="{size}" style="object-fit: contain;">'


def button_icon(layer, scene):
    """Icon markup for a button

    Returns:
        (icon html, toggle data attributes) where toggle data is '' for
        static icons. Toggle icons start as "pause" when the target video
        autoplays, "play" otherwise.
    """
    icon = layer.icon
    color = icon.color or layer.styles.color or DEFAULT_BUTTON_COLOR

    static = {
        'play': lambda: _svg(_PLAY_SHAPE, color, filled=False),
        'pause': lambda: _svg(_PAUSE_SHAPE, color, filled=False),
        'replay': lambda: _svg(_REPLAY_SHAPE, color, filled=False),
        'play-fill': lambda: _svg(_PLAY_SHAPE, color, filled=True),
        'pause-fill': lambda: _svg(_PAUSE_SHAPE, color, filled=True),
    }
    if icon.type in static:
        return static[icon.type](), ''
    if icon.type == 'custom':
        return (_image_icon(icon.custom_image), '') if icon.custom_image else ('', '')

    if icon.type in ('toggle-filled', 'toggle-outline'):
        filled = icon.type == 'toggle-filled'
        play = _svg(_PLAY_SHAPE, color, filled)
        pause = _svg(_PAUSE_SHAPE, color, filled)
    elif icon.type == 'toggle-custom' and icon.custom_play_image and icon.custom_pause_image:
        play = _image_icon(icon.custom_play_image)
        pause = _image_icon(icon.custom_pause_image)
    else:
        return '', ''

    initial = pause if _target_autoplays(layer, scene) else play
    data = f' data-play-icon="{attr(play)}" data-pause-icon="{attr(pause)}"'
    return initial, data


def _target_video(layer, scene):
    control = layer.video_control
    if layer.action_type != 'videoControl' or control is None or not control.target_element_id:
        return None
    target = scene.find_layer_by_export_id(control.target_element_id)
    if target is None or target.kind != 'video':
        return None
    return target


def _target_autoplays(layer, scene) -> bool:
    target = _target_video(layer, scene)
    return bool(target is not None and target.properties.autoplay)


# ======================================================================
# Video control handlers
# ======================================================================

_VIDEO_ACTIONS = {
    'play': 'v.play();',
    'pause': 'v.pause();',
    'restart': 'v.currentTime = 0; v.play();',
    'togglePlayPause': 'v.paused ? v.play() : v.pause();',
}

_ICON_SWAP = ("const iconEl = this.querySelector('.btn-icon'); "
              "if (iconEl) { setTimeout(function() { "
              "iconEl.innerHTML = v.paused ? iconEl.dataset.playIcon : iconEl.dataset.pauseIcon; }, 0); }")


def video_control_handler(layer, toggles_icon: bool) -> str:
    """Inline onclick script; a missing target video makes it a no-op"""
    control = layer.video_control
    action = _VIDEO_ACTIONS.get(control.action, _VIDEO_ACTIONS['play'])
    swap = f" {_ICON_SWAP}" if toggles_icon else ''
    target = json.dumps(control.target_element_id)
    return f"const v = document.getElementById({target}); if (v) {{ {action}{swap} }}"


# ======================================================================
# Elements
# ======================================================================

def _text_styles(layer, default_color=DEFAULT_TEXT_COLOR) -> str:
    styles = layer.styles
    return (f"color: {styles.color or default_color}; "
            f"font-family: {styles.font_family or DEFAULT_FONT_FAMILY};")


def _button_content(layer, scene) -> str:
    icon_html, toggle_data = button_icon(layer, scene)
    text = layer.text if layer.text and layer.text.strip() else ''
    has_icon = layer.icon.type != 'none' and bool(icon_html)

    if has_icon and toggle_data:
        icon_html = f'<span class="btn-icon"{toggle_data}>{icon_html}</span>'
    if has_icon and text:
        if layer.icon.position == 'after':
            return f'<span style="margin-right: {BUTTON_ICON_GAP};">{text}</span>{icon_html}'
        return f'{icon_html}<span style="margin-left: {BUTTON_ICON_GAP};">{text}</span>'
    if has_icon:
        return icon_html
    return text


def render_layer(layer, scene, z_index: int, animated: bool) -> str:
    """Single element for a layer

    Args:
        layer: Layer to render
        scene: Owning scene (button targets are looked up in it)
        z_index: Stacking order; higher is on top
        animated: Adds the data-animated marker read by the bootstrap script
    """
    export_id = attr(layer.export_id)
    base = f"position: absolute; z-index: {z_index};"
    if not scene.layer_has_animation_type(layer.id, 'fadeIn'):
        base += f" opacity: {format_number(layer.styles.opacity)};"
    if layer.styles.background_color and layer.kind != 'button':
        base += f" background-color: {layer.styles.background_color};"
    marker = ' data-animated' if animated else ''

    if layer.kind == 'image':
        fit = layer.styles.object_fit or DEFAULT_OBJECT_FIT
        style = attr(f"{base} object-fit: {fit};")
        return f'<img id="{export_id}" src="{attr(layer.url)}" alt="{attr(layer.label)}" style="{style}"{marker}>'

    if layer.kind == 'text':
        align = layer.styles.text_align or 'left'
        style = attr(f"{base} {_text_styles(layer)} text-align: {align}; white-space: pre-wrap;")
        return f'<div id="{export_id}" style="{style}"{marker}>{layer.content}</div>'

    if layer.kind == 'richtext':
        align = layer.styles.text_align or 'left'
        style = attr(f"{base} {_text_styles(layer)} text-align: {align};")
        return f'<div id="{export_id}" style="{style}"{marker}>{layer.content}</div>'

    if layer.kind == 'video':
        flags = ''
        if layer.properties.autoplay:
            flags += ' autoplay muted playsinline loop'
        if layer.properties.controls:
            flags += ' controls'
        return f'<video id="{export_id}" src="{attr(layer.url)}" style="{attr(base)}"{flags}{marker}></video>'

    if layer.kind == 'button':
        return _render_button(layer, scene, base, export_id, marker)

    logger.warning(f"No markup for layer kind '{layer.kind}' ({layer.id})")
    return ''


def _render_button(layer, scene, base, export_id, marker) -> str:
    style = (
        f"{base} background-color: {layer.styles.background_color or DEFAULT_BUTTON_BACKGROUND}; "
        f"{_text_styles(layer, DEFAULT_BUTTON_COLOR)} cursor: pointer; border: none;"
    )
    content = _button_content(layer, scene)

    if layer.action_type == 'videoControl' and layer.video_control is not None:
        if _target_video(layer, scene) is None:
            logger.warning(f"Button {layer.export_id} targets missing video "
                           f"'{layer.video_control.target_element_id}'")
        toggles = layer.icon.type.startswith('toggle-')
        handler = video_control_handler(layer, toggles)
        return (f'<button id="{export_id}" onclick="{attr(handler)}" '
                f'style="{attr(style)}"{marker}>{content}</button>')

    return (f'<a id="{export_id}" href="{attr(layer.url or "#")}" target="_blank" '
            f'style="{attr(style + " text-decoration: none;")}"{marker}>{content}</a>')
