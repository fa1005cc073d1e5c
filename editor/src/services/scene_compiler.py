"""
Ad Canvas Editor - Scene Compiler

Turns a Scene into one self-contained HTML document that serves every
requested ad size:

- the first size's rules are unconditional
- every later size repeats the same rule shape inside
  @media (min-width: Wpx) and (min-height: Hpx)
- a layer without configuration at a size gets `display: none` there
- every size restores properties another size sets and it leaves out
  (opacity, transform, radius, font size)
- each size carries its own @keyframes blocks; the per-size rule
  publishes the animation shorthand in the --ad-animation custom
  property and a bootstrap script copies it onto element.style once the
  document is ready

Compilation is pure: it reads the scene, never mutates it, and produces
byte-identical output for identical input.

Usage:
    document = compile_scene(scene, ['300x250', '728x90'])
"""

import html
import logging
import re
from typing import Dict, Iterable, List, Optional

from constants import TEXT_LAYER_KINDS
from models.scene import AdSize, CornerRadii, format_number
from .animation_css import animated_property, resting_value
from .animation_timing import compute_timing
from .fonts import GoogleFontsService
from .layer_markup import render_layer

logger = logging.getLogger(__name__)

# Ids usable as-is in an #id selector; anything else gets [id="..."]
_CSS_IDENT_RE = re.compile(r'^-?[A-Za-z_][A-Za-z0-9_-]*$')

# Values restoring size-rule properties a later size leaves unset
_STATIC_RESETS = {
    'border-radius': '0',
    'font-size': 'inherit',
}


RESET_CSS = """      /* Reset styles */
      html, body, div, span, h1, h2, h3, h4, h5, h6, p, img, video, button, a {
        margin: 0;
        padding: 0;
        border: 0;
        font-size: 100%;
        font-weight: normal;
        vertical-align: baseline;
      }

      * {
        box-sizing: border-box;
      }

      body {
        position: relative;
        overflow: hidden;
        -webkit-text-size-adjust: 100%;
        background: {background};
        user-select: none;
        -webkit-user-select: none;
      }"""

BOOTSTRAP_SCRIPT = """    <script>
      // Apply animations once fonts and images have settled
      document.addEventListener('DOMContentLoaded', function() {
        var animated = document.querySelectorAll('[data-animated]');
        function applyAnimations() {
          animated.forEach(function(el) {
            var value = getComputedStyle(el).getPropertyValue('--ad-animation').trim();
            el.style.animation = value || 'none';
          });
        }
        applyAnimations();
        window.addEventListener('resize', applyAnimations);

        // Rewind videos on every animation loop so they stay in sync
        if (animated.length > 0) {
          animated[0].addEventListener('animationiteration', function() {
            document.querySelectorAll('video').forEach(function(video) {
              video.currentTime = 0;
              video.play().catch(function() {});
            });
          });
        }
      });

      // Auto-play videos on load
      (function() {
        document.querySelectorAll('video[autoplay]').forEach(function(video) {
          video.play().catch(function() {
            // Autoplay was prevented by browser policy
          });
        });
      })();
    </script>"""


def _indent(text: str, spaces: int) -> str:
    pad = ' ' * spaces
    return '\n'.join(pad + line if line else line for line in text.split('\n'))


def _border_radius(value) -> Optional[str]:
    if isinstance(value, CornerRadii):
        corners = (value.top_left, value.top_right, value.bottom_right, value.bottom_left)
        return ' '.join(f"{format_number(c)}px" for c in corners)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{format_number(value)}px"
    return None


def _font_size(value) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{format_number(value)}px"
    return None


class SceneCompiler:
    """Single-use compiler for one scene and an ordered size list

    Args:
        scene: Scene to read
        target_sizes: Sizes to serve, first one unconditional
        font_service: Decides the Google Fonts link (default catalog if None)
    """

    def __init__(self, scene, target_sizes: List[AdSize], font_service: Optional[GoogleFontsService] = None):
        self.scene = scene
        self.sizes = target_sizes
        self.fonts = font_service or GoogleFontsService()
        self.layers = scene.layers
        self._resolved = {}
        self.animated_ids = {
            layer.id for layer in self.layers
            if any(layer.size_config.get(size.key) and layer.size_config[size.key].animations
                   for size in self.sizes)
        }

    # ========================================
    # Naming
    # ========================================

    @staticmethod
    def keyframes_name(layer, animation, size: AdSize) -> str:
        return f"anim-{layer.export_id}-{animation.id}-{size.key}"

    # ========================================
    # Animations
    # ========================================

    def _resolved_animations(self, layer, config, size: AdSize):
        """(animation, AnimatedProperty) pairs, unusable animations dropped"""
        key = (layer.id, size.key)
        if key not in self._resolved:
            result = []
            for animation in config.animations:
                prop = animated_property(animation, layer, config)
                if prop is not None:
                    result.append((animation, prop))
            self._resolved[key] = result
        return self._resolved[key]

    def _keyframes(self, size: AdSize) -> List[str]:
        blocks = []
        for layer in self.layers:
            config = layer.size_config.get(size.key)
            if config is None or not config.animations:
                continue
            loop_delay, reset = self.scene.get_loop_timing(layer.id, size)
            for animation, prop in self._resolved_animations(layer, config, size):
                timing = compute_timing(animation, loop_delay, reset, self.scene.animation_loop)
                stops = '\n'.join(
                    f"  {frame.percent} {{ {prop.declaration(frame.state)}; }}"
                    for frame in timing.keyframes
                )
                blocks.append(f"@keyframes {self.keyframes_name(layer, animation, size)} {{\n{stops}\n}}")
        return blocks

    def _animation_shorthand(self, layer, config, size: AdSize) -> str:
        loop_delay, reset = self.scene.get_loop_timing(layer.id, size)
        parts = []
        for animation, _prop in self._resolved_animations(layer, config, size):
            timing = compute_timing(animation, loop_delay, reset, self.scene.animation_loop)
            parts.append(
                f"{self.keyframes_name(layer, animation, size)} {format_number(timing.cycle_ms)}ms "
                f"{animation.easing} 0s {timing.iteration_count} normal both"
            )
        return ', '.join(parts) or 'none'

    @staticmethod
    def _initial_state(resolved) -> Dict[str, str]:
        """Static "from" declarations; transforms are combined into one"""
        declarations = {}
        transforms = []
        for _animation, prop in resolved:
            if prop.is_transform:
                transforms.append(prop.from_value)
            else:
                declarations[prop.css_property] = prop.from_value
        if transforms:
            declarations['transform'] = ' '.join(transforms)
        return declarations

    # ========================================
    # Rules
    # ========================================

    @staticmethod
    def selector(layer) -> str:
        export_id = layer.export_id
        if _CSS_IDENT_RE.match(export_id):
            return f"#{export_id}"
        escaped = export_id.replace('\\', '\\\\').replace('"', '\\"')
        return f'[id="{escaped}"]'

    def _declarations(self, layer, config, size: AdSize) -> Dict[str, str]:
        if layer.kind == 'button':
            declarations = {'display': 'flex', 'align-items': 'center', 'justify-content': 'center'}
        else:
            declarations = {'display': 'block'}
        declarations.update({
            'left': config.position_x.css(),
            'top': config.position_y.css(),
            'width': config.width.css(),
            'height': config.height.css(),
        })
        if layer.kind in TEXT_LAYER_KINDS:
            font_size = _font_size(config.font_size) or _font_size(layer.styles.font_size)
            if font_size:
                declarations['font-size'] = font_size
        radius = _border_radius(config.border_radius)
        if radius:
            declarations['border-radius'] = radius
        declarations.update(self._initial_state(self._resolved_animations(layer, config, size)))
        return declarations

    def _resets(self, layer, declarations: Dict[str, str]) -> Dict[str, str]:
        """Undo what another size's rule set and this one does not

        @media blocks only override what they declare; anything left out
        keeps the value of the base rules or of another matching block.
        """
        resets = {}
        for size in self.sizes:
            config = layer.size_config.get(size.key)
            if config is None:
                continue
            for name in self._declarations(layer, config, size):
                if name in declarations or name in resets:
                    continue
                value = _STATIC_RESETS.get(name) or resting_value(layer, name)
                if value is not None:
                    resets[name] = value
        return resets

    def _layer_rules(self, layer, size: AdSize) -> str:
        selector = self.selector(layer)
        config = layer.size_config.get(size.key)
        if config is None:
            return f"{selector} {{ display: none; }}"

        declarations = self._declarations(layer, config, size)
        declarations.update(self._resets(layer, declarations))
        if layer.id in self.animated_ids:
            declarations['--ad-animation'] = self._animation_shorthand(layer, config, size)

        body = '\n'.join(f"  {name}: {value};" for name, value in declarations.items())
        rule = f"{selector} {{\n{body}\n}}"
        if layer.kind == 'button' and config.icon_size:
            icon = format_number(config.icon_size)
            rule += f"\n{selector} svg {{ width: {icon}px; height: {icon}px; }}"
        return rule

    def _size_block(self, size: AdSize) -> str:
        parts = []
        keyframes = self._keyframes(size)
        if keyframes:
            parts.append(f"/* Animation keyframes for {size.key} */")
            parts.extend(keyframes)
        parts.append(f".ad-container {{\n  width: {size.width}px;\n  height: {size.height}px;\n}}")
        parts.extend(self._layer_rules(layer, size) for layer in self.layers)
        return '\n'.join(parts)

    def stylesheet(self) -> str:
        first = self.sizes[0]
        sections = [
            RESET_CSS.replace('{background}', self.scene.background_color),
            _indent(
                "html, body {\n"
                "  width: 100%;\n"
                "  height: 100%;\n"
                f"  min-width: {first.width}px;\n"
                f"  min-height: {first.height}px;\n"
                "}\n\n"
                ".ad-container {\n"
                "  position: relative;\n"
                "  overflow: hidden;\n"
                "  margin: 0 auto;\n"
                "}", 6),
            _indent(f"/* Base styles for {first.key} */\n{self._size_block(first)}", 6),
        ]
        for size in self.sizes[1:]:
            sections.append(_indent(
                f"/* {size.key} */\n"
                f"@media (min-width: {size.width}px) and (min-height: {size.height}px) {{\n"
                f"{_indent(self._size_block(size), 2)}\n"
                "}", 6))
        return '\n\n'.join(sections)

    # ========================================
    # Document
    # ========================================

    def font_families(self) -> List[str]:
        return [
            layer.styles.font_family for layer in self.layers
            if layer.kind in TEXT_LAYER_KINDS and layer.styles.font_family
        ]

    def body(self) -> str:
        count = len(self.layers)
        elements = []
        for index, layer in enumerate(self.layers):
            element = render_layer(layer, self.scene, count - index, layer.id in self.animated_ids)
            if element:
                elements.append(f"      {element}")
        return '\n'.join(elements)

    def compile(self) -> str:
        fonts_url = self.fonts.stylesheet_url(self.font_families())
        head = [
            '    <meta charset="UTF-8">',
            '    <meta name="viewport" content="width=device-width, initial-scale=1.0">',
            f"    <title>{html.escape(self.scene.name)}</title>",
        ]
        if fonts_url:
            head.append(f'    <link href="{html.escape(fonts_url, quote=True)}" rel="stylesheet">')
        head.append(f"    <style>\n{self.stylesheet()}\n    </style>")

        body = self.body()
        container = '    <div class="ad-container">\n' + (f"{body}\n" if body else '') + '    </div>'
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "  <head>\n"
            + '\n'.join(head) + "\n"
            "  </head>\n"
            "  <body>\n"
            f"{container}\n"
            f"{BOOTSTRAP_SCRIPT}\n"
            "  </body>\n"
            "</html>\n"
        )


def _normalize_sizes(target_sizes: Iterable) -> List[AdSize]:
    sizes = []
    for size in target_sizes:
        ad_size = AdSize.parse(size)
        if ad_size not in sizes:
            sizes.append(ad_size)
    return sizes


def compile_scene(scene, target_sizes: Optional[Iterable] = None,
                  font_service: Optional[GoogleFontsService] = None) -> str:
    """Compile a scene into one responsive HTML document

    Args:
        scene: Scene to compile (not modified)
        target_sizes: Ordered sizes ("WxH" or AdSize); defaults to the
            scene's sizes. Repeats are dropped. Sizes the scene does not
            list are allowed; every layer is hidden there.
        font_service: Optional GoogleFontsService

    Returns:
        Complete HTML document

    Raises:
        ValueError: If no target size is given or a size key is malformed
    """
    sizes = _normalize_sizes(scene.sizes if target_sizes is None else target_sizes)
    if not sizes:
        raise ValueError("At least one target size is required")

    compiler = SceneCompiler(scene, sizes, font_service)
    document = compiler.compile()
    logger.debug(f"Compiled '{scene.name}' for {[s.key for s in sizes]} "
                 f"({len(compiler.layers)} layers, {len(document)} chars)")
    return document
