"""
Ad Canvas Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Standard HTML5 ad sizes (IAB catalog)
- Interaction constraints (snap threshold, minimum layer size)
- Animation timing defaults
- Export defaults (background, fonts, icon sizes)
- Defaults for newly created layers
"""

# ======================================================================
# HTML5 AD SIZES
# ======================================================================
# Keyed by "WxH". Order is the order they appear in the size selector.

HTML5_AD_SIZES = {
    '300x250': {'width': 300, 'height': 250, 'name': 'Medium Rectangle'},
    '336x280': {'width': 336, 'height': 280, 'name': 'Large Rectangle'},
    '728x90':  {'width': 728, 'height': 90,  'name': 'Leaderboard'},
    '970x90':  {'width': 970, 'height': 90,  'name': 'Large Leaderboard'},
    '120x600': {'width': 120, 'height': 600, 'name': 'Skyscraper'},
    '160x600': {'width': 160, 'height': 600, 'name': 'Wide Skyscraper'},
    '300x600': {'width': 300, 'height': 600, 'name': 'Half Page'},
    '320x50':  {'width': 320, 'height': 50,  'name': 'Mobile Banner'},
    '250x250': {'width': 250, 'height': 250, 'name': 'Square'},
}

DEFAULT_AD_SIZES = ['300x250', '336x280', '728x90', '160x600']

# ======================================================================
# INTERACTION CONSTRAINTS
# ======================================================================

# Smallest width/height an interactive resize may produce (canvas units)
MIN_LAYER_SIZE = 30

# Distance (canvas units) under which a moving edge snaps to a candidate
SNAP_THRESHOLD = 8

# Zoom limits for screen-to-canvas conversion
MIN_ZOOM = 0.1
MAX_ZOOM = 8.0
DEFAULT_ZOOM = 1.0

# Resize handle directions: 4 corners then 4 edges
CORNER_DIRECTIONS = ('nw', 'ne', 'sw', 'se')
EDGE_DIRECTIONS = ('n', 'e', 's', 'w')
RESIZE_DIRECTIONS = CORNER_DIRECTIONS + EDGE_DIRECTIONS

# Handle hit area in screen pixels (radius + tolerance)
HANDLE_SIZE = 8
HANDLE_HIT_TOLERANCE = 4

# ======================================================================
# ANIMATION DEFAULTS
# ======================================================================

# Loop count: -1 = infinite, 0 = play once, N > 0 = repeat N times
DEFAULT_ANIMATION_LOOP = -1

# Length of one animation cycle before the reset (value, unit)
DEFAULT_LOOP_DELAY = (5, 's')

# Pause appended after the loop delay before the next cycle (value, unit)
DEFAULT_RESET_DURATION = (1, 's')

# Gap between the last "to" keyframe and the snap back to "from" (percent)
KEYFRAME_RESET_EPSILON = 0.01

# Decimal places for keyframe offsets
KEYFRAME_PRECISION = 4

ANIMATION_TYPES = ('fadeIn', 'slideLeft', 'slideRight', 'slideUp', 'slideDown', 'scale', 'custom')

DEFAULT_ANIMATION_DURATION = (0.3, 's')
DEFAULT_ANIMATION_DELAY = (0, 's')
DEFAULT_ANIMATION_EASING = 'linear'

# ======================================================================
# EXPORT DEFAULTS
# ======================================================================

DEFAULT_BACKGROUND_COLOR = '#ffffff'
DEFAULT_TEXT_COLOR = '#000000'
DEFAULT_FONT_FAMILY = 'Arial'
DEFAULT_BUTTON_BACKGROUND = '#333333'
DEFAULT_BUTTON_COLOR = '#ffffff'
DEFAULT_OBJECT_FIT = 'cover'

# Icon size baked into exported SVG markup; per-size CSS overrides it
DEFAULT_ICON_SIZE = 24

# Gap between a button's icon and its text
BUTTON_ICON_GAP = '6px'

GOOGLE_FONTS_URL = 'https://fonts.googleapis.com/css2'
GOOGLE_FONT_WEIGHTS = '300;400;700'

# Families served by Google Fonts. System fonts (Arial) are never linked.
GOOGLE_FONTS = [
    'Arial',
    'Roboto',
    'Open Sans',
    'Lato',
    'Montserrat',
    'Oswald',
    'Raleway',
    'Poppins',
    'Inter',
    'Nunito',
    'Merriweather',
    'Playfair Display',
    'Source Sans 3',
    'PT Sans',
    'Ubuntu',
    'Noto Sans',
    'Bebas Neue',
    'Anton',
]

SYSTEM_FONTS = {'Arial'}

# ======================================================================
# NEW LAYER DEFAULTS
# ======================================================================

DEFAULT_LAYER_X = 10
DEFAULT_LAYER_Y = 10
DEFAULT_LAYER_WIDTH = 100
DEFAULT_LAYER_HEIGHT = 40
DEFAULT_LAYER_FONT_SIZE = '14px'

TEXT_LAYER_KINDS = ('text', 'richtext', 'button')

# ======================================================================
# HISTORY
# ======================================================================

MAX_HISTORY = 50
