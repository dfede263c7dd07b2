"""
Shared constants for the graph visualization engine.

Layout rings, node radii, camera limits and the default heuristics used
by the graph builder. The browser bridge in graph_panel.py relies on the
same pixel values, keep them in sync.
"""

import math

NODE_TYPES = ('core', 'summary', 'meta', 'metric', 'tag', 'hub', 'status', 'insight')

# Edge type used for emphasised relations (core -> summary, anchor -> insight)
EDGE_HIGHLIGHT = 'highlight'

# Canvas size used when the host has not reported one yet
DEFAULT_CANVAS_WIDTH = 360.0
DEFAULT_CANVAS_HEIGHT = 240.0

# Ring layout: (types, radius factor of the shortest side, minimum radius, phase)
RING_CONFIGS = (
    (('summary', 'status'), 0.15, 50.0, 0.0),
    (('meta', 'metric'), 0.22, 80.0, math.pi / 6),
    (('hub',), 0.28, 100.0, math.pi / 4),
    (('tag', 'insight'), 0.35, 130.0, math.pi / 3),
)

# Circle for node types no ring claims
FALLBACK_RING = (0.25, 90.0, 0.0)

# Node radii in world pixels
NODE_RADIUS = {
    'core': 18.0,
    'hub': 15.0,
    'tag': 10.0,
    'insight': 12.0,
}
FIXED_NODE_RADIUS = 14.0
DEFAULT_NODE_RADIUS = 12.0

# Extra slack around a node's radius that still counts as a hit
HIT_PADDING = 4.0

# Pointer travel (screen px) before a pressed node starts dragging
DRAG_THRESHOLD = 3.0

# Camera
MIN_SCALE = 0.1
MAX_SCALE = 5.0
ZOOM_INTENSITY = 0.1

# Tooltip placement relative to the canvas container
TOOLTIP_OFFSET = 14.0
TOOLTIP_MARGIN = 12.0
TOOLTIP_FAR_MARGIN = 20.0

# Renderer
GRID_SIZE = 40.0
LABEL_GAP = 6.0
LABEL_FONT = '12px "Inter", "PingFang SC", sans-serif'
LABEL_COLOR = '#d8e8ff'
BACKGROUND_COLOR = 'rgba(5, 14, 24, 0.7)'
BACKGROUND_GRADIENT = ('rgba(0, 242, 255, 0.05)', 'rgba(24, 144, 255, 0.03)')
GRID_COLOR = 'rgba(0, 242, 255, 0.06)'
EDGE_COLOR = 'rgba(255,255,255,0.2)'
EDGE_HIGHLIGHT_COLOR = 'rgba(0, 242, 255, 0.55)'
EDGE_WIDTH = 1.5
ACTIVE_GLOW_COLOR = 'rgba(0, 242, 255, 0.8)'
ACTIVE_GLOW_BLUR = 22.0

NODE_THEME = {
    'core': {'fill': 'rgba(0, 242, 255, 0.35)', 'stroke': 'rgba(0, 242, 255, 0.9)'},
    'summary': {'fill': 'rgba(24, 144, 255, 0.25)', 'stroke': 'rgba(24, 144, 255, 0.9)'},
    'meta': {'fill': 'rgba(111, 255, 233, 0.15)', 'stroke': 'rgba(111, 255, 233, 0.7)'},
    'metric': {'fill': 'rgba(255, 169, 64, 0.2)', 'stroke': 'rgba(255, 169, 64, 0.8)'},
    'tag': {'fill': 'rgba(138, 115, 255, 0.2)', 'stroke': 'rgba(138, 115, 255, 0.75)'},
    'hub': {'fill': 'rgba(255, 255, 255, 0.08)', 'stroke': 'rgba(255, 255, 255, 0.45)'},
    'status': {'fill': 'rgba(255, 99, 125, 0.2)', 'stroke': 'rgba(255, 99, 125, 0.85)'},
    'insight': {'fill': 'rgba(0, 0, 0, 0.35)', 'stroke': 'rgba(0, 242, 255, 0.4)'},
}
DEFAULT_NODE_THEME = {'fill': 'rgba(255,255,255,0.2)', 'stroke': 'rgba(255,255,255,0.6)'}

# Builder heuristics (defaults, overridable through config.json)
LONG_CLIP_SECONDS = 300.0
SHORT_CLIP_SECONDS = 60.0
MULTI_TAG_COUNT = 4
FIRE_KEYWORDS = ('fire', 'smoke', 'flame', '火', '烟')
SAFETY_KEYWORDS = ('safety', 'alert', 'alarm', '安全', '告警')
