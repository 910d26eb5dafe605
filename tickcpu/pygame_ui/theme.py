# ------------------------------
# WINDOW / PLAYBACK
# ------------------------------
W, H = 1100, 860
FPS = 60
TICK_MS_DEFAULT = 500          # one simulated time unit every 0.5s
TICK_MS_MIN, TICK_MS_MAX = 100, 1500
TICK_MS_STEP = 100
MAX_TICKS = 10000              # playback stops here even if work remains
MAX_QUANTUM = 10

# ------------------------------
# LAYOUT (panel heights, left-aligned column)
# ------------------------------
MARGIN_X = 40
CONTENT_W = W - 2 * MARGIN_X
GAP = 10
CPU_PANEL_W = 360
TOP_ROW_H = 140
GANTT_H = 170
TRACE_H = 150
RADIUS = 14

# ------------------------------
# COLORS
# ------------------------------
BG = (16, 18, 24)
PANEL = (28, 31, 40)
BORDER = (66, 72, 90)
OUTLINE = (8, 9, 12)
TEXT = (236, 239, 246)
MUTED = (160, 168, 186)
CHIP_TEXT = (12, 12, 14)

ACCENT = (100, 150, 250)
CPU_RUN = (84, 196, 132)
CPU_IDLE = (104, 110, 124)
READY_BOX = ACCENT
AGED_BOX = (250, 196, 80)      # ready chip whose priority was lowered by aging
GANTT_BG = (20, 22, 28)
GRID = (58, 62, 76)
TOOLTIP_BG = (18, 19, 24, 240)

SHADOW_RGBA = (0, 0, 0, 120)
SHADOW_OFFSET = (0, 6)
HILITE_RGBA = (255, 255, 255, 18)

# Gantt block colors, picked per process name
TASK_COLORS = [
    (239, 104, 128),
    (70, 160, 230),
    (247, 200, 90),
    (86, 190, 180),
    (160, 112, 240),
    (250, 150, 70),
    (64, 200, 120),
    (220, 84, 72),
    (120, 180, 250),
    (190, 110, 190),
]
