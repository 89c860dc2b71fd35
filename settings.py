"""
settings.py — Global constants for StatClash.

All magic numbers live here. No other module should hardcode colors,
dimensions, timing values or game rules. Import what you need with:
    from settings import COLOR, SCREEN_W, ...

Deployment-specific values (API endpoint, storage path, log level) can be
overridden through STATCLASH_* environment variables.
"""

import os
from pathlib import Path

# ── Screen ────────────────────────────────────────────────────────────────────
SCREEN_W = 640
SCREEN_H = 480
FPS = 60
TITLE = "StatClash"

# ── Colors ────────────────────────────────────────────────────────────────────
COLOR = {
    "background":  ( 26,  32,  44),   # #1A202C
    "card":        ( 45,  55,  72),   # #2D3748
    "card_border": ( 74,  85, 104),   # #4A5568
    "highlight":   (237, 137,  54),   # #ED8936 — hovered card / button
    "accent":      (246, 224,  94),   # #F6E05E — names, headings
    "chrome":      (160, 174, 192),   # #A0AEC0
    "text":        (237, 242, 247),   # #EDF2F7
    "text_dark":   ( 26,  32,  44),
    "bar_low":     (229,  62,  62),   # attribute bar at 0
    "bar_high":    ( 72, 187, 120),   # attribute bar at ATTRIBUTE_BAR_MAX
    "cooldown":    ( 66, 153, 225),
    "pass":        ( 72, 187, 120),   # green flash on correct
    "fail":        (229,  62,  62),   # red flash on wrong
    "placeholder": ( 74,  85, 104),
}

# ── Fonts ─────────────────────────────────────────────────────────────────────
FONT_FAMILY  = "arial"
FONT_SIZE_XL = 32
FONT_SIZE_LG = 22
FONT_SIZE_MD = 16
FONT_SIZE_SM = 12

# ── UI Layout (relative to 640×480) ──────────────────────────────────────────
HEADER_H      = 48    # px — streak / best streak bar
CARD_W        = 260
CARD_H        = 330
CARD_GAP      = 40
CARD_TOP      = HEADER_H + 16
SPRITE_SIZE   = 96
BUTTON_H      = 40
COOLDOWN_BAR_H = 8
ATTRIBUTE_BAR_MAX = 180   # base stat that fills an attribute bar
FLASH_DURATION = 0.45     # seconds
TOAST_DURATION = 2.5      # seconds

# ── Creature API ──────────────────────────────────────────────────────────────
API_BASE_URL     = os.environ.get("STATCLASH_API_BASE_URL", "https://pokeapi.co/api/v2/pokemon")
FETCH_TIMEOUT_S  = 10.0
CREATURE_ID_MIN  = 1
CREATURE_ID_MAX  = 898

# ── Game rules ────────────────────────────────────────────────────────────────
ROUND_LOAD_ATTEMPTS  = 3      # full round loads before the round stalls
SIMILARITY_ATTEMPTS  = 5      # challenging mode: samples for a close match
SIMILARITY_TOLERANCE = 50     # challenging mode: max total score difference
COOLDOWN_TICKS       = 3      # ticks shown after a correct prediction
COOLDOWN_SECONDS     = 3.0    # delay before the next round loads
TICK_SECONDS         = 1.0    # length of one cooldown tick

# ── Prefetch ──────────────────────────────────────────────────────────────────
PREFETCH_COUNT       = 20
PREFETCH_CONCURRENCY = 4

# ── Achievements ──────────────────────────────────────────────────────────────
# Format: (id, name, description, required streak)
ACHIEVEMENTS = [
    ("first_win",    "First Victory",        "Win your first battle!",      1),
    ("beginner",     "Beginner Trainer",     "Win 5 battles in a row!",     5),
    ("intermediate", "Intermediate Trainer", "Win 10 battles in a row!",   10),
    ("advanced",     "Advanced Trainer",     "Win 20 battles in a row!",   20),
    ("master",       "Creature Master",      "Win 50 battles in a row!",   50),
]

# ── Storage ───────────────────────────────────────────────────────────────────
STORE_PATH = Path(
    os.environ.get(
        "STATCLASH_STORE_PATH",
        str(Path.home() / ".cache" / "statclash" / "store.json"),
    )
)
BEST_STREAK_KEY = "statclash.best_streak"

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL  = os.environ.get("STATCLASH_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
