import os
from zoneinfo import ZoneInfo

# --------------------
# Time
# --------------------
HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# Local "day" resets at 3:00 AM, same as the dashboard windows
LOCAL_TZ = ZoneInfo(os.getenv("MOVERS_TIMEZONE", "America/New_York"))
DAILY_RESET_HOUR = 3

# --------------------
# Rank cutoffs
# --------------------
# Nominal season values, used when the live cutoffs are unavailable
DEFAULT_GRANDMASTER_CUTOFF = 200
DEFAULT_CHALLENGER_CUTOFF = 500

SOLO_QUEUE_TYPE = "RANKED_SOLO_5x5"

# --------------------
# Windows (id, label, duration in ms; None = whole season)
# --------------------
WINDOW_CHOICES = [
    ("24h", "Last 24h", DAY_MS),
    ("7d", "Last 7 days", 7 * DAY_MS),
    ("30d", "Last 30 days", 30 * DAY_MS),
    ("season", "Season", None),
]

# Movers are only summarized over these
SUMMARY_WINDOW_IDS = ("24h", "7d")

# --------------------
# Chart tuning
# --------------------
HEADROOM_CHECKPOINT_LP = 50
COARSE_TICK_RANGE = 1400

# Long histories get thinned once a player passes this many games
SAMPLE_MIN_GAMES = 100
SAMPLE_STEPS = [
    (300, 3),
    (600, 5),
]
SAMPLE_MAX_STEP = 10

# --------------------
# Discord
# --------------------
COMMAND_PREFIX = os.getenv("COMMAND_PREFIX", "!")
MAX_EMBED_PLAYERS = 8
