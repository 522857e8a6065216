from __future__ import annotations

import os
from pathlib import Path


# where results are stored; TYPING_TUTOR_HOME overrides it
STATS_DIR = Path(os.environ.get("TYPING_TUTOR_HOME", Path.home() / ".typing-tutor"))
STATS_FILE = STATS_DIR / "stats.json"

# test lengths offered on the home screen, in seconds
TIME_OPTIONS = (15, 30, 60, 120)
DEFAULT_DURATION = 30

# words generated per test; more than anyone types in the longest option
WORD_COUNT = 400

# gaps between keystrokes longer than this are not active typing time
AFK_THRESHOLD_S = 2.0
# no keystroke for this long marks the attempt as AFK (not saved)
AFK_TIMEOUT_S = 6.5

# live metrics refresh rate in the UI
TICK_INTERVAL_S = 0.1

# set to a level name (e.g. "INFO") to write logs to LOG_FILE
LOG_LEVEL = os.environ.get("TYPING_TUTOR_LOG", "")
LOG_FILE = STATS_DIR / "typing-tutor.log"
