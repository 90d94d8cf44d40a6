"""Central constants for CueTimer (small, stable primitives only).

Runtime values that users may change belong in the settings files instead.
"""

# Length of the preparation countdown before the run clock starts (seconds)
DEFAULT_COUNTDOWN_SECONDS: int = 60

# Tick cadence while counting down or running (milliseconds)
DEFAULT_TICK_INTERVAL_MS: int = 10

# Extensions recognised as trigger files
TRIGGER_FILE_EXTENSIONS = (".yaml", ".yml")

# Trigger offsets are whole elapsed seconds, 0..MAX_TRIGGER_OFFSET
MAX_TRIGGER_OFFSET: int = 65535

# Label of the single control button for each phase
PRIMARY_ACTIONS = {
    "idle": "Start",
    "counting_down": "Cancel",
    "running": "Pause",
    "paused": "Resume",
}
