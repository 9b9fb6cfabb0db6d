# match defaults
DEFAULT_HALF_DURATION_MINUTES = 45
DEFAULT_HALFTIME_DURATION_MINUTES = 15
MILLIS_PER_MINUTE = 60 * 1000

# jersey colors, ARGB
DEFAULT_HOME_COLOR_ARGB = 0xFFE53935  # red
DEFAULT_AWAY_COLOR_ARGB = 0xFF1E88E5  # blue

DEFAULT_HOME_TEAM_NAME = "Home"
DEFAULT_AWAY_TEAM_NAME = "Away"

# host scheduler
DEFAULT_TICK_INTERVAL_MS = 250

# persistence
SNAPSHOT_SCHEMA_VERSION = 1
EVENT_TYPE_KEY = "eventType"
DEFAULT_DATABASE_URL = "sqlite:///refwatch.db"
DEFAULT_SNAPSHOT_FILE = "match_snapshots.json"
