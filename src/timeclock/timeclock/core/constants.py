"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEDUP_WINDOW_MS = 60_000
DEFAULT_PAGE_SIZE = 10
RECENT_ACTIVITY_LIMIT = 5

DEMO_USER_EMAIL = "demo@example.com"
DEMO_USER_NAME = "Demo user"
ANONYMOUS_IDENTITIES = frozenset({"anonymous", "demo-user"})

GEOCODER_URL = "https://api.opencagedata.com/geocode/v1/json"
DEFAULT_GEOCODER_TIMEOUT = 10
MIN_PASSWORD_LENGTH = 8
