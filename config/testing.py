import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}
DB_POOL_SIZE = 2

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

DEDUP_WINDOW_MS = 60000
DEFAULT_PAGE_SIZE = 10

OPENCAGE_API_KEY = ""
GEOCODER_TIMEOUT = 1.0

# QR codes encode {PUBLIC_BASE_URL}/scan/<action>
PUBLIC_BASE_URL = "http://testserver"

LOG_LEVEL = "WARNING"
LOG_FORMAT = "standard"
