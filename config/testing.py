import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geofence_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# 0 = re-fetch active zones before every validation
ZONE_CACHE_MAX_AGE_SECONDS = 0.0
UNCONFIGURED_ZONE_POLICY = "reject"

LOCATION_TIMEOUT_SECONDS = 1.0
PHOTO_STORAGE_DIR = os.getenv("PHOTO_STORAGE_DIR", "/tmp/geofence-attendance-photos")
PHOTO_UPLOAD_WORKERS = 0
