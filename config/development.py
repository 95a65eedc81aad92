import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geofence_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Geofencing
ZONE_CACHE_MAX_AGE_SECONDS = float(os.getenv("ZONE_CACHE_MAX_AGE_SECONDS", "30"))
UNCONFIGURED_ZONE_POLICY = os.getenv("UNCONFIGURED_ZONE_POLICY", "reject")

# Check-in
LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "10"))
PHOTO_STORAGE_DIR = os.getenv("PHOTO_STORAGE_DIR", "storage/attendance-photos")
PHOTO_UPLOAD_WORKERS = int(os.getenv("PHOTO_UPLOAD_WORKERS", "2"))
