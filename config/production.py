import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geofence_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ZONE_CACHE_MAX_AGE_SECONDS = float(os.getenv("ZONE_CACHE_MAX_AGE_SECONDS", "30"))
UNCONFIGURED_ZONE_POLICY = os.getenv("UNCONFIGURED_ZONE_POLICY", "reject")

LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "10"))
PHOTO_STORAGE_DIR = os.getenv("PHOTO_STORAGE_DIR", "/var/lib/geofence-attendance/photos")
PHOTO_UPLOAD_WORKERS = int(os.getenv("PHOTO_UPLOAD_WORKERS", "4"))
