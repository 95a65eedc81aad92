"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_ZONE_VERTICES = 3
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_ZONE_CACHE_MAX_AGE_SECONDS = 30.0
DEFAULT_LOCATION_TIMEOUT_SECONDS = 10.0
PHOTO_FILENAME_TEMPLATE = "checkin_{employee_ref}_{epoch_ms}.jpg"
