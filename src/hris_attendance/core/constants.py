"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_OUTLET_RADIUS_METERS = 100

DEFAULT_WORK_START_TIME = "09:00"
DEFAULT_WORK_END_TIME = "17:00"
DEFAULT_LATE_THRESHOLD_MINUTES = 15
EARLY_LEAVE_GRACE_MINUTES = 15
DEFAULT_COMPANY_NAME = "PT. Example Company"
DEFAULT_TIMEZONE = "Asia/Jakarta"

FACE_DISTANCE_SCALE = 0.6
DEFAULT_FACE_MATCH_MIN_SCORE = 60
DEFAULT_SCAN_INTERVAL_SECONDS = 1.0

DEFAULT_RECENT_ATTENDANCE_LIMIT = 10
DEFAULT_WEEKLY_DAYS = 7
