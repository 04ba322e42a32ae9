"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
RECENT_ATTENDANCE_DAYS = 7
RECENT_ATTENDANCE_LIMIT = 10
MIN_PASSWORD_LENGTH = 6
WORKFLOW_SESSION_KEY = "workflow_key"
