"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# datetime.date.weekday(): Monday=0 ... Sunday=6
SATURDAY = 5
FRIDAY = 4

DAYS_IN_WEEK = 7
WEEK_START_WEEKDAY = SATURDAY
HOLIDAY_WEEKDAY = FRIDAY

MIN_DAYS_PER_EMPLOYEE = 1
MAX_DAYS_PER_EMPLOYEE = 6

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200
ADMIN_LIST_LIMIT = 500
MIN_PASSWORD_LENGTH = 6
