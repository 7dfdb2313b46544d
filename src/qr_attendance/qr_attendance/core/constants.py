"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

QR_VALIDITY_MILLIS = 60_000
QR_FILL_COLOR = "#E85C0D"
QR_BACK_COLOR = "#FFFFFF"

MONTHLY_TREND_MONTHS = 6
TEACHER_RECENT_LIMIT = 20
MIN_PASSWORD_LENGTH = 6

HISTORY_CSV_HEADER = ("Class", "Date", "Time")
