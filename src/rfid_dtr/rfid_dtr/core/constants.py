"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NOON_HOUR = 12
DEFAULT_STORE_WRITE_ATTEMPTS = 2
DEFAULT_DB_TIMEOUT_SECONDS = 5

CLOCK_FORMAT = "%I:%M %p"
ISO_DATE_FORMAT = "%Y-%m-%d"
MONTH_KEY_FORMAT = "%Y-%m"
MONTH_LABEL_FORMAT = "%B %Y"
EXPORT_DATE_FORMAT = "%m/%d/%Y"
EMPTY_PLACEHOLDER = "-"

UNREGISTERED_CARD_MESSAGE = "Unregistered RFID card. Please contact administrator."
SCAN_FAILED_MESSAGE = "Failed to process scan. Please try again or contact support."
