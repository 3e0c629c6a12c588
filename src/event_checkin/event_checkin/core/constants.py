"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EVENT_NAME = "Weekly Chapter Meeting"
DEFAULT_START_TIME = "07:00"
DEFAULT_END_TIME = "09:00"
DEFAULT_REGISTRATION_START_TIME = "06:30"
DEFAULT_ON_TIME_CUTOFF = "07:01"

TIME_OF_DAY_FORMAT = "%H:%M:%S"

DEFAULT_LEDGER_SHARDS = 16
DEFAULT_STREAM_QUEUE_SIZE = 256
DEFAULT_BROADCAST_SEND_TIMEOUT = 0.5

DEFAULT_INSIGHT_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_INSIGHT_MODEL = "deepseek-chat"
DEFAULT_INSIGHT_TIMEOUT = 30.0

SCAN_EVENT_NAME = "Chapter Meeting"
SCAN_STATUS_PRESENT = "Present"
