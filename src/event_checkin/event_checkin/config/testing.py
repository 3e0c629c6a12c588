import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ROSTER_FILE = os.getenv("ROSTER_FILE", "")
GUEST_FILES: list[str] = []

INSIGHT_API_KEY = ""
INSIGHT_API_URL = "http://insight.test/v1/chat/completions"
INSIGHT_MODEL = "test-model"
INSIGHT_TIMEOUT = 1.0

BROADCAST_SEND_TIMEOUT = 0.05
STREAM_QUEUE_SIZE = 16
LEDGER_SHARDS = 4
