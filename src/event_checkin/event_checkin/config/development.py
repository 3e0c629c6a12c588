import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Pipe-delimited members file: name|domain|type|membershipId|referrer
ROSTER_FILE = os.getenv("ROSTER_FILE", "data/members.csv")
# Comma-separated list of guest list files (Name,Profession,Referrer)
GUEST_FILES = [p for p in os.getenv("GUEST_FILES", "").split(",") if p.strip()]

INSIGHT_API_KEY = os.getenv("INSIGHT_API_KEY", "")
INSIGHT_API_URL = os.getenv("INSIGHT_API_URL", "https://api.deepseek.com/v1/chat/completions")
INSIGHT_MODEL = os.getenv("INSIGHT_MODEL", "deepseek-chat")
INSIGHT_TIMEOUT = float(os.getenv("INSIGHT_TIMEOUT", "30"))

BROADCAST_SEND_TIMEOUT = float(os.getenv("BROADCAST_SEND_TIMEOUT", "0.5"))
STREAM_QUEUE_SIZE = int(os.getenv("STREAM_QUEUE_SIZE", "256"))
LEDGER_SHARDS = int(os.getenv("LEDGER_SHARDS", "16"))
