import os

# Root of the kiosk REST API. Endpoint paths below are joined onto it.
BASE_URL = os.getenv("KIOSK_BASE_URL", "https://deepcell.org/api")

UPLOAD_PATH = os.getenv("KIOSK_UPLOAD_PATH", "upload")
PREDICT_PATH = os.getenv("KIOSK_PREDICT_PATH", "predict")
STATUS_PATH = os.getenv("KIOSK_STATUS_PATH", "status")
EXPIRE_PATH = os.getenv("KIOSK_EXPIRE_PATH", "redis/expire")
REDIS_PATH = os.getenv("KIOSK_REDIS_PATH", "redis")
JOBTYPES_PATH = os.getenv("KIOSK_JOBTYPES_PATH", "jobtypes")

# HTTP timeouts (seconds)
CONNECT_TIMEOUT = float(os.getenv("KIOSK_CONNECT_TIMEOUT", "15"))
READ_TIMEOUT = float(os.getenv("KIOSK_READ_TIMEOUT", "10"))

POLL_INTERVAL = float(os.getenv("KIOSK_POLL_INTERVAL", "10"))
EXPIRE_SECONDS = int(os.getenv("KIOSK_EXPIRE_SECONDS", "3600"))

LOG_LEVEL = os.getenv("KIOSK_LOG_LEVEL", "INFO")

# Redis keys holding the terminal artifacts of a job
OUTPUT_KEY = "output_url"
ERROR_KEY = "reason"
