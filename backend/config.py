import os

# Ratio bounds (parity 1.0, 5% band either side)
RATIO_UPPER_BOUND = float(os.getenv("RATIO_UPPER_BOUND", "1.05"))
RATIO_LOWER_BOUND = float(os.getenv("RATIO_LOWER_BOUND", "0.95"))

# Sink retention (0 = keep everything)
TABLE_ROW_LIMIT = int(os.getenv("TABLE_ROW_LIMIT", "10000"))

# Alerts
ALERT_HISTORY_SIZE = int(os.getenv("ALERT_HISTORY_SIZE", "100"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"
LOG_FILE = os.getenv("LOG_FILE") or None

# API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
