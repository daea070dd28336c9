"""
Runtime settings for flightwx, read from the environment.
"""

import os

# aviationweather.gov data API
AWC_BASE_URL = os.getenv("FLIGHTWX_AWC_BASE_URL", "https://aviationweather.gov/api/data").rstrip("/")
HTTP_TIMEOUT = float(os.getenv("FLIGHTWX_HTTP_TIMEOUT", "15"))
USER_AGENT = os.getenv("FLIGHTWX_USER_AGENT", "flightwx/0.1 (aviation weather tool)")
# Station ids per request
BATCH_SIZE = int(os.getenv("FLIGHTWX_BATCH_SIZE", "400"))

# Logging
LOG_LEVEL = os.getenv("FLIGHTWX_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("FLIGHTWX_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
