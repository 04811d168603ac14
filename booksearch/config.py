# booksearch/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name, default):
    # unset, unparseable and zero all fall back to the default
    try:
        return int(os.getenv(name, "")) or default
    except ValueError:
        return default


# Eurobuch credentials - loaded from .env ("test"/"test" works without an account)
EUROBUCH_PLATFORM = os.getenv("EUROBUCH_PLATFORM")
EUROBUCH_PASSWORD = os.getenv("EUROBUCH_PASSWORD")

SEARCH_HOST = os.getenv("EUROBUCH_HOST", "www.eurobuch.de")
RESULT_LIMIT = _int_env("EUROBUCH_RESULT_LIMIT", 10)
REQUEST_TIMEOUT = float(os.getenv("EUROBUCH_TIMEOUT", "30"))
FETCH_RETRIES = _int_env("EUROBUCH_RETRIES", 3)

IP_LOOKUP_URL = os.getenv("IP_LOOKUP_URL", "https://api.ipify.org?format=text")
FALLBACK_CLIENT_IP = "0.0.0.0"

MIN_QUERY_LENGTH = 2
