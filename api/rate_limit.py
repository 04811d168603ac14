# api/rate_limit.py
import os
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi import FastAPI

SEARCH_RATE_LIMIT = os.getenv("SEARCH_RATE_LIMIT", "30/minute")

limiter = Limiter(key_func=get_remote_address)


def register_rate_limit(app: FastAPI):
    """
    Attach the slowapi limiter to the app and install the 429 handler.

    Must be called during application setup, before requests are served.
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
