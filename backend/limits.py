"""Shared slowapi limiter; registered on app.state in backend.main."""
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

EVALUATE_LIMIT = "60/minute"
BATCH_LIMIT = "10/minute"
