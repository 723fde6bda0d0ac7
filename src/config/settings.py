"""
Configuration settings for the User Records Backend
"""

import os
import logging

logger = logging.getLogger(__name__)

# Environment configuration
DATABASE_URL = os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")
USER_STORE = os.getenv("USER_STORE", "postgres").lower()  # postgres or memory
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Connection pool sizing
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# CORS settings - the form UI may be served from any origin
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

SUPPORTED_STORES = ("postgres", "memory")

if USER_STORE not in SUPPORTED_STORES:
    raise ValueError(f"USER_STORE must be one of {SUPPORTED_STORES}, got: {USER_STORE}")
if USER_STORE == "postgres" and not DATABASE_URL:
    logger.warning("DATABASE_URL not set - the postgres user store will fail to start")
