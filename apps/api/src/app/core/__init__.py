"""
Core module - settings, database and Redis connections, tokens, rate limits
and the background scheduler shared by the portal's domain modules.
"""

from app.core.config import get_settings, settings
from app.core.database import Base, async_session_maker, close_db, get_db, init_db
from app.core.rate_limit import RateLimitExceeded, check_rate_limit, enforce_rate_limit
from app.core.redis import close_redis, get_redis, init_redis, is_redis_available
from app.core.scheduler import register_job, start_scheduler, stop_scheduler
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "async_session_maker",
    "get_db",
    "init_db",
    "close_db",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    "is_redis_available",
    # Rate limiting
    "check_rate_limit",
    "enforce_rate_limit",
    "RateLimitExceeded",
    # Scheduler
    "register_job",
    "start_scheduler",
    "stop_scheduler",
    # Tokens and passwords
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
]
