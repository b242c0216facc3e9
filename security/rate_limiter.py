"""
security/rate_limiter.py
-------------------------
Rate limiting middleware to keep one user from flooding the database.
Limits the number of commands a user can send within a sliding time window.
"""

import time
from collections import defaultdict, deque
from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

import config
from utils.logger import get_logger

logger = get_logger(__name__)

# {user_id: deque of command timestamps, oldest first}
_user_timestamps: dict[int, deque] = defaultdict(deque)


def allow(user_id: int, now: float | None = None) -> bool:
    """
    Record one command for `user_id` and report whether it is within the limit.
    Timestamps older than RATE_LIMIT_WINDOW_SECONDS are dropped first.
    """
    now = time.time() if now is None else now
    stamps = _user_timestamps[user_id]
    cutoff = now - config.RATE_LIMIT_WINDOW_SECONDS
    while stamps and stamps[0] <= cutoff:
        stamps.popleft()

    if len(stamps) >= config.RATE_LIMIT_MESSAGES:
        return False
    stamps.append(now)
    return True


def reset() -> None:
    """Forget every recorded timestamp."""
    _user_timestamps.clear()


def rate_limited(func: Callable):
    """
    Decorator that enforces rate limiting per user.

    Configuration (via .env):
        RATE_LIMIT_MESSAGES: Max commands per window (default: 30).
        RATE_LIMIT_WINDOW_SECONDS: Window duration in seconds (default: 60).
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        user = update.effective_user
        if not user:
            return

        if not allow(user.id):
            logger.warning(f"⚠️ Rate limit hit for user {user.id}")
            await update.message.reply_text("⚠️ Too many commands. Wait a moment and try again.")
            return

        return await func(update, context, *args, **kwargs)

    return wrapper
