"""Middleware module for bot handlers."""

from askbot.bot.middlewares.db_middleware import DbSessionMiddleware
from askbot.bot.middlewares.logging_middleware import StateLoggingMiddleware
from askbot.bot.middlewares.user_lock import UserLockMiddleware
from askbot.bot.middlewares.user_middleware import UserRegistrationMiddleware

__all__ = ["DbSessionMiddleware", "StateLoggingMiddleware", "UserLockMiddleware", "UserRegistrationMiddleware"]
