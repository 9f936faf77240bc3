from askbot.db.base import Base, get_async_engine, get_session_factory, init_models, utcnow

__all__ = ["Base", "get_async_engine", "get_session_factory", "init_models", "utcnow"]
