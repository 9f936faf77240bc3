"""Telegram bot layer: handlers, middlewares and rendering."""
