"""Anonymous Q&A Telegram bot."""

__version__ = "0.1.0"
