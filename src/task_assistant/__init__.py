"""Task assistant: personal to-do bot for Telegram and the local console."""

__version__ = "0.1.0"
