"""
chat_logger.py - Centralized logging configuration for restore-chat

Sets up Python logging with:
- File handler: logs/YYYY-MM-DD/chat.txt (one folder per day)
- Console handler: stdout
- Configurable log level via LOG_LEVEL env variable
- Helpers that keep user text and credentials out of raw log lines

Every pipeline event is written as ``Event | key=value | key=value`` and
carries the request_id of the chat call it belongs to.
"""

import os
import logging
from datetime import datetime
from pathlib import Path


def sanitize_log_string(text: str, max_length: int = 200) -> str:
    """
    Sanitize string for logging to prevent log injection attacks.
    Removes newlines, carriage returns, and other control characters,
    then truncates to ``max_length``.

    Args:
        text: String to sanitize
        max_length: Longest string written to the log

    Returns:
        Sanitized string safe for logging
    """
    if not text:
        return text
    text = text.replace('\n', ' ').replace('\r', ' ').replace('\t', ' ')
    text = ''.join(char if ord(char) >= 32 else ' ' for char in text)
    if len(text) > max_length:
        text = text[:max_length] + "..."
    return text


def mask_secret(secret: str) -> str:
    """Show only the last 4 characters of a credential."""
    if not secret:
        return "<empty>"
    if len(secret) <= 4:
        return "***"
    return f"***{secret[-4:]}"


class MillisecondFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        if datefmt:
            s = datetime.fromtimestamp(record.created).strftime(datefmt)
            ms = int((record.created - int(record.created)) * 1000)
            return f"{s}.{ms:03d}"
        return super().formatTime(record, datefmt)


def setup_logger(name: str = "restore_chat", log_level: str = "INFO") -> logging.Logger:
    """
    Configure and return a logger with file and console handlers.

    Args:
        name: Logger name
        log_level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Prevent duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    formatter = MillisecondFormatter(
        fmt="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # ─── File Handler ───
    if os.getenv("LOG_TO_FILE", "true").lower() == "true":
        today = datetime.now().strftime("%Y-%m-%d")
        log_dir = Path(os.getenv("LOG_DIR", "logs")) / today
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / "chat.txt", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Log everything to file
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # ─── Console Handler ───
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = "restore_chat") -> logging.Logger:
    """
    Get the configured logger instance.
    If logger doesn't exist, create it with default settings.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        log_level = os.getenv("LOG_LEVEL", "INFO")
        setup_logger(name, log_level)
    return logger
