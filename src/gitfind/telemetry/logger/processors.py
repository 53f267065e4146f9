# src/gitfind/telemetry/logger/processors.py

"""
Custom structlog processors.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "repo": "📁",
    "spawn": "🚀",
    "fail": "🚫",
    "general": "➡️",
}


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji chosen by `emoji_key` or the level."""
    key: Any = event_dict.get("emoji_key")
    if key is None:
        key = logging._nameToLevel.get(method_name.upper(), "general")
    emoji = LOG_EMOJIS.get(key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.pop("emoji_key", None)
    return event_dict


# 🔼⚙️
