"""
Helper Utility Module

This module provides various helper functions used throughout the Feed Sync Client.
"""

import re
from typing import Any, Dict, Optional

_WHITESPACE = re.compile(r'\s+')


def safe_get(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Safely get a value from a nested dictionary.

    Args:
        data: The dictionary to search
        *keys: The keys to follow
        default: Default value if key doesn't exist

    Returns:
        The value at the specified keys or the default value
    """
    for key in keys:
        try:
            data = data[key]
        except (KeyError, TypeError, IndexError):
            return default
    return default if data is None else data


def sanitize_handle(display_name: Optional[str]) -> str:
    """
    Derive a handle from a display name: all whitespace removed, lower-cased.

    Args:
        display_name: The display name, possibly None

    Returns:
        str: The derived handle, empty if nothing usable was given
    """
    if not isinstance(display_name, str):
        return ""
    return _WHITESPACE.sub('', display_name).lower()


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated
