"""Utility functions and classes for dockeagle."""

from dockeagle.utils.event_bus import EventBus
from dockeagle.utils.logging_setup import configure_logging
from dockeagle.utils.resource_parser import format_bytes, format_percent
from dockeagle.utils.timestamps import parse_datetime, parse_timestamp

__all__ = [
    # Notifications
    "EventBus",
    # Logging
    "configure_logging",
    # Formatting
    "format_bytes",
    "format_percent",
    # Parsing
    "parse_datetime",
    "parse_timestamp",
]
