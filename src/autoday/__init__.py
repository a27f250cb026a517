"""AutoDay - single-day task scheduler."""

__version__ = "0.1.0"
