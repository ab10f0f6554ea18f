"""dockeagle - live resource usage tracking for Docker containers."""

__version__ = "0.1.0"
