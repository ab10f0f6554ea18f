"""Data models for dockeagle."""
