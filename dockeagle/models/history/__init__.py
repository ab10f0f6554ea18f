"""Time series models."""

from dockeagle.models.history.history import History, Sample

__all__ = ["History", "Sample"]
