"""Workload registry."""

from dockeagle.controllers.registry.registry import WorkloadRegistry

__all__ = ["WorkloadRegistry"]
