"""Core workload models."""

from dockeagle.models.core.workload_info import (
    RegistrySummary,
    WorkloadData,
    WorkloadRecord,
    derive_alternative_name,
)

__all__ = [
    "RegistrySummary",
    "WorkloadData",
    "WorkloadRecord",
    "derive_alternative_name",
]
