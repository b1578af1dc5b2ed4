"""Integration shortcuts."""

from .date_calculation_client import (
    ComputationUnavailable,
    DateCalculationClient,
    build_date_calculation_client,
)

__all__ = [
    "ComputationUnavailable",
    "DateCalculationClient",
    "build_date_calculation_client",
]
