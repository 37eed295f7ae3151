"""Core domain services."""

from orderdesk.core.services.allocation import AllocationEngine, InventoryPool
from orderdesk.core.services.domains import DomainProfile, get_profile
from orderdesk.core.services.postings import exchange_posting, return_posting
from orderdesk.core.services.recalculation import (
    Recalculation,
    RecalculationEngine,
    ReturnSettlement,
    classify,
    round_half_away_from_zero,
)

__all__ = [
    "AllocationEngine",
    "InventoryPool",
    "DomainProfile",
    "get_profile",
    "exchange_posting",
    "return_posting",
    "Recalculation",
    "RecalculationEngine",
    "ReturnSettlement",
    "classify",
    "round_half_away_from_zero",
]
