"""Abstract interface for the downstream ledger."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.ledger import ExchangeDelta, ReturnDelta


class ILedgerNotifier(ABC):
    """Receives financial deltas after a reconciliation has been committed."""

    @abstractmethod
    async def record_exchange(self, delta: ExchangeDelta) -> None:
        pass

    @abstractmethod
    async def record_return(self, delta: ReturnDelta) -> None:
        pass

    @abstractmethod
    async def notify_accounting_stale(self, reason: str = "") -> None:
        """Flag derived accounting figures for refresh."""
        pass
