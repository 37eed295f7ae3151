"""Abstract interface for the reconciliation commit."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.inventory import UnitTransition
from orderdesk.core.entities.order import Order


class IReconciliationStore(ABC):
    """Writes an order and its inventory transitions as one unit of work."""

    @abstractmethod
    async def commit(
        self,
        order: Order,
        expected_version: int,
        transitions: list[UnitTransition],
    ) -> Order:
        """Persist the order and unit transitions atomically.

        Raises ConcurrentModificationError if the stored order version is not
        ``expected_version`` or any unit is no longer in its expected state.
        Nothing is written in that case.
        """
        pass
