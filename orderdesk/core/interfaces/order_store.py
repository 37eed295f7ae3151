"""Abstract interface for order storage."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.order import Order, OrderDomain


class IOrderStore(ABC):
    """Interface for order persistence, scoped by order domain."""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Create a new order with its lines."""
        pass

    @abstractmethod
    async def get_order(self, domain: OrderDomain, order_id: str) -> Order | None:
        """Get an order with lines and history, or None."""
        pass

    @abstractmethod
    async def list_orders(
        self, domain: OrderDomain, limit: int = 100, offset: int = 0
    ) -> list[Order]:
        """List orders of one domain, newest first."""
        pass
