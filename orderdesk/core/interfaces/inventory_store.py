"""Abstract interface for inventory unit storage."""

from abc import ABC, abstractmethod

from orderdesk.core.entities.inventory import InventoryUnit, UnitStatus


class IInventoryStore(ABC):
    """Interface for the shared inventory unit pool."""

    @abstractmethod
    async def add_units(self, units: list[InventoryUnit]) -> list[InventoryUnit]:
        """Admit new units. Returns them with their admission sequence set."""
        pass

    @abstractmethod
    async def get_units(self, codes: list[str]) -> list[InventoryUnit]:
        """Get units by code, in admission order. Unknown codes are skipped."""
        pass

    @abstractmethod
    async def list_available(
        self,
        product_id: str,
        limit: int | None = None,
        order: str = "insertion",
    ) -> list[InventoryUnit]:
        """List available units of a product in allocation order."""
        pass

    @abstractmethod
    async def list_units(
        self,
        product_id: str | None = None,
        status: UnitStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryUnit]:
        """List units with optional filters."""
        pass

    @abstractmethod
    async def count_by_status(self, product_id: str) -> dict[UnitStatus, int]:
        """Count a product's units per status."""
        pass
