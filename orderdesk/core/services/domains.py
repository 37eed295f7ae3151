"""Per-domain labels used when the two order domains diverge."""

from dataclasses import dataclass

from orderdesk.core.entities.order import OrderDomain


@dataclass(frozen=True)
class DomainProfile:
    """Ledger labels for one order domain."""

    domain: OrderDomain
    display_name: str
    reference_prefix: str
    income_category: str
    return_category: str

    def reference(self, order_id: str) -> str:
        return f"{self.reference_prefix}{order_id}"


PROFILES: dict[OrderDomain, DomainProfile] = {
    OrderDomain.SALE: DomainProfile(
        domain=OrderDomain.SALE,
        display_name="Sales",
        reference_prefix="sale-",
        income_category="POS Sales",
        return_category="Sales Return",
    ),
    OrderDomain.SOCIAL_ORDER: DomainProfile(
        domain=OrderDomain.SOCIAL_ORDER,
        display_name="Order",
        reference_prefix="order-",
        income_category="Online Orders",
        return_category="Order Return",
    ),
}


def get_profile(domain: OrderDomain | str) -> DomainProfile:
    return PROFILES[OrderDomain(domain)]
