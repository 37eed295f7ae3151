"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class RemovedProductRequest(BaseModel):
    """A line to shrink: removal on an exchange, or a returned product."""

    product_id: str = Field(
        ...,
        min_length=1,
        description="Line ID on the order (falls back to the line's product ID)",
    )
    quantity: int = Field(..., gt=0, description="Units to take off the line")


class ReplacementProductRequest(BaseModel):
    """A product to add to the order on an exchange."""

    id: str = Field(..., min_length=1, description="Product ID")
    name: str = Field(default="", description="Product name for a new line")
    price: Decimal = Field(..., ge=0, description="Unit price for a new line")
    size: str | None = Field(default=None, description="Size label")
    quantity: int = Field(..., gt=0, description="Units to allocate")


class ExchangeRequest(BaseModel):
    """Request to exchange products on a completed order."""

    removed_products: list[RemovedProductRequest] = Field(
        default_factory=list, description="Lines and quantities handed back"
    )
    replacement_products: list[ReplacementProductRequest] = Field(
        default_factory=list, description="Products given in exchange"
    )


class ReturnRequest(BaseModel):
    """Request to return products from a completed order."""

    returned_products: list[RemovedProductRequest] = Field(
        ..., description="Lines and quantities returned"
    )
