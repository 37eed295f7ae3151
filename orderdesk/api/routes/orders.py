"""Order endpoints: exchange, return and lookup per order domain."""

from fastapi import APIRouter, Depends, Query

from orderdesk.api.dependencies import (
    get_orders,
    get_process_exchange_use_case,
    get_process_return_use_case,
)
from orderdesk.application.dto.requests import ExchangeRequest, ReturnRequest
from orderdesk.application.dto.responses import (
    ErrorResponse,
    ExchangeResponse,
    OrderListResponse,
    OrderResponse,
    ReturnResponse,
)
from orderdesk.application.use_cases import (
    ProcessExchangeUseCase,
    ProcessReturnUseCase,
    order_to_response,
)
from orderdesk.core.entities.order import OrderDomain
from orderdesk.core.exceptions import OrderNotFoundError
from orderdesk.infrastructure.storage.sqlite import SQLiteOrderStore

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post(
    "/{domain}/{order_id}/exchange",
    response_model=ExchangeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_exchange(
    domain: OrderDomain,
    order_id: str,
    request: ExchangeRequest,
    use_case: ProcessExchangeUseCase = Depends(get_process_exchange_use_case),
) -> ExchangeResponse:
    """Exchange products on a completed order, recomputing totals and stock."""
    result = await use_case.execute(domain, order_id, request)
    return use_case.to_response(result)


@router.post(
    "/{domain}/{order_id}/return",
    response_model=ReturnResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def process_return(
    domain: OrderDomain,
    order_id: str,
    request: ReturnRequest,
    use_case: ProcessReturnUseCase = Depends(get_process_return_use_case),
) -> ReturnResponse:
    """Return products from a completed order, settling refund or balance due."""
    result = await use_case.execute(domain, order_id, request)
    return use_case.to_response(result)


@router.get("/{domain}", response_model=OrderListResponse)
async def list_orders(
    domain: OrderDomain,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteOrderStore = Depends(get_orders),
) -> OrderListResponse:
    orders = await store.list_orders(domain, limit=limit, offset=offset)
    return OrderListResponse(
        orders=[order_to_response(o) for o in orders],
        total=len(orders),
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{domain}/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_order(
    domain: OrderDomain,
    order_id: str,
    store: SQLiteOrderStore = Depends(get_orders),
) -> OrderResponse:
    order = await store.get_order(domain, order_id)
    if order is None:
        raise OrderNotFoundError(domain.value, order_id)
    return order_to_response(order)
