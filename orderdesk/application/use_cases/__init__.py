"""Application use cases."""

from orderdesk.application.use_cases.process_exchange import (
    ProcessExchangeResult,
    ProcessExchangeUseCase,
)
from orderdesk.application.use_cases.process_return import (
    ProcessReturnResult,
    ProcessReturnUseCase,
)
from orderdesk.application.use_cases.reconciliation import (
    ReconciliationUseCase,
    order_to_response,
)

__all__ = [
    "ProcessExchangeUseCase",
    "ProcessExchangeResult",
    "ProcessReturnUseCase",
    "ProcessReturnResult",
    "ReconciliationUseCase",
    "order_to_response",
]
