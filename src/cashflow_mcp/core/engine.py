"""
Transaction query engine.

Holds the application state, applies actions to it, derives the filtered,
sorted and paginated views plus statistics, and synchronizes with a
backend. Backend calls run in worker threads so the engine can be driven
from an event loop; only the newest refresh is allowed to update state.
"""

import asyncio
import logging
from typing import (
    Any,
    Callable,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
)

from cashflow_mcp.core import state as actions
from cashflow_mcp.core.codec import export_transactions, import_payloads
from cashflow_mcp.core.filters import filter_transactions
from cashflow_mcp.core.pagination import PageItem, page_numbers, total_pages
from cashflow_mcp.core.sorting import sort_transactions
from cashflow_mcp.core.state import AppState
from cashflow_mcp.core.stats import aggregate
from cashflow_mcp.core.validation import validate_payload
from cashflow_mcp.models.category import Category
from cashflow_mcp.models.payment_method import PaymentMethod
from cashflow_mcp.models.query import ListTransactionParams, PageSpec, StatsParams
from cashflow_mcp.models.stats import TransactionStats
from cashflow_mcp.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

Payload = Union[TransactionCreate, Mapping[str, Any]]


class TransactionBackend(Protocol):
    """Call surface the engine needs from a data source."""

    def list_transactions(self, params: ListTransactionParams) -> List[Transaction]: ...

    def count_transactions(self, params: ListTransactionParams) -> int: ...

    def get_stats(self, params: StatsParams) -> TransactionStats: ...

    def create_transaction(self, payload: TransactionCreate) -> Transaction: ...

    def update_transaction(
        self, transaction_id: str, payload: TransactionUpdate
    ) -> Transaction: ...

    def delete_transaction(self, transaction_id: str) -> None: ...

    def list_active_categories(self) -> List[Category]: ...

    def list_payment_methods(self) -> List[PaymentMethod]: ...


class TransactionQueryEngine:
    """
    Filtered, sorted and paginated access to transactions.

    State changes only through :meth:`dispatch`. Backend failures are
    reported through ``notify`` and ``state.error`` and never modify the
    loaded data; validation errors are raised before the backend is called.
    """

    def __init__(
        self,
        backend: TransactionBackend,
        state: Optional[AppState] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the engine.

        Args:
            backend: Data source implementing TransactionBackend
            state: Starting state (default: current month, nothing loaded)
            notify: Callback receiving user-facing failure messages
        """
        self.backend = backend
        self.state = state or AppState.initial()
        self._notify = notify
        self._request_token = 0

    def dispatch(self, action: Callable[..., AppState], *args: Any, **kwargs: Any) -> AppState:
        """Replace the state with ``action(state, *args, **kwargs)``."""
        self.state = action(self.state, *args, **kwargs)
        return self.state

    # Actions

    def set_filters(self, **changes: Any) -> AppState:
        return self.dispatch(actions.set_filters, changes)

    def reset_filters(self) -> AppState:
        return self.dispatch(actions.reset_filters)

    def toggle_filter(self, key: str, value: str) -> AppState:
        return self.dispatch(actions.toggle_filter, key, value)

    def sort_by(self, column: str) -> AppState:
        return self.dispatch(actions.sort_by, column)

    def set_page(self, page: int) -> AppState:
        return self.dispatch(actions.set_current_page, page)

    def set_page_size(self, page_size: int) -> AppState:
        return self.dispatch(actions.set_page_size, page_size)

    # Views

    def filtered_transactions(self) -> List[Transaction]:
        return filter_transactions(self.state.transactions, self.state.filters)

    def visible_transactions(self) -> List[Transaction]:
        """Loaded transactions after client-side filtering and the active sort."""
        return sort_transactions(self.filtered_transactions(), self.state.sort)

    def stats(self) -> TransactionStats:
        """Backend statistics when fetched, else aggregated from the loaded rows."""
        if self.state.stats is not None:
            return self.state.stats
        return aggregate(self.filtered_transactions())

    def page_spec(self) -> PageSpec:
        return self.state.page

    def total_pages(self) -> int:
        return total_pages(self.state.total_count, self.state.page_size)

    def page_numbers(self) -> List[PageItem]:
        return page_numbers(self.state.current_page, self.total_pages())

    def list_params(self) -> ListTransactionParams:
        page = self.state.page
        return ListTransactionParams(
            **self.state.filters.model_dump(), limit=page.page_size, offset=page.offset
        )

    def stats_params(self) -> StatsParams:
        return StatsParams(
            from_date=self.state.filters.from_date, to_date=self.state.filters.to_date
        )

    # Backend synchronization

    def _report_failure(self, action: str, error: Exception) -> None:
        message = f"Failed to {action}: {error}"
        logger.error(message)
        self.dispatch(actions.set_error, message)
        if self._notify is not None:
            self._notify(message)

    async def refresh(self) -> bool:
        """
        Reload the current page, total count, statistics and reference data.

        Returns:
            True if the results were applied; False if the refresh failed or
            was superseded by a newer one
        """
        self._request_token += 1
        token = self._request_token
        list_params = self.list_params()
        stats_params = self.stats_params()
        self.dispatch(actions.set_loading, True)

        try:
            transactions = await asyncio.to_thread(self.backend.list_transactions, list_params)
            total = await asyncio.to_thread(self.backend.count_transactions, list_params)
            stats = await asyncio.to_thread(self.backend.get_stats, stats_params)
            categories = await asyncio.to_thread(self.backend.list_active_categories)
            methods = await asyncio.to_thread(self.backend.list_payment_methods)
        except Exception as e:
            if token == self._request_token:
                self.dispatch(actions.set_loading, False)
                self._report_failure("load transactions", e)
            return False

        if token != self._request_token:
            logger.debug(f"Discarding stale refresh {token} (latest is {self._request_token})")
            return False

        self.dispatch(actions.set_transactions, transactions)
        self.dispatch(actions.set_total_count, total)
        self.dispatch(actions.set_stats, stats)
        self.dispatch(actions.set_categories, categories)
        self.dispatch(actions.set_payment_methods, methods)
        self.dispatch(actions.set_error, None)
        self.dispatch(actions.set_loading, False)
        return True

    async def create_transaction(self, data: Payload) -> Optional[Transaction]:
        """
        Validate and create a transaction, then refresh.

        Raises:
            InvalidTransactionError: If the payload is invalid (backend untouched)
        """
        payload = validate_payload(data, TransactionCreate)
        try:
            txn = await asyncio.to_thread(self.backend.create_transaction, payload)
        except Exception as e:
            self._report_failure("save transaction", e)
            return None
        for tag in payload.tags:
            self.dispatch(actions.add_tag_suggestion, tag)
        await self.refresh()
        return txn

    async def update_transaction(
        self, transaction_id: str, data: Payload
    ) -> Optional[Transaction]:
        """
        Validate and replace a transaction, then refresh.

        Raises:
            InvalidTransactionError: If the payload is invalid (backend untouched)
        """
        payload = validate_payload(data, TransactionUpdate)
        try:
            txn = await asyncio.to_thread(
                self.backend.update_transaction, transaction_id, payload
            )
        except Exception as e:
            self._report_failure("save transaction", e)
            return None
        for tag in payload.tags:
            self.dispatch(actions.add_tag_suggestion, tag)
        await self.refresh()
        return txn

    async def delete_transaction(self, transaction_id: str) -> bool:
        try:
            await asyncio.to_thread(self.backend.delete_transaction, transaction_id)
        except Exception as e:
            self._report_failure("delete transaction", e)
            return False
        await self.refresh()
        return True

    # Export / import

    def export_json(self) -> str:
        """Serialize the current filtered and sorted list."""
        return export_transactions(self.visible_transactions())

    async def import_json(self, text: str) -> int:
        """
        Create every transaction in an exported document, then refresh.

        Returns:
            Number of transactions created before any backend failure

        Raises:
            DecodeError: If the document cannot be decoded (nothing is created)
        """
        payloads = import_payloads(text)
        created = 0
        for payload in payloads:
            try:
                await asyncio.to_thread(self.backend.create_transaction, payload)
            except Exception as e:
                self._report_failure("import transactions", e)
                break
            created += 1
        logger.info(f"Imported {created} of {len(payloads)} transactions")
        await self.refresh()
        return created
