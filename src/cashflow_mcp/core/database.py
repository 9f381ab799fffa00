"""
Database abstraction layer for Cashflow data.

Stores transactions, categories and payment methods in a single JSON
document and provides filtered access with proper error handling. This is
the local implementation of the backend call surface the query engine
talks to.
"""

import json
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from cashflow_mcp.core.exceptions import (
    DatabaseNotFoundError,
    DecodeError,
    DependencyError,
    NotFoundError,
)
from cashflow_mcp.core.filters import filter_transactions
from cashflow_mcp.core.stats import aggregate, summarize_by_category
from cashflow_mcp.core.validation import validate_payload
from cashflow_mcp.models.category import Category
from cashflow_mcp.models.payment_method import PaymentMethod
from cashflow_mcp.models.query import FilterSpec, ListTransactionParams, StatsParams
from cashflow_mcp.models.stats import CategorySummary, TransactionStats
from cashflow_mcp.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)
from cashflow_mcp.utils.files import write_json_atomic

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".cashflow" / "cashflow.json"

DEFAULT_CREATED_BY = "default"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


class CashflowDatabase:
    """
    Abstraction layer for querying and editing Cashflow data.

    The document is loaded lazily on first access and written back in full
    after every successful change.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database.

        Args:
            db_path: Path to the JSON database file.
                    If None, uses ~/.cashflow/cashflow.json.
        """
        self.db_path = Path(db_path) if db_path is not None else DEFAULT_DB_PATH
        self._transactions: Optional[List[Transaction]] = None
        self._categories: Optional[List[Category]] = None
        self._payment_methods: Optional[List[PaymentMethod]] = None

    def is_available(self) -> bool:
        """Check if database exists and is accessible."""
        return self.db_path.is_file()

    @classmethod
    def create(cls, db_path: Path) -> "CashflowDatabase":
        """Create an empty database file at ``db_path``."""
        db = cls(db_path)
        db._transactions, db._categories, db._payment_methods = [], [], []
        db._save()
        return db

    # Storage

    def _load(self) -> None:
        if self._transactions is not None:
            return
        if not self.is_available():
            raise DatabaseNotFoundError(f"Database not found: {self.db_path}")

        try:
            document = json.loads(self.db_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise DecodeError(f"Cannot read database {self.db_path}: {e}") from e
        if not isinstance(document, dict):
            raise DecodeError(f"Invalid database document in {self.db_path}")

        try:
            self._transactions = [
                Transaction.model_validate(item) for item in document.get("transactions", [])
            ]
            self._categories = [
                Category.model_validate(item) for item in document.get("categories", [])
            ]
            self._payment_methods = [
                PaymentMethod.model_validate(item)
                for item in document.get("payment_methods", [])
            ]
        except ValidationError as e:
            self._transactions = self._categories = self._payment_methods = None
            raise DecodeError(f"Invalid record in {self.db_path}: {e}") from e

        logger.debug(
            f"Loaded {len(self._transactions)} transactions, "
            f"{len(self._categories)} categories, "
            f"{len(self._payment_methods)} payment methods from {self.db_path}"
        )

    def _save(self) -> None:
        document = {
            "transactions": [txn.model_dump(mode="json", exclude={"is_income"})
                             for txn in self._transactions or []],
            "categories": [cat.model_dump(mode="json") for cat in self._categories or []],
            "payment_methods": [
                pm.model_dump(mode="json") for pm in self._payment_methods or []
            ],
        }
        write_json_atomic(self.db_path, document)

    def _commit(
        self,
        transactions: Optional[List[Transaction]] = None,
        categories: Optional[List[Category]] = None,
        payment_methods: Optional[List[PaymentMethod]] = None,
    ) -> None:
        """
        Swap in new record lists and write the document.

        If the write fails the previous lists are restored, so memory never
        runs ahead of the file.
        """
        previous = (self._transactions, self._categories, self._payment_methods)
        if transactions is not None:
            self._transactions = transactions
        if categories is not None:
            self._categories = categories
        if payment_methods is not None:
            self._payment_methods = payment_methods
        try:
            self._save()
        except Exception:
            self._transactions, self._categories, self._payment_methods = previous
            raise

    @property
    def transactions(self) -> List[Transaction]:
        self._load()
        assert self._transactions is not None
        return self._transactions

    @property
    def categories(self) -> List[Category]:
        self._load()
        assert self._categories is not None
        return self._categories

    @property
    def payment_methods(self) -> List[PaymentMethod]:
        self._load()
        assert self._payment_methods is not None
        return self._payment_methods

    # Transactions

    def _newest_first(self, transactions: List[Transaction]) -> List[Transaction]:
        return sorted(
            transactions, key=lambda txn: (txn.transaction_date, txn.created_at), reverse=True
        )

    def query_transactions(self, filters: Optional[FilterSpec] = None) -> List[Transaction]:
        """Every transaction matching ``filters``, newest first."""
        return self._newest_first(filter_transactions(self.transactions, filters or FilterSpec()))

    def list_transactions(
        self, params: Optional[ListTransactionParams] = None
    ) -> List[Transaction]:
        """
        Get one page of transactions matching ``params``.

        Args:
            params: Filters plus limit/offset (defaults: no filters, 50 rows)

        Returns:
            Matching transactions, newest first
        """
        params = params or ListTransactionParams()
        result = self.query_transactions(params)
        return result[params.offset : params.offset + params.limit]

    def count_transactions(self, params: Optional[ListTransactionParams] = None) -> int:
        """Count every transaction matching the filters, ignoring limit/offset."""
        params = params or ListTransactionParams()
        return len(filter_transactions(self.transactions, params))

    def get_transaction(self, transaction_id: str) -> Transaction:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        raise NotFoundError("transaction not found")

    def get_recent_transactions(self, limit: int = 10) -> List[Transaction]:
        return self._newest_first(self.transactions)[:limit]

    def search_transactions(
        self, query: str, limit: int = 50, offset: int = 0
    ) -> List[Transaction]:
        """
        Free-text search over description, customer/vendor, reference and
        invoice numbers (case-insensitive).
        """
        return self.list_transactions(
            ListTransactionParams(search=query, limit=limit, offset=offset)
        )

    def _resolve(self, value: str, records: List[Any]) -> Any:
        if not value:
            return None
        for record in records:
            if value in (record.id, record.name):
                return record
        return None

    def _build_record(
        self,
        transaction_id: str,
        payload: TransactionCreate,
        created_by: str,
        created_at: str,
        parent_transaction_id: str,
    ) -> Transaction:
        data = payload.model_dump(exclude={"net_amount", "created_by", "parent_transaction_id"})

        category = self._resolve(payload.category, self.categories)
        data["category"] = category.name if category else payload.category
        data["category_id"] = category.id if category else ""

        method = self._resolve(payload.payment_method, self.payment_methods)
        data["payment_method"] = method.name if method else payload.payment_method
        data["payment_method_id"] = method.id if method else ""

        return Transaction(
            **data,
            id=transaction_id,
            net_amount=payload.net_amount,
            parent_transaction_id=parent_transaction_id,
            created_by=created_by,
            created_at=created_at,
            updated_at=_now(),
        )

    def create_transaction(
        self, payload: Union[TransactionCreate, Dict[str, Any]]
    ) -> Transaction:
        """
        Create and persist a new transaction.

        Raises:
            InvalidTransactionError: If the payload fails validation
        """
        payload = validate_payload(payload, TransactionCreate)
        txn = self._build_record(
            _new_id(),
            payload,
            created_by=payload.created_by or DEFAULT_CREATED_BY,
            created_at=_now(),
            parent_transaction_id=payload.parent_transaction_id,
        )
        self._commit(transactions=[*self.transactions, txn])
        logger.info(f"Created transaction {txn.id}")
        return txn

    def update_transaction(
        self, transaction_id: str, payload: Union[TransactionUpdate, Dict[str, Any]]
    ) -> Transaction:
        """
        Replace an existing transaction with the payload's values.

        Raises:
            NotFoundError: If the transaction does not exist
            InvalidTransactionError: If the payload fails validation
        """
        payload = validate_payload(payload, TransactionUpdate)
        existing = self.get_transaction(transaction_id)
        txn = self._build_record(
            existing.id,
            payload,
            created_by=existing.created_by,
            created_at=existing.created_at,
            parent_transaction_id=existing.parent_transaction_id,
        )
        self._commit(transactions=[txn if t is existing else t for t in self.transactions])
        logger.info(f"Updated transaction {txn.id}")
        return txn

    def delete_transaction(self, transaction_id: str) -> None:
        existing = self.get_transaction(transaction_id)
        self._commit(transactions=[t for t in self.transactions if t is not existing])
        logger.info(f"Deleted transaction {transaction_id}")

    # Aggregates

    def get_stats(self, params: Optional[StatsParams] = None) -> TransactionStats:
        """Statistics over every transaction in the date range."""
        params = params or StatsParams()
        in_range = filter_transactions(
            self.transactions,
            ListTransactionParams(from_date=params.from_date, to_date=params.to_date),
        )
        return aggregate(in_range)

    def get_transactions_by_category(
        self, params: Optional[StatsParams] = None
    ) -> List[CategorySummary]:
        params = params or StatsParams()
        in_range = filter_transactions(
            self.transactions,
            ListTransactionParams(from_date=params.from_date, to_date=params.to_date),
        )
        return summarize_by_category(in_range)

    def _suggestions(
        self,
        value_of: Callable[[Transaction], str],
        transaction_type: str,
        search: str,
        limit: int,
    ) -> List[Dict[str, Any]]:
        if limit <= 0:
            limit = 10
        counts: Counter = Counter()
        for txn in self.transactions:
            value = value_of(txn)
            if not value:
                continue
            if transaction_type and txn.type != transaction_type:
                continue
            if search and search.lower() not in value.lower():
                continue
            counts[value] += 1
        return [
            {"value": value, "frequency": frequency}
            for value, frequency in counts.most_common(limit)
        ]

    def get_description_suggestions(
        self, transaction_type: str = "", search: str = "", limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Previously used descriptions, most frequent first."""
        return self._suggestions(lambda t: t.description, transaction_type, search, limit)

    def get_customer_vendor_suggestions(
        self, transaction_type: str = "", search: str = "", limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Previously used customers/vendors, most frequent first."""
        return self._suggestions(lambda t: t.customer_vendor, transaction_type, search, limit)

    # Categories

    def list_categories(self) -> List[Category]:
        return sorted(self.categories, key=lambda c: c.name.lower())

    def list_active_categories(self) -> List[Category]:
        return [c for c in self.list_categories() if c.is_active]

    def list_categories_by_type(self, category_type: str) -> List[Category]:
        """Categories usable for ``category_type``; "both" categories always qualify."""
        return [c for c in self.list_categories() if c.type in (category_type, "both")]

    def get_category(self, category_id: str) -> Category:
        for category in self.categories:
            if category.id == category_id:
                return category
        raise NotFoundError("category not found")

    def create_category(
        self,
        name: str,
        type: str,
        color: str = "",
        icon: str = "",
        parent_id: str = "",
        is_active: bool = True,
    ) -> Category:
        now = _now()
        category = Category(
            id=_new_id(), name=name, type=type, color=color, icon=icon,
            parent_id=parent_id, is_active=is_active, created_at=now, updated_at=now,
        )
        self._commit(categories=[*self.categories, category])
        return category

    def update_category(self, category_id: str, **changes: Any) -> Category:
        existing = self.get_category(category_id)
        updated = Category.model_validate(
            {**existing.model_dump(), **changes, "id": existing.id, "updated_at": _now()}
        )
        self._commit(categories=[updated if c is existing else c for c in self.categories])
        return updated

    def check_category_dependencies(self, category_id: str) -> int:
        """Number of transactions referencing the category."""
        return sum(1 for txn in self.transactions if txn.category_id == category_id)

    def delete_category(self, category_id: str) -> None:
        """
        Delete a category that no transaction references.

        Raises:
            NotFoundError: If the category does not exist
            DependencyError: If transactions still use it
        """
        existing = self.get_category(category_id)
        count = self.check_category_dependencies(category_id)
        if count > 0:
            raise DependencyError("category", count)
        self._commit(categories=[c for c in self.categories if c is not existing])

    def deactivate_category(self, category_id: str) -> Category:
        return self.update_category(category_id, is_active=False)

    # Payment methods

    def list_payment_methods(self) -> List[PaymentMethod]:
        return sorted(self.payment_methods, key=lambda m: m.name.lower())

    def list_active_payment_methods(self) -> List[PaymentMethod]:
        return [m for m in self.list_payment_methods() if m.is_active]

    def get_payment_method(self, method_id: str) -> PaymentMethod:
        for method in self.payment_methods:
            if method.id == method_id:
                return method
        raise NotFoundError("payment method not found")

    def create_payment_method(
        self, name: str, description: str = "", is_active: bool = True
    ) -> PaymentMethod:
        now = _now()
        method = PaymentMethod(
            id=_new_id(), name=name, description=description, is_active=is_active,
            created_at=now, updated_at=now,
        )
        self._commit(payment_methods=[*self.payment_methods, method])
        return method

    def update_payment_method(self, method_id: str, **changes: Any) -> PaymentMethod:
        existing = self.get_payment_method(method_id)
        updated = PaymentMethod.model_validate(
            {**existing.model_dump(), **changes, "id": existing.id, "updated_at": _now()}
        )
        self._commit(
            payment_methods=[updated if m is existing else m for m in self.payment_methods]
        )
        return updated

    def check_payment_method_dependencies(self, method_id: str) -> int:
        """Number of transactions referencing the payment method."""
        return sum(1 for txn in self.transactions if txn.payment_method_id == method_id)

    def delete_payment_method(self, method_id: str) -> None:
        """
        Delete a payment method that no transaction references.

        Raises:
            NotFoundError: If the payment method does not exist
            DependencyError: If transactions still use it
        """
        existing = self.get_payment_method(method_id)
        count = self.check_payment_method_dependencies(method_id)
        if count > 0:
            raise DependencyError("payment method", count)
        self._commit(
            payment_methods=[m for m in self.payment_methods if m is not existing]
        )

    def deactivate_payment_method(self, method_id: str) -> PaymentMethod:
        return self.update_payment_method(method_id, is_active=False)
