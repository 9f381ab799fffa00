"""
JSON export/import of transaction lists.

Monetary fields are written as decimal strings so a round trip through the
exported document reproduces every value exactly.
"""

import json
import logging
from typing import Any, Iterable, List

from pydantic import ValidationError

from cashflow_mcp.core.exceptions import DecodeError, InvalidTransactionError
from cashflow_mcp.core.validation import validate_payload
from cashflow_mcp.models.transaction import Transaction, TransactionCreate

logger = logging.getLogger(__name__)

# Fields that belong to the stored record, not to a create payload.
RECORD_ONLY_FIELDS = {"id", "category_id", "payment_method_id", "net_amount",
                      "created_at", "updated_at", "is_income"}


def encode_transaction(txn: Transaction) -> dict:
    """Serialize one transaction to a JSON-compatible dict."""
    data = txn.model_dump(mode="json")
    data.pop("is_income", None)
    return data


def export_transactions(transactions: Iterable[Transaction]) -> str:
    """
    Serialize transactions to a JSON array document.

    Args:
        transactions: Transactions in the order they should be written

    Returns:
        Pretty-printed JSON text
    """
    return json.dumps([encode_transaction(txn) for txn in transactions], indent=2)


def _load_array(text: str) -> List[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise DecodeError("Invalid file format: expected a JSON array of transactions")
    return data


def import_transactions(text: str) -> List[Transaction]:
    """
    Rebuild transaction records from an exported document.

    Raises:
        DecodeError: If the document is not an array or a record is invalid
    """
    records = _load_array(text)
    transactions: List[Transaction] = []
    for index, record in enumerate(records):
        try:
            transactions.append(Transaction.model_validate(record))
        except ValidationError as e:
            raise DecodeError(f"Invalid transaction at index {index}: {e}") from e
    return transactions


def import_payloads(text: str) -> List[TransactionCreate]:
    """
    Build create payloads from an exported document, for re-creating the
    records through a backend. Identifiers and derived fields are dropped.

    Raises:
        DecodeError: If the document is not an array or a record is invalid
    """
    payloads: List[TransactionCreate] = []
    for index, record in enumerate(_load_array(text)):
        if not isinstance(record, dict):
            raise DecodeError(f"Invalid transaction at index {index}: not an object")
        fields = {k: v for k, v in record.items() if k not in RECORD_ONLY_FIELDS}
        try:
            payloads.append(validate_payload(fields))
        except InvalidTransactionError as e:
            raise DecodeError(f"Invalid transaction at index {index}: {e}") from e
    logger.debug(f"Decoded {len(payloads)} transaction payloads")
    return payloads
