"""
Pre-submission validation of transaction payloads.
"""

from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import ValidationError

from cashflow_mcp.core.exceptions import InvalidTransactionError
from cashflow_mcp.models.transaction import TransactionCreate, TransactionUpdate

P = TypeVar("P", TransactionCreate, TransactionUpdate)


def validate_payload(
    data: Union[Mapping[str, Any], TransactionCreate], model: Type[P] = TransactionCreate
) -> P:
    """
    Validate a raw payload before it is sent to the backend.

    Args:
        data: Form data or an already-built payload
        model: TransactionCreate or TransactionUpdate

    Returns:
        The validated payload

    Raises:
        InvalidTransactionError: For the first invalid field
    """
    if isinstance(data, model):
        return data
    if isinstance(data, TransactionCreate):
        data = data.model_dump(exclude={"net_amount"})
    try:
        return model.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "payload"
        message = error["msg"].removeprefix("Value error, ")
        raise InvalidTransactionError(field, message) from e
