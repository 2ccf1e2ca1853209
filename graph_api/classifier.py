from __future__ import annotations
from enum import Enum
from typing import Any, Iterator
from .exceptions import MAX_INNER_ERROR_DEPTH

ACCOUNT_TYPE_MISMATCH_CODE = 'RequestBroker-ParseUri'
TRANSIENT_INNER_CODE = 'ErrorInternalServerTransientError'


class ErrorKind(str, Enum):
    ACCOUNT_TYPE_MISMATCH = 'account_type_mismatch'
    TRANSIENT = 'transient'
    UNKNOWN = 'unknown'


def _codes(api_error: Any) -> Iterator[str]:
    node = api_error
    for _ in range(MAX_INNER_ERROR_DEPTH + 1):
        if node is None:
            return
        code = getattr(node, 'code', None)
        if isinstance(code, str):
            yield code
        node = getattr(node, 'inner_error', None)


def classify(api_error: Any) -> ErrorKind:
    """Map an ApiError (or anything else) to an ErrorKind. Never raises."""
    try:
        codes = list(_codes(api_error))
    except Exception:
        return ErrorKind.UNKNOWN
    if ACCOUNT_TYPE_MISMATCH_CODE in codes:
        return ErrorKind.ACCOUNT_TYPE_MISMATCH
    if TRANSIENT_INNER_CODE in codes:
        return ErrorKind.TRANSIENT
    return ErrorKind.UNKNOWN


def describe(api_error: Any, subject: str = 'the user') -> str:
    """User-facing message for a failed mutation against ``subject``."""
    kind = classify(api_error)
    if kind is ErrorKind.ACCOUNT_TYPE_MISMATCH:
        return (f"Error creating an event for {subject}. Most likely due to this user having a "
                f"Microsoft account instead of an Office 365 account.")
    if kind is ErrorKind.TRANSIENT:
        return (f"Error creating an event for {subject}. The account has probably not been "
                f"migrated to support this flow yet; try again later or use a newer account.")
    message = getattr(api_error, 'message', None) or str(api_error)
    return f"Error creating an event for {subject}. {message}"
