from __future__ import annotations
from typing import Any, Dict, Iterator, Optional

# Maximum innerError nesting parsed from a response body.
MAX_INNER_ERROR_DEPTH = 16


class GraphRequestError(Exception):
    """Base class for every failure surfaced by the Graph client."""


class TransportError(GraphRequestError):
    """No response was received (connection refused, DNS, timeout...)."""


class AuthError(GraphRequestError):
    """Credential acquisition failed."""


class MalformedResponseError(GraphRequestError):
    """A response arrived but its body was not the JSON we expected."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ''):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        return f"{self.args[0]} (status={self.status}, body={self.body[:200]!r})"


class ApiError(GraphRequestError):
    """Well-formed error object returned by the remote API.

    ``inner_error`` links to a more specific cause, forming a finite chain.
    """

    def __init__(self, code: str, message: str = '', inner_error: Optional['ApiError'] = None,
                 status: Optional[int] = None):
        super().__init__(f"{code}: {message}" if message else code)
        self.code = code
        self.message = message
        self.inner_error = inner_error
        self.status = status

    @classmethod
    def from_payload(cls, payload: Any, status: Optional[int] = None, _depth: int = 0) -> 'ApiError':
        if not isinstance(payload, dict):
            return cls('UnknownError', str(payload) if payload is not None else '', status=status)
        inner = payload.get('innerError', payload.get('innererror'))
        inner_error = None
        if isinstance(inner, dict) and _depth < MAX_INNER_ERROR_DEPTH:
            inner_error = cls.from_payload(inner, _depth=_depth + 1)
        return cls(
            code=str(payload.get('code') or 'UnknownError'),
            message=str(payload.get('message') or ''),
            inner_error=inner_error,
            status=status,
        )

    def chain(self) -> Iterator['ApiError']:
        node: Optional[ApiError] = self
        depth = 0
        while node is not None and depth <= MAX_INNER_ERROR_DEPTH:
            yield node
            node = node.inner_error
            depth += 1

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        cursor = out
        for i, node in enumerate(self.chain()):
            if i:
                cursor['innerError'] = {}
                cursor = cursor['innerError']
            cursor['code'] = node.code
            cursor['message'] = node.message
        return out
