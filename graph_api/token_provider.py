"""Bearer credential sources.

The client never performs an OAuth exchange itself; it only asks a provider
for a token right before each operation. Providers do not cache tokens:
they are short-lived and callers re-fetch per operation.
"""
from __future__ import annotations
import os
import logging
from typing import Callable
from .exceptions import AuthError

logger = logging.getLogger(__name__)


class TokenProvider:
    def get_token(self) -> str:
        raise NotImplementedError

    def __call__(self) -> str:
        return self.get_token()


class StaticTokenProvider(TokenProvider):
    def __init__(self, token: str):
        if not token:
            raise AuthError('Static token is empty')
        self._token = token

    def get_token(self) -> str:
        return self._token


class CallableTokenProvider(TokenProvider):
    """Wraps the external auth collaborator (any zero-argument callable)."""

    def __init__(self, fetch: Callable[[], str]):
        self._fetch = fetch

    def get_token(self) -> str:
        try:
            token = self._fetch()
        except AuthError:
            raise
        except Exception as e:
            logger.warning('Token acquisition failed: %s', e)
            raise AuthError(f"Token acquisition failed: {e}") from e
        if not isinstance(token, str) or not token:
            raise AuthError('Identity provider returned an empty token')
        return token


class EnvTokenProvider(TokenProvider):
    def __init__(self, var: str = 'GRAPH_ACCESS_TOKEN'):
        self.var = var

    def get_token(self) -> str:
        token = os.getenv(self.var)
        if token is None or token.strip() == '':
            raise AuthError(f"Missing required environment variable: {self.var}")
        return token.strip()
