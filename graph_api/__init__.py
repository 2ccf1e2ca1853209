"""Thin client for the Microsoft Graph REST API (tenant users, calendar events, list items).

Usage example:
    from graph_api import EnvTokenProvider, ResourceFetcher, ResourceMutator, EventPayload
    token = EnvTokenProvider().get_token()
    users = ResourceFetcher.from_env().list_users(token)
    ResourceMutator.from_env().create_event(token, users[0].id, EventPayload.tomorrow('Sync'))
"""
from .exceptions import GraphRequestError, TransportError, MalformedResponseError, ApiError, AuthError  # noqa: F401
from .token_provider import TokenProvider, StaticTokenProvider, CallableTokenProvider, EnvTokenProvider  # noqa: F401
from .models import UserRecord, EventPayload  # noqa: F401
from .fetcher import ResourceFetcher  # noqa: F401
from .mutator import ResourceMutator  # noqa: F401
from .classifier import ErrorKind, classify, describe  # noqa: F401
from .batch import BatchResult, create_for_each  # noqa: F401
