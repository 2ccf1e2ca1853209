from __future__ import annotations
import os
import json
import logging
from typing import Any, Dict, Optional
import requests
from .exceptions import ApiError, AuthError, MalformedResponseError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://graph.microsoft.com/v1.0'


class BaseClient:
    """Base HTTP client: one attempt per call, bearer auth and JSON envelope handling."""
    BASE_URL: str = DEFAULT_BASE_URL

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.timeout = timeout
        if base_url:
            self.BASE_URL = base_url

    @classmethod
    def from_env(cls, **kwargs: Any):
        base_url = os.getenv('GRAPH_BASE_URL', DEFAULT_BASE_URL)
        timeout_value = os.getenv('GRAPH_TIMEOUT')
        timeout = 30.0
        if timeout_value:
            try:
                timeout = float(timeout_value)
            except ValueError:
                raise ValueError(f"GRAPH_TIMEOUT must be a number, got {timeout_value!r}")
        return cls(base_url=base_url, timeout=timeout, **kwargs)

    def url_for(self, endpoint: str) -> str:
        if endpoint.startswith('http'):
            return endpoint
        return self.BASE_URL.rstrip('/') + '/' + endpoint.lstrip('/')

    @staticmethod
    def auth_headers(credential: str) -> Dict[str, str]:
        if not credential:
            raise AuthError('Empty credential')
        return {
            'Authorization': f"Bearer {credential}",
            'Accept': 'application/json',
        }

    def _send(self, method: str, endpoint: str, *, credential: str, params: Dict[str, Any] | None = None,
              headers: Dict[str, str] | None = None, data: bytes | None = None) -> requests.Response:
        url = self.url_for(endpoint)
        all_headers = self.auth_headers(credential)
        if headers:
            all_headers.update(headers)
        logger.info('%s %s', method.upper(), url)
        try:
            resp = self.session.request(method.upper(), url, params=params, headers=all_headers, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning('%s %s failed without a response: %s', method.upper(), url, e)
            raise TransportError(f"Network error: {e}") from e
        return resp

    @staticmethod
    def parse_json(resp: requests.Response, text: Optional[str] = None) -> Dict[str, Any]:
        """Decode a response body into a JSON object or raise MalformedResponseError."""
        body = resp.text if text is None else text
        try:
            data = json.loads(body)
        except ValueError as e:
            raise MalformedResponseError('Failed to decode JSON response', status=resp.status_code, body=resp.text) from e
        if not isinstance(data, dict):
            raise MalformedResponseError('Expected a JSON object', status=resp.status_code, body=resp.text)
        return data

    @staticmethod
    def raise_for_api_error(data: Dict[str, Any], status: Optional[int]) -> None:
        if 'error' in data:
            err = ApiError.from_payload(data['error'], status=status)
            logger.warning('API error %s (status=%s): %s', err.code, status, err.message)
            raise err

    @staticmethod
    def env(name: str, required: bool = True) -> Optional[str]:
        val = os.getenv(name)
        if required and (val is None or val.strip() == ''):
            raise ValueError(f"Missing required environment variable: {name}")
        return val
