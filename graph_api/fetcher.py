from __future__ import annotations
import logging
from urllib.parse import urlsplit
from typing import Any, Dict, Iterable, List, Optional
from .base_client import BaseClient
from .exceptions import MalformedResponseError
from .models import UserRecord

logger = logging.getLogger(__name__)

NEXT_LINK = '@odata.nextLink'


class ResourceFetcher(BaseClient):
    """Authenticated GETs against collection endpoints returning ``{"value": [...]}``."""

    def _same_origin(self, url: str) -> bool:
        link = urlsplit(self.url_for(url))
        base = urlsplit(self.BASE_URL)
        return (link.scheme, link.netloc.lower()) == (base.scheme, base.netloc.lower())

    def _get_page(self, credential: str, endpoint: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        resp = self._send('GET', endpoint, credential=credential, params=params)
        data = self.parse_json(resp)
        # A non-2xx with a proper error object is the API's normal failure path.
        self.raise_for_api_error(data, resp.status_code)
        if not isinstance(data.get('value'), list):
            raise MalformedResponseError("Response has neither 'value' nor 'error'", status=resp.status_code, body=resp.text)
        return data

    def list_resources(self, credential: str, endpoint: str, select: Optional[Iterable[str]] = None,
                       max_pages: int = 1) -> List[Dict[str, Any]]:
        params: Optional[Dict[str, Any]] = None
        if isinstance(select, str):
            select = [f.strip() for f in select.split(',') if f.strip()]
        if select:
            params = {'$select': ','.join(select)}
        items: List[Dict[str, Any]] = []
        next_endpoint: Optional[str] = endpoint
        pages_fetched = 0
        while next_endpoint and pages_fetched < max(1, max_pages):
            if pages_fetched and not self._same_origin(next_endpoint):
                # Never send the bearer token to a host other than BASE_URL.
                raise MalformedResponseError(f"Refusing to follow nextLink to another host: {next_endpoint}", body=str(next_endpoint))
            data = self._get_page(credential, next_endpoint, params)
            items.extend(data['value'])
            pages_fetched += 1
            # nextLink already carries the original query.
            next_endpoint = data.get(NEXT_LINK)
            params = None
        logger.info('Fetched %d item(s) from %s in %d page(s)', len(items), endpoint, pages_fetched)
        return items

    def list_users(self, credential: str, select: Iterable[str] = ('id', 'displayName'),
                   max_pages: int = 1) -> List[UserRecord]:
        return [UserRecord.from_api(item) for item in self.list_resources(credential, 'users', select=select, max_pages=max_pages)]
