from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterable, Optional
from .base_client import BaseClient
from .exceptions import MalformedResponseError
from .models import EventPayload

logger = logging.getLogger(__name__)


def serialize(payload: Any) -> bytes:
    return json.dumps(payload, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


class ResourceMutator(BaseClient):
    """Authenticated JSON POSTs with an explicit set of accepted status codes.

    Endpoints in this API family disagree on their success code (201 for
    creation, 200/204 elsewhere), so any status outside ``expected_status``
    is a failure even when it is 2xx.
    """

    def create_resource(self, credential: str, endpoint: str, payload: Any,
                        expected_status: Iterable[int] = (201,)) -> Optional[Dict[str, Any]]:
        body = serialize(payload)
        headers = {
            'Content-Type': 'application/json',
            'Content-Length': str(len(body)),
        }
        resp = self._send('POST', endpoint, credential=credential, headers=headers, data=body)
        # The upstream API sometimes prepends whitespace to the body.
        text = (resp.text or '').strip()

        if resp.status_code in tuple(expected_status):
            if not text:
                return None
            return self.parse_json(resp, text)

        logger.warning('POST %s returned unexpected status %s', endpoint, resp.status_code)
        data = self.parse_json(resp, text)
        self.raise_for_api_error(data, resp.status_code)
        raise MalformedResponseError('Unexpected status without an error object', status=resp.status_code, body=resp.text)

    def create_event(self, credential: str, user_id: str, event: EventPayload) -> Optional[Dict[str, Any]]:
        if not user_id:
            raise ValueError('user_id required')
        return self.create_resource(credential, f"users/{user_id}/events", event.to_api())

    def create_list_item(self, credential: str, site_id: str, list_id: str,
                         fields: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        if not site_id or not list_id:
            raise ValueError('site_id and list_id required')
        payload: Dict[str, Any] = {'fields': fields} if fields is not None else {}
        return self.create_resource(credential, f"sites/{site_id}/lists/{list_id}/items", payload)

