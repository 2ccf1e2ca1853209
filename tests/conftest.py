import json
import pytest
import requests


def make_response(status: int, body='', headers=None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    resp._content = body.encode('utf-8') if isinstance(body, str) else body
    resp.encoding = 'utf-8'
    resp.headers.update(headers or {'Content-Type': 'application/json'})
    return resp


class FakeSession:
    """Stands in for requests.Session: replays queued responses and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, params=None, headers=None, data=None, timeout=None):
        self.calls.append({'method': method, 'url': url, 'params': params, 'headers': headers or {}, 'data': data, 'timeout': timeout})
        nxt = self.responses.pop(0)
        if isinstance(nxt, BaseException):
            raise nxt
        return nxt


@pytest.fixture
def fake_session():
    def _make(*responses):
        return FakeSession(*responses)
    return _make
