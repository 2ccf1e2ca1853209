import importlib.util
from pathlib import Path
import pytest
import requests
from conftest import FakeSession, make_response
from graph_api import AuthError, ResourceFetcher, ResourceMutator

SCRIPT = Path(__file__).resolve().parents[1] / 'scripts' / 'create_calendar_event.py'
USERS_BODY = {'value': [{'id': 'u1', 'displayName': 'Alice'}, {'id': 'u2', 'displayName': 'Bob'}]}
PARSE_URI = ' {"error":{"code":"RequestBroker-ParseUri","message":"bad uri"}}'


def _load_cli():
    spec = importlib.util.spec_from_file_location('create_calendar_event', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class RoutingSession(FakeSession):
    """Answers by URL suffix so concurrent requests get deterministic responses."""

    def __init__(self, routes):
        super().__init__()
        self.routes = routes

    def request(self, method, url, params=None, headers=None, data=None, timeout=None):
        self.calls.append({'method': method, 'url': url, 'params': params, 'headers': headers or {}, 'data': data})
        for suffix, resp in self.routes.items():
            if url.endswith(suffix):
                return resp
        raise requests.ConnectionError(f'no route for {url}')


@pytest.fixture
def cli(monkeypatch):
    for var in ('GRAPH_TARGET_USER_ID', 'GRAPH_SITE_ID', 'GRAPH_LIST_ID', 'GRAPH_BASE_URL', 'GRAPH_TIMEOUT'):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('GRAPH_ACCESS_TOKEN', 'tok')
    return _load_cli()


def _wire(monkeypatch, fetch_session, mutate_session):
    monkeypatch.setattr(ResourceFetcher, 'from_env', classmethod(lambda cls: cls(session=fetch_session)))
    monkeypatch.setattr(ResourceMutator, 'from_env', classmethod(lambda cls: cls(session=mutate_session)))


def test_creates_event_for_target_user(cli, monkeypatch, capsys):
    fetch = FakeSession(make_response(200, USERS_BODY))
    mutate = FakeSession(make_response(201, ''))
    _wire(monkeypatch, fetch, mutate)
    assert cli.main(['--user-id', 'u2']) == 0
    assert "Successfully created an event on Bob's calendar." in capsys.readouterr().out
    assert fetch.calls[0]['params'] == {'$select': 'id,displayName'}
    assert mutate.calls[0]['url'].endswith('/users/u2/events')
    assert mutate.calls[0]['headers']['Authorization'] == 'Bearer tok'


def test_account_type_mismatch_message_and_exit_code(cli, monkeypatch, capsys):
    _wire(monkeypatch, FakeSession(make_response(200, USERS_BODY)), FakeSession(make_response(400, PARSE_URI)))
    assert cli.main(['--user-id', 'u1']) == 1
    err = capsys.readouterr().err
    assert 'Error creating an event for Alice.' in err
    assert 'Office 365' in err


def test_for_each_reports_each_user(cli, monkeypatch, capsys):
    mutate = RoutingSession({'/users/u1/events': make_response(201, ''), '/users/u2/events': make_response(400, PARSE_URI)})
    _wire(monkeypatch, FakeSession(make_response(200, USERS_BODY)), mutate)
    assert cli.main(['--for-each', '--workers', '2']) == 1
    captured = capsys.readouterr()
    assert "Successfully created an event on Alice's calendar." in captured.out
    assert 'Error creating an event for Bob.' in captured.err
    assert len(mutate.calls) == 2


def test_list_item_path(cli, monkeypatch, capsys):
    mutate = FakeSession(make_response(201, ''))
    _wire(monkeypatch, FakeSession(), mutate)
    assert cli.main(['--list-item', '--site-id', 's1', '--list-id', 'l1']) == 0
    assert 'List item created!' in capsys.readouterr().out
    assert mutate.calls[0]['url'].endswith('/sites/s1/lists/l1/items')


def test_list_item_without_ids_exits_cleanly(cli, monkeypatch, capsys):
    mutate = FakeSession()
    _wire(monkeypatch, FakeSession(), mutate)
    assert cli.main(['--list-item']) == 1
    assert 'GRAPH_SITE_ID' in capsys.readouterr().err
    assert mutate.calls == []


def test_missing_token_exits_cleanly(cli, monkeypatch, capsys):
    monkeypatch.delenv('GRAPH_ACCESS_TOKEN')
    fetch = FakeSession()
    _wire(monkeypatch, fetch, FakeSession())
    assert cli.main(['--for-each']) == 1
    assert 'GRAPH_ACCESS_TOKEN' in capsys.readouterr().err
    assert fetch.calls == []


def test_token_failure_before_fan_out_exits_cleanly(cli, monkeypatch, capsys):
    tokens = iter(['tok'])

    def one_token(self):
        try:
            return next(tokens)
        except StopIteration:
            raise AuthError('token endpoint unavailable')

    monkeypatch.setattr(cli.EnvTokenProvider, 'get_token', one_token)
    mutate = FakeSession()
    _wire(monkeypatch, FakeSession(make_response(200, USERS_BODY)), mutate)
    assert cli.main(['--for-each']) == 1
    assert 'token endpoint unavailable' in capsys.readouterr().err
    assert mutate.calls == []


def test_user_listing_failure(cli, monkeypatch, capsys):
    _wire(monkeypatch, FakeSession(make_response(200, '<html>error</html>', {'Content-Type': 'text/html'})), FakeSession())
    assert cli.main(['--user-id', 'u1']) == 1
    assert 'Failed to decode JSON response' in capsys.readouterr().err


def test_missing_user_id(cli, monkeypatch, capsys):
    _wire(monkeypatch, FakeSession(make_response(200, USERS_BODY)), FakeSession())
    assert cli.main([]) == 2
    assert '--user-id' in capsys.readouterr().err
