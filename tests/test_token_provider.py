import pytest
from graph_api import AuthError, CallableTokenProvider, EnvTokenProvider, StaticTokenProvider


def test_static_provider():
    assert StaticTokenProvider('abc').get_token() == 'abc'
    with pytest.raises(AuthError):
        StaticTokenProvider('')


def test_callable_provider_fetches_every_time():
    tokens = iter(['t1', 't2'])
    provider = CallableTokenProvider(lambda: next(tokens))
    assert provider.get_token() == 't1'
    assert provider() == 't2'


def test_callable_provider_wraps_failures():
    def boom():
        raise ConnectionError('idp unreachable')
    with pytest.raises(AuthError) as exc:
        CallableTokenProvider(boom).get_token()
    assert isinstance(exc.value.__cause__, ConnectionError)


@pytest.mark.parametrize('value', ['', None, 42])
def test_callable_provider_rejects_bad_tokens(value):
    with pytest.raises(AuthError):
        CallableTokenProvider(lambda: value).get_token()


def test_env_provider(monkeypatch):
    monkeypatch.setenv('GRAPH_ACCESS_TOKEN', ' tok ')
    assert EnvTokenProvider().get_token() == 'tok'
    monkeypatch.delenv('GRAPH_ACCESS_TOKEN')
    with pytest.raises(AuthError):
        EnvTokenProvider().get_token()
