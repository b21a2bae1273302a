from unittest import mock

import pytest
import requests

from relay.services.matchmaking import UpstreamRejected, UpstreamUnavailable
from relay.services.matchmaking.responder import ResponderClient


def _response(status=200, body=None, json_error=False):
    resp = mock.Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if json_error:
        resp.json.side_effect = ValueError('no json')
    else:
        resp.json.return_value = body
    return resp


def test_posts_text_and_session_id():
    http = mock.Mock()
    http.post.return_value = _response(body={'reply': 'hey there'})
    client = ResponderClient('http://bot.local/', timeout=3, http=http)

    assert client.respond('hello', 'session-1') == 'hey there'
    http.post.assert_called_once_with(
        'http://bot.local/api/bot/respond',
        json={'text': 'hello', 'session_id': 'session-1'},
        timeout=3,
    )


def test_non_2xx_is_rejected():
    http = mock.Mock()
    http.post.return_value = _response(status=503)
    client = ResponderClient('http://bot.local', http=http)

    with pytest.raises(UpstreamRejected) as excinfo:
        client.respond('hello', 'session-1')
    assert excinfo.value.status_code == 503


def test_transport_failure_is_unavailable():
    http = mock.Mock()
    http.post.side_effect = requests.ConnectionError('refused')
    client = ResponderClient('http://bot.local', http=http)

    with pytest.raises(UpstreamUnavailable):
        client.respond('hello', 'session-1')


@pytest.mark.parametrize('resp', [
    _response(json_error=True),
    _response(body={'text': 'wrong key'}),
    _response(body=['reply']),
])
def test_unusable_body_is_unavailable(resp):
    http = mock.Mock()
    http.post.return_value = resp
    client = ResponderClient('http://bot.local', http=http)

    with pytest.raises(UpstreamUnavailable):
        client.respond('hello', 'session-1')


def test_missing_base_url_is_unavailable():
    http = mock.Mock()
    client = ResponderClient('', http=http)
    with pytest.raises(UpstreamUnavailable):
        client.respond('hello', 'session-1')
    http.post.assert_not_called()
