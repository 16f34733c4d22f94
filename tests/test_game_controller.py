"""
Tests for the HTTP endpoints and WebSocket events of the widget host.
"""

from unittest import mock

import pytest

from ferdle import create_app
from ferdle.config import TestingConfig
from ferdle.services.puzzle_service import PuzzleFetchError
from ferdle.services.session_service import initialize_session_service


@pytest.fixture
def session(puzzle):
    session = initialize_session_service(TestingConfig)
    session.puzzle_service = mock.Mock()
    session.puzzle_service.fetch_puzzle.return_value = puzzle
    return session


@pytest.fixture
def app(session):
    app, socketio = create_app(TestingConfig)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _press(client, key):
    return client.post('/api/key', json={'key': key})


def test_state_before_load_is_conflict(client):
    response = client.get('/api/state')
    assert response.status_code == 409
    assert response.get_json()['load_state'] == 'loading'


def test_load_puzzle(client):
    response = client.post('/api/puzzle/load', json={'date': '2024-06-01'})

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['state']['phase'] == 'playing'
    assert body['state']['solution'] is None


def test_load_puzzle_failure_is_bad_gateway(client, session):
    session.puzzle_service.fetch_puzzle.side_effect = PuzzleFetchError("timeout", reason='network')

    response = client.post('/api/puzzle/load')

    assert response.status_code == 502
    assert response.get_json()['reason'] == 'network'
    assert session.load_state == 'error'


def test_key_press_flow(client):
    client.post('/api/puzzle/load')

    response = _press(client, 'c')
    body = response.get_json()
    assert body['accepted'] is True
    assert body['state']['board'][0][0]['letter'] == 'C'

    assert _press(client, '!').get_json()['accepted'] is False
    assert _press(client, 'ENTER').get_json()['accepted'] is False


def test_key_press_requires_key(client):
    client.post('/api/puzzle/load')
    assert client.post('/api/key', json={}).status_code == 400


def test_win_and_share(client):
    client.post('/api/puzzle/load')

    assert client.post('/api/share').status_code == 409

    for key in ['C', 'R', 'A', 'N', 'E', 'ENTER']:
        _press(client, key)

    state = client.get('/api/state').get_json()['state']
    assert state['phase'] == 'won'
    assert state['solution'] == 'CRANE'

    response = client.post('/api/share')
    assert response.status_code == 200
    assert response.get_json()['summary'].startswith('Wordle 1443 1/6')


def test_reset(client):
    client.post('/api/puzzle/load')
    _press(client, 'C')

    response = client.post('/api/reset')

    assert response.status_code == 200
    state = response.get_json()['state']
    assert state['current_col_index'] == 0
    assert state['board'][0][0]['letter'] == ''


def test_health(client):
    response = client.get('/api/health')
    body = response.get_json()
    assert body['status'] == 'healthy'
    assert body['session_available'] is True


def test_websocket_key_press(app, session):
    session.load_puzzle()
    socketio = app.socketio
    socket_client = socketio.test_client(app)

    received = socket_client.get_received()
    assert received[0]['name'] == 'state_changed'
    assert received[0]['args'][0]['event'] == 'connected'

    socket_client.emit('key_press', {'key': 'C'})
    received = socket_client.get_received()
    names = [message['name'] for message in received]

    assert 'key_result' in names
    key_result = received[names.index('key_result')]['args'][0]
    assert key_result == {'key': 'C', 'accepted': True}

    state_events = [m['args'][0]['event'] for m in received if m['name'] == 'state_changed']
    assert 'letter_added' in state_events


def test_websocket_share_ready(app, session):
    session.load_puzzle()
    socket_client = app.socketio.test_client(app)

    for key in ['C', 'R', 'A', 'N', 'E', 'ENTER']:
        socket_client.emit('key_press', {'key': key})
    socket_client.get_received()

    socket_client.emit('share_request')
    received = socket_client.get_received()

    shares = [m['args'][0] for m in received if m['name'] == 'share_ready']
    assert shares and shares[0]['summary'].startswith('Wordle 1443 1/6')
