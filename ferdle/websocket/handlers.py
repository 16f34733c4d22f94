"""
WebSocket Event Handlers

Handles key presses coming from the widget over WebSocket and relays engine
change notifications (state changes, tile reveals, share text) back to clients.
"""

from flask_socketio import emit
from ..utils.decorators import websocket_session_required
from ..utils.game_logger import game_logger

GAME_ROOM = "game"


def register_engine_broadcasts(socketio, session):
    """
    Subscribe to the engine and forward its events to every connected client.

    Returns:
        Callable that stops the forwarding
    """
    def forward(event, payload):
        if event == 'tile_revealed':
            socketio.emit('tile_revealed', payload)
        elif event == 'share_ready':
            socketio.emit('share_ready', {'summary': payload['summary']})
            return

        socketio.emit('state_changed', {
            'event': event,
            'state': session.get_state()
        })

    return session.subscribe(forward)


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Send the current state to a newly connected client."""
        from ..services.session_service import get_session_service

        session = get_session_service()
        if session:
            emit('state_changed', {'event': 'connected', 'state': session.get_state()})

    @socketio.on('key_press')
    @websocket_session_required
    def handle_key_press(data, session=None):
        """Route one key press into the engine."""
        try:
            key = data.get('key') if isinstance(data, dict) else None
            accepted = session.handle_key(key)
            emit('key_result', {'key': key, 'accepted': accepted})

        except Exception as e:
            game_logger.logger.error(f"Error handling key press: {e}")
            emit('error', {'error': str(e)})

    @socketio.on('reset_game')
    @websocket_session_required
    def handle_reset_game(data=None, session=None):
        """Start today's puzzle over."""
        try:
            if not session.reset_game():
                emit('error', {'error': 'Game is busy'})

        except Exception as e:
            game_logger.logger.error(f"Error resetting game: {e}")
            emit('error', {'error': str(e)})

    @socketio.on('share_request')
    @websocket_session_required
    def handle_share_request(data=None, session=None):
        """Ask for the share summary; it arrives as a 'share_ready' event."""
        if session.share() is None:
            emit('error', {'error': 'Game is not over yet'})
