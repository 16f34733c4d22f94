"""
Session Decorators

Contains decorators that hand HTTP and WebSocket handlers the game session.
"""

from functools import wraps
from flask import jsonify
from flask_socketio import emit


def require_session(loaded: bool = True):
    """
    Decorator for HTTP endpoints that need the session service.

    Args:
        loaded: Also require that a puzzle has been loaded
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            from ..services.session_service import get_session_service

            session = get_session_service()
            if not session:
                return jsonify({
                    'success': False,
                    'error': 'Session service unavailable'
                }), 500

            if loaded and not session.is_loaded:
                return jsonify({
                    'success': False,
                    'error': 'No puzzle loaded',
                    'load_state': session.load_state
                }), 409

            kwargs['session'] = session
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def websocket_session_required(f):
    """Decorator for WebSocket handlers that need a loaded puzzle."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.session_service import get_session_service

        session = get_session_service()
        if not session or not session.is_loaded:
            emit('error', {'error': 'No puzzle loaded'})
            return

        kwargs['session'] = session
        return f(*args, **kwargs)

    return decorated_function
