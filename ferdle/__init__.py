"""
Ferdle Application Package

A daily word-guessing game served as a companion widget. The game engine in
``ferdle.services.game_engine`` is framework-free; this package wraps it in a
small Flask + Socket.IO host built by ``create_app``.
"""

from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Flask and its extensions are imported here so that the engine and its
    models can be imported without the web stack.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance and its SocketIO server
    """
    from flask import Flask
    from flask_cors import CORS
    from flask_socketio import SocketIO

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers, register_engine_broadcasts
    register_websocket_handlers(socketio)

    from .services.session_service import get_session_service
    session = get_session_service()
    if session:
        register_engine_broadcasts(socketio, session)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
