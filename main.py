"""
Ferdle Game Server - Main Entry Point

This is the main entry point for the Ferdle widget host.
It initializes the session service, loads today's puzzle and starts the
Flask-SocketIO application.
"""

import os
from ferdle import create_app
from ferdle.config import config, validate_game_settings
from ferdle.services.puzzle_service import PuzzleFetchError
from ferdle.services.session_service import initialize_session_service
from ferdle.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('FERDLE_ENV', 'default')]

    try:
        validate_game_settings()

        print("Initializing services...")
        session_service = initialize_session_service(config_class)
        print(f"✓ Session service initialized ({config_class.STORAGE_BACKEND} storage)")

        # A failed load is not fatal: clients can retry through /api/puzzle/load
        try:
            state = session_service.load_puzzle()
            print(f"✓ Loaded puzzle {state['print_date']} (#{state['days_since_launch']}), phase: {state['phase']}")
        except PuzzleFetchError as e:
            print(f"✗ Failed to load today's puzzle: {e}")

        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Ferdle Server Starting")

        print(f"\nStarting Ferdle Game Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Ferdle Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
