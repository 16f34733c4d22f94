"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..services.puzzle_service import PuzzleFetchError
from ..services.session_service import get_session_service
from ..utils.decorators import require_session
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


@game_bp.route('/puzzle/load', methods=['POST'])
@require_session(loaded=False)
def load_puzzle(session=None):
    """Fetch the day's puzzle and start or resume the game."""
    data = request.get_json(silent=True) or {}
    date = data.get('date')

    game_logger.log_user_action(request, 'load_puzzle', date)

    try:
        state = session.load_puzzle(date)

    except PuzzleFetchError as e:
        error_response = {
            'success': False,
            'error': 'Failed to load puzzle',
            'reason': e.reason,
            'details': str(e)
        }
        game_logger.log_server_response(request, 'load_puzzle', False, error_response, date)
        return jsonify(error_response), 502

    except Exception as e:
        game_logger.log_error(request, e, 'load_puzzle', date)
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'load_puzzle', False, error_response, date)
        return jsonify(error_response), 500

    response_data = {
        'success': True,
        'state': state
    }
    game_logger.log_server_response(request, 'load_puzzle', True, response_data, state['print_date'])
    return jsonify(response_data)


@game_bp.route('/state', methods=['GET'])
@require_session()
def get_state(session=None):
    """Get current game state."""
    return jsonify({
        'success': True,
        'state': session.get_state()
    })


@game_bp.route('/key', methods=['POST'])
@require_session()
def press_key(session=None):
    """Route a single key press (A-Z, ENTER or DELETE) into the game."""
    try:
        data = request.get_json(silent=True)
        if not data or 'key' not in data:
            error_response = {
                'success': False,
                'error': 'Key is required'
            }
            game_logger.log_server_response(request, 'key_press', False, error_response)
            return jsonify(error_response), 400

        key = data['key']
        game_logger.log_user_action(request, 'key_press', session.engine.puzzle.print_date, key=key)

        accepted = session.handle_key(key)
        state = session.get_state()

        response_data = {
            'success': True,
            'accepted': accepted,
            'state': state
        }
        game_logger.log_server_response(
            request, 'key_press', True, response_data, state['print_date'],
            key=key, accepted=accepted
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'key_press')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(request, 'key_press', False, error_response)
        return jsonify(error_response), 500


@game_bp.route('/reset', methods=['POST'])
@require_session()
def reset_game(session=None):
    """Discard progress on today's puzzle and start over."""
    game_logger.log_user_action(request, 'reset_game', session.engine.puzzle.print_date)

    if not session.reset_game():
        error_response = {
            'success': False,
            'error': 'Game is busy'
        }
        game_logger.log_server_response(request, 'reset_game', False, error_response)
        return jsonify(error_response), 409

    response_data = {
        'success': True,
        'state': session.get_state()
    }
    game_logger.log_server_response(request, 'reset_game', True, response_data)
    return jsonify(response_data)


@game_bp.route('/share', methods=['POST'])
@require_session()
def share(session=None):
    """Return the share summary for a finished game."""
    puzzle_id = session.engine.puzzle.print_date
    game_logger.log_user_action(request, 'share', puzzle_id)

    summary = session.share()
    if summary is None:
        error_response = {
            'success': False,
            'error': 'Game is not over yet'
        }
        game_logger.log_server_response(request, 'share', False, error_response, puzzle_id)
        return jsonify(error_response), 409

    response_data = {
        'success': True,
        'summary': summary
    }
    game_logger.log_server_response(request, 'share', True, response_data, puzzle_id)
    return jsonify(response_data)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    session = get_session_service()

    response_data = {
        'status': 'healthy',
        'session_available': session is not None,
        'load_state': session.load_state if session else None,
        'phase': session.phase.value if session else None,
        'log_stats': game_logger.get_log_stats()
    }
    return jsonify(response_data)
