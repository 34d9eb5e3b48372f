"""
Game Controller

Handles all game-related HTTP endpoints.
"""

from flask import Blueprint, request, jsonify
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _state_response(game_service, action, success=True, notice=None, status=200,
                    advisory=False, **log_details):
    """Build the standard {success, state, notice} response and log it.

    An advisory response is part of normal play, so it is logged as a
    success even when the action was not applied.
    """
    view = game_service.get_view()
    response_data = {
        'success': success,
        'state': view.to_dict() if view else None,
        'notice': notice
    }
    game_id = view.game_id if view else None

    if advisory:
        log_details['applied'] = success
    game_logger.log_server_response(request, action, success or advisory, response_data, game_id,
                                    **log_details)
    return jsonify(response_data), status


def _error_response(action, error, status=500):
    game_logger.log_error(request, error, action)
    error_response = {
        'success': False,
        'error': str(error)
    }
    game_logger.log_server_response(request, action, False, error_response)
    return jsonify(error_response), status


@game_bp.route('/state', methods=['GET'])
@require_game_service
def get_state(game_service=None):
    """Get the current game, resuming the saved one or dealing a new board."""
    try:
        game_logger.log_user_action(request, 'get_state')
        game_service.ensure_game()
        return _state_response(game_service, 'get_state')

    except Exception as e:
        return _error_response('get_state', e)


@game_bp.route('/new_game', methods=['POST'])
@require_game_service
def new_game(game_service=None):
    """Start a new game in the current language."""
    try:
        game_logger.log_user_action(request, 'new_game', language=game_service.language)
        game_service.new_game()
        return _state_response(game_service, 'new_game', rule_set=game_service.rules.name)

    except Exception as e:
        return _error_response('new_game', e)


@game_bp.route('/end_game', methods=['POST'])
@require_game_service
def end_game(game_service=None):
    """Abandon the current game and clear the save slot."""
    try:
        game_logger.log_user_action(request, 'end_game')
        success, notice = game_service.end_game()
        return _state_response(game_service, 'end_game', success, notice, 200 if success else 409)

    except Exception as e:
        return _error_response('end_game', e)


@game_bp.route('/hint', methods=['POST'])
@require_game_service
def request_hint(game_service=None):
    """Ask the hint giver for a new hint."""
    try:
        game_logger.log_user_action(request, 'request_hint')
        hint = game_service.request_hint()
        if hint is None:
            return _state_response(game_service, 'request_hint', False, 'No hint available', 409)
        return _state_response(game_service, 'request_hint', hint=str(hint))

    except Exception as e:
        return _error_response('request_hint', e)


@game_bp.route('/end_turn', methods=['POST'])
@require_game_service
def end_turn(game_service=None):
    """Bank the remaining guesses and get a new hint."""
    try:
        game_logger.log_user_action(request, 'end_turn')
        success, notice = game_service.end_turn()
        return _state_response(game_service, 'end_turn', success, notice, 200 if success else 409)

    except Exception as e:
        return _error_response('end_turn', e)


@game_bp.route('/spymaster', methods=['POST'])
@require_game_service
def toggle_spymaster(game_service=None):
    """Show or hide every card's role."""
    try:
        game_logger.log_user_action(request, 'toggle_spymaster')
        success, notice = game_service.toggle_spymaster_view()
        return _state_response(game_service, 'toggle_spymaster', success, notice, 200 if success else 409)

    except Exception as e:
        return _error_response('toggle_spymaster', e)


@game_bp.route('/cards/<int:index>/click', methods=['POST'])
@require_game_service
def click_card(index, game_service=None):
    """Reveal a card.

    Ignored clicks (already revealed, no guesses left, game over) still
    answer 200 with a notice; they are advisories, not errors.
    """
    try:
        game_logger.log_user_action(request, 'click_card', index=index)
        success, notice = game_service.click_card(index)
        return _state_response(game_service, 'click_card', success, notice, advisory=True, index=index)

    except Exception as e:
        return _error_response('click_card', e)


@game_bp.route('/language', methods=['POST'])
@require_game_service
def set_language(game_service=None):
    """Switch language, which starts a new game."""
    try:
        data = request.get_json(silent=True) or {}
        language = data.get('language')
        if not language:
            error_response = {
                'success': False,
                'error': 'Language is required'
            }
            game_logger.log_server_response(request, 'set_language', False, error_response)
            return jsonify(error_response), 400

        game_logger.log_user_action(request, 'set_language', language=language)
        success, notice = game_service.set_language(language)
        return _state_response(game_service, 'set_language', success, notice, 200 if success else 400)

    except Exception as e:
        return _error_response('set_language', e)


@game_bp.route('/health', methods=['GET'])
@require_game_service
def health_check(game_service=None):
    """Health check endpoint."""
    try:
        game_logger.log_user_action(request, 'health_check')

        view = game_service.get_view()
        response_data = {
            'status': 'healthy',
            'game_in_progress': bool(view and not view.game_over),
            'rule_set': game_service.rules.name,
            'languages': sorted(game_service.word_banks),
            'log_stats': game_logger.get_log_stats()
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
