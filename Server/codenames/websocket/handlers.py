"""
WebSocket Event Handlers

Handles the WebSocket events the board uses for clicks and live clock updates.
"""

from flask import request
from flask_socketio import emit
from ..utils.decorators import websocket_game_service_required
from ..utils.game_logger import game_logger


def _state_payload(game_service, notice=None):
    view = game_service.get_view()
    return {
        'success': notice is None,
        'state': view.to_dict() if view else None,
        'notice': notice
    }


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    def broadcast(game_service, notice=None):
        socketio.emit('game_state_update', _state_payload(game_service, notice))

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        game_logger.logger.info(f"WebSocket: client {request.sid} connected")

    @socketio.on('get_state')
    @websocket_game_service_required
    def handle_get_state(data=None, game_service=None):
        """Send the current game to the caller."""
        game_service.ensure_game()
        emit('game_state_update', _state_payload(game_service))

    @socketio.on('new_game')
    @websocket_game_service_required
    def handle_new_game(data=None, game_service=None):
        game_logger.log_user_action(request, 'new_game')
        game_service.new_game()
        broadcast(game_service)

    @socketio.on('end_game')
    @websocket_game_service_required
    def handle_end_game(data=None, game_service=None):
        game_logger.log_user_action(request, 'end_game')
        _, notice = game_service.end_game()
        broadcast(game_service, notice)

    @socketio.on('request_hint')
    @websocket_game_service_required
    def handle_request_hint(data=None, game_service=None):
        game_logger.log_user_action(request, 'request_hint')
        hint = game_service.request_hint()
        broadcast(game_service, None if hint else 'No hint available')

    @socketio.on('end_turn')
    @websocket_game_service_required
    def handle_end_turn(data=None, game_service=None):
        game_logger.log_user_action(request, 'end_turn')
        _, notice = game_service.end_turn()
        broadcast(game_service, notice)

    @socketio.on('toggle_spymaster')
    @websocket_game_service_required
    def handle_toggle_spymaster(data=None, game_service=None):
        """Answers the caller now; other boards pick the flag up with the next broadcast."""
        game_logger.log_user_action(request, 'toggle_spymaster')
        _, notice = game_service.toggle_spymaster_view()
        emit('game_state_update', _state_payload(game_service, notice))

    @socketio.on('click_card')
    @websocket_game_service_required
    def handle_click_card(data=None, game_service=None):
        index = (data or {}).get('index')
        if not isinstance(index, int):
            emit('error', {'error': 'Card index is required'})
            return

        game_logger.log_user_action(request, 'click_card', index=index)
        applied, notice = game_service.click_card(index)
        if applied:
            broadcast(game_service)
        else:
            emit('game_state_update', _state_payload(game_service, notice))

    @socketio.on('set_language')
    @websocket_game_service_required
    def handle_set_language(data=None, game_service=None):
        language = (data or {}).get('language')
        if not language:
            emit('error', {'error': 'Language is required'})
            return

        game_logger.log_user_action(request, 'set_language', language=language)
        applied, notice = game_service.set_language(language)
        if applied:
            broadcast(game_service)
        else:
            emit('error', {'error': notice})


def broadcast_game_state_update(game_service, socketio):
    """Push the current state to every connected board (used by the clock driver)."""
    try:
        view = game_service.get_view()
        if view is None:
            return
        socketio.emit('game_state_update', {
            'success': True,
            'state': view.to_dict(),
            'notice': None
        })

    except Exception as e:
        game_logger.logger.error(f"Error broadcasting game state: {e}")
