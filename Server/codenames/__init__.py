"""
Codenames Solo Game Server Application Package

Single-player Codenames: a scripted hint giver, a guess budget with
carry-over, countdown clocks and a resumable save slot, served to the
browser over HTTP and WebSocket.
"""

import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config, get_rule_set


def build_game_service(config_class=Config, rng=None):
    """Create the game service described by a configuration class."""
    from .services.game_service import GameService
    from .services.persistence import SaveSlotStore

    return GameService(
        rules=get_rule_set(config_class.RULE_SET),
        store=SaveSlotStore(config_class.SAVE_DIR, config_class.SAVE_KEY),
        rng=rng or random.Random(),
        language=config_class.DEFAULT_LANGUAGE,
        auto_hint_delay_ms=config_class.AUTO_HINT_DELAY_MS,
    )


def create_app(config_class=Config, game_service=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        game_service: Game service to serve (built from config_class if omitted)

    Returns:
        Flask application instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store shared instances for use in other modules
    app.game_service = game_service or build_game_service(config_class)
    app.socketio = socketio

    return app, socketio
