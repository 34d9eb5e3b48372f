"""
Codenames Solo Game Server - Main Entry Point

This is the main entry point for the game server.
It resumes or deals a game, starts the clock driver and runs the
Flask-SocketIO application.
"""

import time
from codenames import create_app
from codenames.config import Config
from codenames.utils.game_logger import game_logger
from codenames.websocket.handlers import broadcast_game_state_update


def clock_driver(game_service, socketio, interval=Config.CLOCK_INTERVAL_SECONDS):
    """
    Background task that feeds real elapsed time into the game clocks.

    Every pass measures the time since the previous one, advances the
    service by that many milliseconds and pushes the new state to the
    boards whenever a clock ticked or an automatic hint fired.
    """
    game_logger.logger.info("Clock driver started")
    last = time.monotonic()
    while True:
        socketio.sleep(interval)
        now = time.monotonic()
        elapsed_ms = int((now - last) * 1000)
        if elapsed_ms <= 0:
            continue
        last += elapsed_ms / 1000

        try:
            if game_service.advance(elapsed_ms):
                broadcast_game_state_update(game_service, socketio)
        except Exception as e:
            game_logger.logger.error(f"Error in clock driver: {e}")


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Creating Flask application...")
        app, socketio = create_app(Config)
        game_service = app.game_service
        print("✓ Flask application created successfully")

        if game_service.resume():
            print(f"✓ Resumed saved game {game_service.session.game_id}")
        else:
            game_service.new_game()
            print(f"✓ Started new game {game_service.session.game_id}")

        socketio.start_background_task(clock_driver, game_service, socketio)
        print(f"✓ Clock driver started - ticking every {Config.CLOCK_INTERVAL_SECONDS}s")

        game_logger.logger.info(
            f"Codenames Server Starting - rule set '{game_service.rules.name}', "
            f"language '{game_service.language}'"
        )

        print(f"\nStarting Codenames Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Codenames Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
