"""Main entry point for JumpFrog."""

import argparse
import sys


def print_initial_state():
    """Print the initial board state and legal moves."""
    from .game_state import GameState

    state = GameState.initial()

    print("=" * 40)
    print("JumpFrog - Initial State")
    print("=" * 40)
    print()
    print(state)
    print()

    moves = state.legal_moves()
    print(f"Legal moves for {state.current_player.value}: {len(moves)}")
    print()
    for i, move in enumerate(moves, 1):
        print(f"  {i}. {move}")
    print()


def run_server(host=None, port=None):
    """Run the multiplayer server with uvicorn."""
    import uvicorn
    from .config import get_config

    config = get_config()
    uvicorn.run(
        "jumpfrog.server.app:create_app",
        factory=True,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level=config.logging.level.lower(),
    )


def run_selfplay(difficulty: str, max_moves: int, seed=None) -> int:
    """Play the bot against itself through the local engine."""
    from .engine import Engine, GameMode

    engine = Engine(mode=GameMode.BOT, difficulty=difficulty)
    engine.new_game()

    for turn in range(max_moves):
        if engine.winner is not None:
            break
        # The engine's bot always plays BLACK, so swap sides each turn
        engine.bot_player = engine.current_player
        action = engine.run_bot_turn(seed=None if seed is None else seed + turn)
        if action is None:
            print("Bot could not move; stopping.")
            break

    print(engine.state)
    print(f"Moves played: {len(engine.move_history)}")
    return 0 if engine.winner is not None else 1


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(prog="jumpfrog", description="JumpFrog game tools")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("show", help="Print the initial board and legal moves")

    serve = sub.add_parser("serve", help="Run the multiplayer server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    selfplay = sub.add_parser("selfplay", help="Bot plays itself")
    selfplay.add_argument("--difficulty", default="MEDIUM", choices=["EASY", "MEDIUM", "HARD"])
    selfplay.add_argument("--max-moves", type=int, default=400)
    selfplay.add_argument("--seed", type=int, default=None)

    args = parser.parse_args(argv)

    from .config import configure_logging
    configure_logging()

    if args.command == "serve":
        run_server(args.host, args.port)
        return 0
    if args.command == "selfplay":
        return run_selfplay(args.difficulty, args.max_moves, args.seed)

    print_initial_state()
    return 0


if __name__ == "__main__":
    sys.exit(main())
