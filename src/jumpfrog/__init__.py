"""JumpFrog - two-player diagonal hop game.

Rules engine, bot opponent, and the authoritative multiplayer server.

Directory Structure:
    jumpfrog/
    ├── types.py, rules.py, board.py   # Board model
    ├── movegen.py                     # Legal steps and jumps
    ├── game_state.py                  # apply_move, check_winner, GameState
    ├── engine.py                      # Local hot-seat and bot games
    ├── ai/algorithmic/                # Evaluator and alpha-beta bot
    └── server/                        # Rooms, turn state machine, FastAPI app
"""

__version__ = "1.0.0"
