"""Game rules constants for JumpFrog."""

from .types import Coord

# Board dimensions
BOARD_SIZE = 8

# Diagonal directions (row_delta, col_delta), in generation order
DIAGONALS = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

# Starting squares, in piece id order (G1..G8 / B1..B8)
GREEN_START_POSITIONS = [
    Coord(7, 0), Coord(6, 1), Coord(7, 2), Coord(6, 3),
    Coord(7, 4), Coord(6, 5), Coord(7, 6), Coord(6, 7),
]
BLACK_START_POSITIONS = [
    Coord(1, 0), Coord(0, 1), Coord(1, 2), Coord(0, 3),
    Coord(1, 4), Coord(0, 5), Coord(1, 6), Coord(0, 7),
]

PIECES_PER_PLAYER = 8

# Edge rows: every square on them is playable, light or dark
EDGE_ROWS = (0, 7)

# GREEN moves toward row 0, BLACK toward row 7
GREEN_GOAL_ROW = 0
BLACK_GOAL_ROW = 7

# Winning zones (the opponent's two starting rows)
GREEN_GOAL_ZONE = (0, 1)
BLACK_GOAL_ZONE = (6, 7)

# Rows where backward jumps were meant to be allowed. Backward movement is
# currently unrestricted everywhere, see movegen.is_jump_direction_allowed.
GREEN_BACK_JUMP_ROWS = (0, 1)
BLACK_BACK_JUMP_ROWS = (6, 7)

# Straight edge-entry cases: (row the piece is on, row it lands on)
EDGE_ENTRY_STEPS = [(1, 0), (6, 7)]
# (row the piece is on, row jumped over, row it lands on)
EDGE_ENTRY_JUMPS = [(2, 1, 0), (5, 6, 7)]

# Timing (milliseconds)
JUMP_WINDOW_MS = 5000
CONTINUATION_TICK_MS = 200
DISCONNECT_GRACE_MS = 60_000
