"""Board state representation for JumpFrog."""

from typing import Iterator, List, Optional, Tuple

from .types import Coord, Piece, Player
from .rules import (
    BOARD_SIZE,
    EDGE_ROWS,
    GREEN_GOAL_ROW,
    BLACK_GOAL_ROW,
    GREEN_START_POSITIONS,
    BLACK_START_POSITIONS,
)


def is_dark_square(coord: Coord) -> bool:
    """Check if a square is dark (normally playable) in the checker pattern."""
    return (coord.r + coord.c) % 2 == 1


def is_edge_row(coord: Coord) -> bool:
    """Check if a square lies on the top or bottom row."""
    return coord.r in EDGE_ROWS


def is_playable_destination(coord: Coord) -> bool:
    """
    Check if a piece may land on a square.

    Dark squares are playable as usual; every square on the two edge rows is
    playable even when light.
    """
    return is_dark_square(coord) or is_edge_row(coord)


def is_goal_row(coord: Coord, player: Player) -> bool:
    """Check if a square is on the far row a player is heading for."""
    goal = GREEN_GOAL_ROW if player == Player.GREEN else BLACK_GOAL_ROW
    return coord.r == goal


def in_bounds(coord: Coord) -> bool:
    """Check if a position is within the board."""
    return 0 <= coord.r < BOARD_SIZE and 0 <= coord.c < BOARD_SIZE


class Board:
    """
    8x8 JumpFrog board.

    Row 0 is the top. GREEN starts on rows 6-7, BLACK on rows 0-1. Pieces are
    never created or removed after setup, only moved.
    """

    SIZE = BOARD_SIZE

    def __init__(self):
        """Create an empty board."""
        self._grid: List[List[Optional[Piece]]] = [
            [None] * self.SIZE for _ in range(self.SIZE)
        ]

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def initial(cls) -> "Board":
        """Create a board with the standard initial setup."""
        board = cls()
        for index, coord in enumerate(GREEN_START_POSITIONS, 1):
            board.set_piece(coord, Piece(f"G{index}", Player.GREEN))
        for index, coord in enumerate(BLACK_START_POSITIONS, 1):
            board.set_piece(coord, Piece(f"B{index}", Player.BLACK))
        return board

    def clone(self) -> "Board":
        """Create a copy of this board. Pieces are immutable and shared."""
        new_board = Board()
        new_board._grid = [row[:] for row in self._grid]
        return new_board

    def get_piece(self, coord: Coord) -> Optional[Piece]:
        """Get the piece at a position, or None if empty."""
        return self._grid[coord[0]][coord[1]]

    def set_piece(self, coord: Coord, piece: Optional[Piece]) -> None:
        """Set or clear a square."""
        self._grid[coord[0]][coord[1]] = piece

    def is_empty(self, coord: Coord) -> bool:
        return self._grid[coord[0]][coord[1]] is None

    def pieces(self, player: Optional[Player] = None) -> Iterator[Tuple[Coord, Piece]]:
        """Iterate over pieces in row-major order, optionally filtered by owner."""
        for r, row in enumerate(self._grid):
            for c, piece in enumerate(row):
                if piece is not None and (player is None or piece.owner == player):
                    yield Coord(r, c), piece

    def find_piece(self, piece_id: str) -> Optional[Coord]:
        """Return the square holding a piece id, or None."""
        for coord, piece in self.pieces():
            if piece.id == piece_id:
                return coord
        return None

    def count(self, player: Player) -> int:
        return sum(1 for _ in self.pieces(player))

    def to_grid(self) -> List[List[Optional[dict]]]:
        """Convert to the JSON grid shape: 8x8 of {id, owner} or None."""
        return [
            [piece.to_dict() if piece is not None else None for piece in row]
            for row in self._grid
        ]

    @classmethod
    def from_grid(cls, grid) -> "Board":
        """Create a board from the JSON grid shape."""
        board = cls()
        for r, row in enumerate(grid):
            for c, cell in enumerate(row):
                if cell is not None:
                    board.set_piece(Coord(r, c), Piece.from_dict(cell))
        return board

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        """String representation of the board."""
        lines = ["  0 1 2 3 4 5 6 7"]
        for r in range(self.SIZE):
            row_str = f"{r} "
            for c in range(self.SIZE):
                piece = self._grid[r][c]
                if piece is None:
                    row_str += ". " if is_playable_destination(Coord(r, c)) else "  "
                elif piece.owner == Player.GREEN:
                    row_str += "g "
                else:
                    row_str += "b "
            lines.append(row_str.rstrip())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board({sum(1 for _ in self.pieces())} pieces)"
