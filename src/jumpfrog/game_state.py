"""Game state management for JumpFrog."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .types import Move, Player
from .board import Board
from .movegen import list_legal_moves
from .rules import GREEN_GOAL_ZONE, BLACK_GOAL_ZONE, PIECES_PER_PLAYER


def apply_move(board: Board, move: Move) -> Board:
    """
    Apply a move and return the new board.

    The input board is not modified. No legality check is made; an empty
    start square gives back an unchanged copy.
    """
    new_board = board.clone()
    piece = new_board.get_piece(move.start)
    if piece is None:
        return new_board
    new_board.set_piece(move.start, None)
    new_board.set_piece(move.end, piece)
    return new_board


def check_winner(board: Board) -> Optional[Player]:
    """
    Get the winning player, or None.

    A side wins when all eight of its frogs sit on the opponent's two home
    rows: rows 0-1 for GREEN, rows 6-7 for BLACK.
    """
    for player, zone in ((Player.GREEN, GREEN_GOAL_ZONE), (Player.BLACK, BLACK_GOAL_ZONE)):
        rows = [coord.r for coord, _ in board.pieces(player)]
        if len(rows) == PIECES_PER_PLAYER and all(r in zone for r in rows):
            return player
    return None


@dataclass
class Continuation:
    """An in-progress jump chain: which piece must move next, and until when."""
    piece_id: str
    expires_at: int
    remaining_ms: int

    def to_dict(self) -> dict:
        return {
            "pieceId": self.piece_id,
            "expiresAt": self.expires_at,
            "remainingMs": self.remaining_ms,
        }


@dataclass
class GameState:
    """
    Authoritative game state, shared by the server and the local engine.

    Once winner is set, board and current_player are no longer mutated.
    """
    board: Board
    current_player: Player = Player.GREEN
    winner: Optional[Player] = None
    continuation: Optional[Continuation] = None
    players: Dict[str, Player] = field(default_factory=dict)
    last_move: Optional[Move] = None

    @classmethod
    def initial(cls) -> "GameState":
        """Create the initial game state."""
        return cls(board=Board.initial())

    def legal_moves(self) -> List[Move]:
        """Get all legal moves for the current player."""
        return list_legal_moves(self.board, self.current_player)

    def to_dict(self) -> dict:
        """Snapshot in the wire shape broadcast to room members."""
        data = {
            "board": self.board.to_grid(),
            "currentPlayer": self.current_player.value,
            "winner": self.winner.value if self.winner else None,
            "players": {
                conn_id: {"color": color.value}
                for conn_id, color in self.players.items()
            },
            "continuation": self.continuation.to_dict() if self.continuation else None,
        }
        if self.last_move is not None:
            data["lastMove"] = self.last_move.to_dict()
        return data

    def __str__(self) -> str:
        lines = [f"Turn: {self.current_player.value}", str(self.board)]
        if self.winner is not None:
            lines.append(f"Game Over! Winner: {self.winner.value}")
        return "\n".join(lines)
