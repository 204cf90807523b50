"""Move generation for JumpFrog."""

from typing import List

from .types import Coord, Jump, Move, Player, Step
from .board import Board, in_bounds, is_playable_destination
from .rules import (
    DIAGONALS,
    EDGE_ROWS,
    EDGE_ENTRY_STEPS,
    EDGE_ENTRY_JUMPS,
    GREEN_BACK_JUMP_ROWS,
    BLACK_BACK_JUMP_ROWS,
)


def forward_delta(move: Move, player: Player) -> int:
    """Rows advanced toward the player's goal (negative when retreating)."""
    if player == Player.GREEN:
        return move.start.r - move.end.r
    return move.end.r - move.start.r


def is_forward_move(move: Move, player: Player) -> bool:
    """GREEN moves toward row 0, BLACK toward row 7."""
    return forward_delta(move, player) > 0


def moves_equal(a: Move, b: Move) -> bool:
    """
    Compare a submitted move with a generated one.

    Steps match on both endpoints. Jumps match on the full path or on the
    endpoints alone, for clients that send only start and landing squares.
    """
    if a.is_jump != b.is_jump:
        return False
    if not a.is_jump:
        return a.start == b.start and a.end == b.end
    return tuple(a.path) == tuple(b.path) or (a.start == b.start and a.end == b.end)


def is_in_back_jump_zone(origin: Coord, player: Player) -> bool:
    """Check if a square is in the rows where backward jumps were meant to be allowed."""
    rows = GREEN_BACK_JUMP_ROWS if player == Player.GREEN else BLACK_BACK_JUMP_ROWS
    return origin.r in rows


def is_jump_direction_allowed() -> bool:
    """Back jumps are allowed (direction unrestricted)."""
    return True


def is_step_direction_allowed() -> bool:
    """Back steps are allowed (direction unrestricted)."""
    return True


def list_step_moves(board: Board, origin: Coord) -> List[Step]:
    """Generate step moves for the piece at a position."""
    moves: List[Step] = []
    targets = set()

    for dr, dc in DIAGONALS:
        to = Coord(origin.r + dr, origin.c + dc)
        if not in_bounds(to) or not is_playable_destination(to):
            continue
        if not is_step_direction_allowed():
            continue
        if board.is_empty(to):
            moves.append(Step(origin, to))
            targets.add(to)

    # Straight step into an edge row from the row next to it, so pieces can
    # reach the light squares there
    for entry, edge in EDGE_ENTRY_STEPS:
        if origin.r != entry:
            continue
        to = Coord(edge, origin.c)
        if to not in targets and is_playable_destination(to) and board.is_empty(to):
            moves.append(Step(origin, to))
            targets.add(to)

    # Lateral steps along an edge row
    if origin.r in EDGE_ROWS:
        for dc in (-1, 1):
            to = Coord(origin.r, origin.c + dc)
            if in_bounds(to) and to not in targets and board.is_empty(to):
                moves.append(Step(origin, to))
                targets.add(to)

    return moves


def list_jump_moves(board: Board, origin: Coord) -> List[Jump]:
    """
    Generate single-hop jumps for the piece at a position.

    The jumped square may hold a piece of either colour; nothing is removed.
    """
    moves: List[Jump] = []
    landings = set()

    for dr, dc in DIAGONALS:
        mid = Coord(origin.r + dr, origin.c + dc)
        landing = Coord(origin.r + 2 * dr, origin.c + 2 * dc)

        if not in_bounds(mid) or not in_bounds(landing):
            continue
        if not is_playable_destination(landing):
            continue
        if not is_jump_direction_allowed():
            continue
        if board.is_empty(mid) or not board.is_empty(landing):
            continue

        moves.append(Jump((origin, landing)))
        landings.add(landing)

    # Straight jump into an edge row over a piece on the row next to it
    for jump_from, mid_row, edge in EDGE_ENTRY_JUMPS:
        if origin.r != jump_from:
            continue
        mid = Coord(mid_row, origin.c)
        landing = Coord(edge, origin.c)
        if landing in landings or not is_playable_destination(landing):
            continue
        if not board.is_empty(mid) and board.is_empty(landing):
            moves.append(Jump((origin, landing)))
            landings.add(landing)

    # Lateral jumps along an edge row
    if origin.r in EDGE_ROWS:
        for dc in (-1, 1):
            mid = Coord(origin.r, origin.c + dc)
            landing = Coord(origin.r, origin.c + 2 * dc)
            if not in_bounds(landing) or landing in landings:
                continue
            if not board.is_empty(mid) and board.is_empty(landing):
                moves.append(Jump((origin, landing)))
                landings.add(landing)

    return moves


def list_legal_moves(board: Board, player: Player) -> List[Move]:
    """
    List all legal moves for a player.

    Moves come out in board scan order: for each owned square (row-major),
    its steps and then its jumps. Multi-jump chains are never flattened;
    callers ask again from the landing square.
    """
    moves: List[Move] = []
    for origin, _ in board.pieces(player):
        moves.extend(list_step_moves(board, origin))
        moves.extend(list_jump_moves(board, origin))
    return moves


def jumps_from(board: Board, player: Player, origin: Coord) -> List[Jump]:
    """Legal jumps for the player's piece standing on a given square."""
    piece = board.get_piece(origin)
    if piece is None or piece.owner != player:
        return []
    return list_jump_moves(board, origin)
