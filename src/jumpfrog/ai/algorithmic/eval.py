"""Board evaluation for algorithmic AI."""

from typing import List, Set

from ...types import Coord, Move, Player
from ...board import Board
from ...game_state import check_winner
from ...movegen import list_legal_moves, forward_delta


WIN_SCORE = 100000

# Evaluation weights
DEFAULT_WEIGHTS = {
    'progress': 50,
    'completion': 120,
    'laggard': 15,       # extra penalty for the frog furthest from goal
    'mobility': 3,
    'forward_jump': 14,
    'stuck': 20,
    'spread': 4,         # distinct columns occupied, avoids congestion
}


def goal_distance(coord: Coord, player: Player) -> int:
    """
    Rows left before a frog reaches its goal zone (0 = already there).

    GREEN goal zone is rows 0-1, BLACK goal zone is rows 6-7.
    """
    if player == Player.GREEN:
        return max(0, coord.r - 1)
    return max(0, 6 - coord.r)


def in_goal_zone(coord: Coord, player: Player) -> bool:
    return coord.r <= 1 if player == Player.GREEN else coord.r >= 6


def _movable_squares(moves: List[Move]) -> Set[Coord]:
    return {move.start for move in moves}


def _count_stuck(board: Board, player: Player, movable: Set[Coord]) -> int:
    return sum(1 for coord, _ in board.pieces(player) if coord not in movable)


def _count_forward_jumps(moves: List[Move], player: Player) -> int:
    return sum(1 for m in moves if m.is_jump and forward_delta(m, player) > 0)


def _column_spread(board: Board, player: Player) -> int:
    return len({coord.c for coord, _ in board.pieces(player)})


def evaluate_board(board: Board, player: Player) -> float:
    """
    Evaluate a board from the perspective of the given player.

    Returns a score where positive is good for the player,
    negative is good for the opponent.
    """
    opponent = player.opponent()
    winner = check_winner(board)
    if winner == player:
        return WIN_SCORE
    if winner == opponent:
        return -WIN_SCORE

    player_total = opponent_total = 0
    player_max = opponent_max = 0
    player_done = opponent_done = 0

    for coord, piece in board.pieces():
        dist = goal_distance(coord, piece.owner)
        if piece.owner == player:
            player_total += dist
            player_max = max(player_max, dist)
            if in_goal_zone(coord, player):
                player_done += 1
        else:
            opponent_total += dist
            opponent_max = max(opponent_max, dist)
            if in_goal_zone(coord, opponent):
                opponent_done += 1

    score = 0.0

    # Progress: lower total distance is better
    score += (opponent_total - player_total) * DEFAULT_WEIGHTS['progress']
    score += (player_done - opponent_done) * DEFAULT_WEIGHTS['completion']
    score += (opponent_max - player_max) * DEFAULT_WEIGHTS['laggard']

    player_moves = list_legal_moves(board, player)
    opponent_moves = list_legal_moves(board, opponent)
    score += (len(player_moves) - len(opponent_moves)) * DEFAULT_WEIGHTS['mobility']

    # Only our own jumps count here, not the opponent's
    score += _count_forward_jumps(player_moves, player) * DEFAULT_WEIGHTS['forward_jump']

    player_stuck = _count_stuck(board, player, _movable_squares(player_moves))
    opponent_stuck = _count_stuck(board, opponent, _movable_squares(opponent_moves))
    score -= (player_stuck - opponent_stuck) * DEFAULT_WEIGHTS['stuck']

    score += (_column_spread(board, player) - _column_spread(board, opponent)) * DEFAULT_WEIGHTS['spread']

    return score
