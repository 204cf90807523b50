"""Alpha-beta search for the JumpFrog bot."""

import math
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from ...types import Coord, Move, Player
from ...board import Board
from ...game_state import apply_move, check_winner
from ...movegen import list_legal_moves, forward_delta, is_forward_move
from .eval import evaluate_board


class Difficulty(Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


@dataclass(frozen=True)
class SearchConfig:
    """Per-difficulty search parameters."""
    max_depth: int
    mistake_chance: float
    mistake_top_n: int
    quiescence_depth: int  # extra jump-only plies allowed past depth 0


DIFFICULTY_CONFIGS = {
    Difficulty.EASY: SearchConfig(max_depth=2, mistake_chance=0.25, mistake_top_n=3, quiescence_depth=0),
    Difficulty.MEDIUM: SearchConfig(max_depth=4, mistake_chance=0.10, mistake_top_n=3, quiescence_depth=1),
    Difficulty.HARD: SearchConfig(max_depth=6, mistake_chance=0.0, mistake_top_n=1, quiescence_depth=2),
}

# Root-only bonuses that break near-ties toward natural, aggressive play
JUMP_BONUS = 30
STEP_BONUS = 5
CHAIN_WEIGHT = 14
FORWARD_ROW_BONUS = 12
BACKWARD_ROW_PENALTY = 20

MIN_TIME_BUDGET_MS = 10


class ActionKind(Enum):
    MOVE = "MOVE"
    END_TURN = "END_TURN"


@dataclass(frozen=True)
class BotAction:
    """What the bot decided: play a move, or hand the turn over."""
    kind: ActionKind
    move: Optional[Move] = None

    @classmethod
    def play(cls, move: Move) -> "BotAction":
        return cls(ActionKind.MOVE, move)

    @classmethod
    def end_turn(cls) -> "BotAction":
        return cls(ActionKind.END_TURN)


@dataclass
class SearchResult:
    """Ranked root moves from the deepest pass that finished."""
    ranked: List[Tuple[Move, float]] = field(default_factory=list)
    depth: int = 0
    nodes: int = 0

    @property
    def best_move(self) -> Optional[Move]:
        return self.ranked[0][0] if self.ranked else None


class SearchTimeout(Exception):
    """Raised inside the tree when the deadline passes."""


def move_category(move: Move, player: Player) -> int:
    """Ordering bucket, lower is searched first."""
    delta = forward_delta(move, player)
    if move.is_jump and delta > 0:
        return 0  # forward jump
    if move.is_jump and delta == 0:
        return 1  # lateral jump
    if delta > 0:
        return 2  # forward step
    if delta == 0:
        return 3  # lateral step
    if move.is_jump:
        return 4  # backward jump
    return 5      # backward step


def order_moves(moves: List[Move], player: Player) -> List[Move]:
    """Order moves for better pruning: by category, then most rows gained."""
    return sorted(moves, key=lambda m: (move_category(m, player), -forward_delta(m, player)))


def count_forward_follow_ups(board: Board, move: Move, player: Player) -> int:
    """Forward jumps the moved piece could chain into, not counting a hop back."""
    if not move.is_jump:
        return 0
    next_board = apply_move(board, move)
    count = 0
    for m in list_legal_moves(next_board, player):
        if not m.is_jump or m.start != move.end:
            continue
        if m.end == move.start:
            continue
        if forward_delta(m, player) > 0:
            count += 1
    return count


def root_bonus(board: Board, move: Move, player: Player) -> float:
    """Type, chain and direction bonuses added on top of the minimax value."""
    bonus = JUMP_BONUS if move.is_jump else STEP_BONUS
    bonus += count_forward_follow_ups(board, move, player) * CHAIN_WEIGHT
    delta = forward_delta(move, player)
    if delta > 0:
        bonus += delta * FORWARD_ROW_BONUS
    else:
        bonus += delta * BACKWARD_ROW_PENALTY
    return bonus


class AlphaBetaSearch:
    """
    Iterative deepening minimax with alpha-beta pruning.

    Scores are always from the bot's point of view: the bot maximizes and the
    opponent is assumed to minimize. The quiescence budget is passed down the
    recursion as an argument so a search holds no shared counters.
    """

    def __init__(self, player: Player, config: SearchConfig, time_budget_ms: int):
        self.player = player
        self.config = config
        self.time_budget = max(MIN_TIME_BUDGET_MS, time_budget_ms) / 1000.0
        self.nodes_searched = 0
        self.deadline = 0.0

    def search(self, board: Board, moves: List[Move]) -> SearchResult:
        """
        Rank root moves, keeping the deepest pass that finished in time.

        If even the depth-1 pass runs out of time, whatever depth-1 scores were
        completed are used; if there are none the result is empty.
        """
        self.nodes_searched = 0
        self.deadline = time.monotonic() + self.time_budget
        result = SearchResult()

        for depth in range(1, self.config.max_depth + 1):
            if self._is_timeout():
                break
            scored, completed = self._score_root(board, moves, depth)
            if completed or (depth == 1 and scored):
                result = SearchResult(
                    ranked=sorted(scored, key=lambda item: item[1], reverse=True),
                    depth=depth,
                    nodes=self.nodes_searched,
                )
            if not completed:
                break

        result.nodes = self.nodes_searched
        return result

    def _score_root(self, board: Board, moves: List[Move], depth: int) -> Tuple[List[Tuple[Move, float]], bool]:
        scored: List[Tuple[Move, float]] = []
        for move in moves:
            if self._is_timeout():
                return scored, False
            try:
                value = self._alphabeta(
                    apply_move(board, move),
                    depth - 1,
                    -math.inf,
                    math.inf,
                    False,
                    self.config.quiescence_depth,
                )
            except SearchTimeout:
                return scored, False
            scored.append((move, value + root_bonus(board, move, self.player)))
        return scored, True

    def _alphabeta(self, board: Board, depth: int, alpha: float, beta: float,
                   maximizing: bool, quiescence: int) -> float:
        self.nodes_searched += 1
        if self._is_timeout():
            raise SearchTimeout()

        if check_winner(board) is not None:
            return evaluate_board(board, self.player)

        side = self.player if maximizing else self.player.opponent()

        if depth <= 0:
            # Extend through pending jumps so a mid-chain position is not
            # scored as if it were quiet
            if quiescence > 0:
                jumps = [m for m in list_legal_moves(board, side) if m.is_jump]
                if jumps:
                    return self._search_children(board, jumps, 1, alpha, beta, maximizing, quiescence - 1)
            return evaluate_board(board, self.player)

        moves = list_legal_moves(board, side)
        if not moves:
            return evaluate_board(board, self.player)

        return self._search_children(board, moves, depth, alpha, beta, maximizing, quiescence)

    def _search_children(self, board: Board, moves: List[Move], depth: int, alpha: float,
                         beta: float, maximizing: bool, quiescence: int) -> float:
        side = self.player if maximizing else self.player.opponent()

        if maximizing:
            best = -math.inf
            for move in order_moves(moves, side):
                score = self._alphabeta(apply_move(board, move), depth - 1, alpha, beta, False, quiescence)
                best = max(best, score)
                alpha = max(alpha, score)
                if beta <= alpha:
                    break  # Beta cutoff
            return best

        best = math.inf
        for move in order_moves(moves, side):
            score = self._alphabeta(apply_move(board, move), depth - 1, alpha, beta, True, quiescence)
            best = min(best, score)
            beta = min(beta, score)
            if beta <= alpha:
                break  # Alpha cutoff
        return best

    def _is_timeout(self) -> bool:
        return time.monotonic() >= self.deadline


def continuation_candidates(board: Board, moves: List[Move], piece_id: str,
                            came_from: Optional[Coord]) -> List[Move]:
    """Jumps by the chaining piece that do not hop straight back."""
    candidates = []
    for move in moves:
        if not move.is_jump:
            continue
        piece = board.get_piece(move.start)
        if piece is None or piece.id != piece_id:
            continue
        if came_from is not None and move.end == came_from:
            continue
        candidates.append(move)
    return candidates


def make_rng(seed: Optional[int] = None) -> random.Random:
    """
    Random source for mistake selection.

    With a seed this is Python's Mersenne Twister seeded from it, so equal
    seeds give equal choices; without one it is seeded from the OS.
    """
    return random.Random(seed) if seed is not None else random.Random()


def choose_bot_action(board: Board, bot_player: Player,
                      continuation_piece_id: Optional[str] = None,
                      continuation_from: Optional[Coord] = None,
                      difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
                      time_limit_ms: int = 300,
                      seed: Optional[int] = None) -> BotAction:
    """
    Decide the bot's next action.

    Args:
        board: Current board.
        bot_player: Side the bot plays.
        continuation_piece_id: Piece that must keep jumping, if a chain is active.
        continuation_from: Square that piece just left; it may not hop back onto it.
        difficulty: EASY, MEDIUM or HARD (enum or name).
        time_limit_ms: Wall-clock budget for the whole search.
        seed: Makes the mistake roll reproducible.

    Returns:
        BotAction.play(move), or BotAction.end_turn() when there is nothing
        worth playing. During a chain the bot only ever continues forward.
    """
    config = DIFFICULTY_CONFIGS[Difficulty(difficulty)]
    rng = make_rng(seed)

    moves = list_legal_moves(board, bot_player)

    if continuation_piece_id is not None:
        moves = continuation_candidates(board, moves, continuation_piece_id, continuation_from)
        moves = [m for m in moves if is_forward_move(m, bot_player)]
        if not moves:
            return BotAction.end_turn()

    if not moves:
        return BotAction.end_turn()

    ordered = order_moves(moves, bot_player)
    searcher = AlphaBetaSearch(bot_player, config, time_limit_ms)
    result = searcher.search(board, ordered)

    best = result.best_move or ordered[0]

    if len(result.ranked) > 1 and config.mistake_chance > 0 and rng.random() < config.mistake_chance:
        count = min(config.mistake_top_n, len(result.ranked))
        return BotAction.play(result.ranked[rng.randrange(count)][0])

    return BotAction.play(best)


def choose_greedy_move(board: Board, player: Player) -> Optional[Move]:
    """One-ply greedy pick: best evaluation after the move, jumps preferred."""
    moves = list_legal_moves(board, player)
    if not moves:
        return None
    return max(
        moves,
        key=lambda m: evaluate_board(apply_move(board, m), player) + (JUMP_BONUS if m.is_jump else STEP_BONUS),
    )
