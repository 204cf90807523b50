"""Game engine - orchestrates local (hot-seat) and bot play."""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional
from dataclasses import dataclass

from .types import Coord, Move, Player
from .game_state import Continuation, GameState, apply_move, check_winner
from .movegen import list_legal_moves, jumps_from, moves_equal
from .config import get_config
from .exceptions import SearchFailed
from .ai.algorithmic.search import ActionKind, BotAction, Difficulty, choose_bot_action

logger = logging.getLogger(__name__)


class GameMode(Enum):
    LOCAL = "LOCAL"  # two humans, one device
    BOT = "BOT"      # human plays GREEN against the bot


class BotPhase(Enum):
    IDLE = "IDLE"
    THINKING = "THINKING"


@dataclass
class GameResult:
    """Result of a completed game."""
    winner: Player
    total_moves: int
    final_state: GameState


def _now_ms() -> int:
    return int(time.time() * 1000)


class Engine:
    """
    Authoritative game loop for local and bot games.

    The engine owns the state in these modes, including the jump
    continuation: after a jump that can be followed by another jump (not
    straight back), the same piece may keep jumping until the window runs
    out or the turn is ended.
    """

    def __init__(self, mode: GameMode = GameMode.LOCAL,
                 difficulty: Optional[Difficulty] = None,
                 clock: Callable[[], int] = _now_ms):
        config = get_config()
        self.mode = mode
        self.difficulty = Difficulty(difficulty or config.bot.difficulty)
        self.bot_player = Player.BLACK
        self.clock = clock
        self.window_ms = config.timing.continuation_window_ms

        self.state: GameState = GameState.initial()
        self.continuation_from: Optional[Coord] = None
        self.move_history: List[Move] = []
        self.bot_phase = BotPhase.IDLE

        # Callbacks
        self.on_state_changed: Optional[Callable[[GameState], None]] = None
        self.on_game_over: Optional[Callable[[GameResult], None]] = None
        self.on_move_request: Optional[Callable[[Player], None]] = None

    def new_game(self) -> None:
        """Start a new game. GREEN always moves first locally."""
        self.state = GameState.initial()
        self.continuation_from = None
        self.move_history = []
        self.bot_phase = BotPhase.IDLE
        self._notify_state_changed()
        self._request_move_if_bot()

    @property
    def current_player(self) -> Player:
        return self.state.current_player

    @property
    def winner(self) -> Optional[Player]:
        return self.state.winner

    def legal_moves(self) -> List[Move]:
        """Legal moves for the current player, restricted during a jump chain."""
        moves = list_legal_moves(self.state.board, self.state.current_player)
        continuation = self.state.continuation
        if continuation is None:
            return moves

        allowed = []
        for move in moves:
            if not move.is_jump:
                continue
            piece = self.state.board.get_piece(move.start)
            if piece is None or piece.id != continuation.piece_id:
                continue
            if self.continuation_from is not None and move.end == self.continuation_from:
                continue
            allowed.append(move)
        return allowed

    def make_move(self, move: Move) -> bool:
        """
        Make a move in the game.

        Returns True if the move was valid and applied.
        """
        if self.state.winner is not None:
            return False

        matching = [m for m in self.legal_moves() if moves_equal(m, move)]
        if not matching:
            return False
        move = matching[0]

        player = self.state.current_player
        piece = self.state.board.get_piece(move.start)
        board = apply_move(self.state.board, move)
        winner = check_winner(board)

        self.state.board = board
        self.state.winner = winner
        self.state.last_move = move
        self.move_history.append(move)

        follow_ups = []
        if move.is_jump and winner is None:
            follow_ups = [j for j in jumps_from(board, player, move.end) if j.end != move.start]

        if follow_ups:
            now = self.clock()
            self.state.continuation = Continuation(piece.id, now + self.window_ms, self.window_ms)
            self.continuation_from = move.start
        else:
            self._clear_continuation()
            if winner is None:
                self.state.current_player = player.opponent()

        self._notify_state_changed()

        if winner is not None:
            if self.on_game_over:
                self.on_game_over(GameResult(winner, len(self.move_history), self.state))
        else:
            self._request_move_if_bot()

        return True

    def end_turn(self) -> bool:
        """End an active jump chain early and pass the turn."""
        if self.state.continuation is None or self.state.winner is not None:
            return False
        self._pass_turn()
        return True

    def tick(self, now_ms: Optional[int] = None) -> None:
        """Count down the continuation window; pass the turn when it runs out."""
        continuation = self.state.continuation
        if continuation is None:
            return
        if now_ms is None:
            now_ms = self.clock()
        remaining = continuation.expires_at - now_ms
        if remaining <= 0:
            self._pass_turn()
            return
        continuation.remaining_ms = remaining

    def is_bot_turn(self) -> bool:
        return (
            self.mode == GameMode.BOT
            and self.state.winner is None
            and self.state.current_player == self.bot_player
            and self.bot_phase == BotPhase.IDLE
        )

    def bot_delay_ms(self) -> int:
        """Pause before the bot acts, shorter while it is chaining jumps."""
        bot = get_config().bot
        if self.state.continuation is not None:
            return bot.continuation_delay_ms
        return bot.thinking_delay_ms.get(self.difficulty.value, 400)

    def bot_time_limit_ms(self) -> int:
        return get_config().bot.time_limit_ms.get(self.difficulty.value, 300)

    def run_bot_turn(self, seed: Optional[int] = None) -> Optional[BotAction]:
        """
        Let the bot take one action (IDLE -> THINKING -> MOVE or END_TURN).

        Returns the action taken, or None if it was not the bot's turn or the
        search failed. A failed search hands the turn back to the human.
        """
        if not self.is_bot_turn():
            return None

        self.bot_phase = BotPhase.THINKING
        try:
            action = self._choose_action(seed)
        except SearchFailed:
            logger.exception("Bot move error")
            self.bot_phase = BotPhase.IDLE
            self._pass_turn()
            return None

        self.bot_phase = BotPhase.IDLE
        if action.kind == ActionKind.MOVE:
            if not self.make_move(action.move):
                logger.error("Bot chose an illegal move %r", action.move)
                self._pass_turn()
                return None
        else:
            self._pass_turn()
        return action

    def _choose_action(self, seed: Optional[int]) -> BotAction:
        continuation = self.state.continuation
        if seed is None:
            seed = get_config().bot.seed
        try:
            return choose_bot_action(
                self.state.board,
                self.bot_player,
                continuation_piece_id=continuation.piece_id if continuation else None,
                continuation_from=self.continuation_from,
                difficulty=self.difficulty,
                time_limit_ms=self.bot_time_limit_ms(),
                seed=seed,
            )
        except Exception as e:
            raise SearchFailed(str(e)) from e

    def _pass_turn(self) -> None:
        self._clear_continuation()
        self.state.current_player = self.state.current_player.opponent()
        self._notify_state_changed()
        self._request_move_if_bot()

    def _clear_continuation(self) -> None:
        self.state.continuation = None
        self.continuation_from = None

    def _notify_state_changed(self) -> None:
        """Notify listeners of state change."""
        if self.on_state_changed:
            self.on_state_changed(self.state)

    def _request_move_if_bot(self) -> None:
        """Ask the caller to schedule the bot after its thinking delay."""
        if self.is_bot_turn() and self.on_move_request:
            self.on_move_request(self.bot_player)
