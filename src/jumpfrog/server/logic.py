"""Server-authoritative turn and jump-continuation state machine."""

import logging
from enum import Enum
from typing import Callable

from ..types import Move
from ..game_state import Continuation, apply_move, check_winner
from ..movegen import list_legal_moves, jumps_from, moves_equal
from ..rules import JUMP_WINDOW_MS, CONTINUATION_TICK_MS
from ..exceptions import RejectedAction, RoomNotFound
from .rooms import Room, stop_timer
from .scheduler import Scheduler

logger = logging.getLogger(__name__)

BroadcastFn = Callable[[Room], None]


class RoomPhase(Enum):
    WAITING_FOR_OPPONENT = "WAITING_FOR_OPPONENT"
    IN_PROGRESS = "IN_PROGRESS"
    CONTINUATION_ACTIVE = "CONTINUATION_ACTIVE"  # sub-state of IN_PROGRESS
    COMPLETE = "COMPLETE"


def room_phase(room: Room) -> RoomPhase:
    if room.state.winner is not None:
        return RoomPhase.COMPLETE
    if not room.started:
        return RoomPhase.WAITING_FOR_OPPONENT
    if room.state.continuation is not None:
        return RoomPhase.CONTINUATION_ACTIVE
    return RoomPhase.IN_PROGRESS


class TurnController:
    """
    Validates and applies move and end-turn requests for a room.

    Every rejection is raised before the room is touched. Each accepted
    request ends with exactly one broadcast of the settled state.
    """

    def __init__(self, scheduler: Scheduler, broadcast: BroadcastFn,
                 window_ms: int = JUMP_WINDOW_MS, tick_ms: int = CONTINUATION_TICK_MS):
        self.scheduler = scheduler
        self.broadcast = broadcast
        self.window_ms = window_ms
        self.tick_ms = tick_ms

    def _check_turn(self, room: Room, connection_id: str) -> None:
        if connection_id not in room.state.players:
            raise RejectedAction("You are not in this room.")
        if not room.started:
            raise RejectedAction("Waiting for an opponent.")
        if room.state.players[connection_id] != room.state.current_player:
            raise RejectedAction("Not your turn.")

    def handle_move_request(self, room: Room, connection_id: str, move: Move) -> None:
        """
        Apply a move if it is legal for the requester right now.

        Raises:
            RoomNotFound: room is None.
            RejectedAction: Game over, not seated, wrong turn, wrong piece
                during a continuation, or the move is not legal.
        """
        if room is None:
            raise RoomNotFound()
        state = room.state
        if state.winner is not None:
            raise RejectedAction("Game has ended.")
        self._check_turn(room, connection_id)

        continuation = state.continuation
        if continuation is not None:
            if not move.is_jump:
                raise RejectedAction("Continuation requires a jump move.")
            piece = state.board.get_piece(move.start)
            if piece is None or piece.id != continuation.piece_id:
                raise RejectedAction("Must move the same piece.")

        player = state.current_player
        matching = [m for m in list_legal_moves(state.board, player) if moves_equal(m, move)]
        if not matching:
            raise RejectedAction("Illegal move.")
        move = matching[0]

        moved = state.board.get_piece(move.start)
        board = apply_move(state.board, move)
        winner = check_winner(board)

        state.board = board
        state.winner = winner
        state.last_move = move

        if winner is not None:
            state.continuation = None
            stop_timer(room)
            logger.info("Room %s: %s wins", room.id, winner.value)
        elif move.is_jump and jumps_from(board, player, move.end):
            self._start_continuation(room, moved.id)
        else:
            state.current_player = player.opponent()
            state.continuation = None
            stop_timer(room)

        self.broadcast(room)

    def handle_turn_end(self, room: Room, connection_id: str) -> None:
        """
        End an active jump chain early.

        Raises:
            RoomNotFound: room is None.
            RejectedAction: No continuation, not seated, or not your turn.
        """
        if room is None:
            raise RoomNotFound()
        if room.state.continuation is None:
            raise RejectedAction("No continuation active.")
        self._check_turn(room, connection_id)

        self._pass_turn(room)
        self.broadcast(room)

    def _start_continuation(self, room: Room, piece_id: str) -> None:
        now = self.scheduler.now_ms()
        room.state.continuation = Continuation(
            piece_id=piece_id,
            expires_at=now + self.window_ms,
            remaining_ms=self.window_ms,
        )
        stop_timer(room)
        self._schedule_tick(room)

    def _schedule_tick(self, room: Room) -> None:
        room.timer = self.scheduler.call_later(self.tick_ms, lambda: self._tick(room))

    def _tick(self, room: Room) -> None:
        room.timer = None
        continuation = room.state.continuation
        if continuation is None:
            return

        remaining = continuation.expires_at - self.scheduler.now_ms()
        if remaining <= 0:
            logger.info("Room %s: continuation expired", room.id)
            self._pass_turn(room)
        else:
            continuation.remaining_ms = remaining
            self._schedule_tick(room)
        self.broadcast(room)

    def _pass_turn(self, room: Room) -> None:
        room.state.continuation = None
        room.state.current_player = room.state.current_player.opponent()
        stop_timer(room)
