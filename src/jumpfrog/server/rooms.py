"""Two-player room lifecycle: create, join, leave, disconnect grace."""

import logging
import random
import secrets
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..types import Player
from ..game_state import GameState
from ..rules import DISCONNECT_GRACE_MS
from ..exceptions import AlreadyInRoom, RoomFull, RoomNotFound
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

ROOM_ID_BYTES = 6  # 8 URL-safe characters


@dataclass
class Room:
    """
    One game between two connections.

    The continuation timer and disconnect timers are owned by the room and
    cancelled when it is deleted.
    """
    id: str
    connections: List[str]
    state: GameState
    started: bool = False
    disconnected_at: Dict[str, int] = field(default_factory=dict)
    disconnect_timers: Dict[str, TimerHandle] = field(default_factory=dict)
    timer: Optional[TimerHandle] = None


@dataclass
class JoinResult:
    room: Room
    assigned_colors: bool


def stop_timer(room: Room) -> None:
    """Cancel the room's continuation countdown, if any."""
    if room.timer is not None:
        room.timer.cancel()
        room.timer = None


class RoomManager:
    """
    Process-wide registry of rooms for one server instance.

    State lives in memory only; running several server processes would need
    this registry moved to a shared store.
    """

    def __init__(self, scheduler: Scheduler, grace_ms: int = DISCONNECT_GRACE_MS,
                 rng: Optional[random.Random] = None,
                 on_room_changed: Optional[Callable[[Room], None]] = None):
        self.scheduler = scheduler
        self.grace_ms = grace_ms
        self.rng = rng or random.Random()
        self.on_room_changed = on_room_changed
        self.rooms: Dict[str, Room] = {}

    def _new_room_id(self) -> str:
        while True:
            room_id = secrets.token_urlsafe(ROOM_ID_BYTES)
            if room_id not in self.rooms:
                return room_id

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def find_room_by_connection(self, connection_id: str) -> Optional[Room]:
        for room in self.rooms.values():
            if connection_id in room.connections:
                return room
        return None

    def create_room(self, connection_id: str) -> Room:
        """
        Open a room with the creator seated, tentatively as GREEN.

        Raises:
            AlreadyInRoom: The connection is seated in another room.
        """
        if self.find_room_by_connection(connection_id) is not None:
            raise AlreadyInRoom()
        state = GameState.initial()
        state.players = {connection_id: Player.GREEN}
        room = Room(id=self._new_room_id(), connections=[connection_id], state=state)
        self.rooms[room.id] = room
        logger.info("Room %s created by %s", room.id, connection_id)
        return room

    def join_room(self, room_id: str, connection_id: str) -> JoinResult:
        """
        Seat a connection in a room.

        Rejoining with a connection already in the room cancels its pending
        removal. A newcomer may take over the slot (and colour) of a member
        who is in the disconnect grace window.

        Raises:
            RoomNotFound: No such room (it may just have been deleted).
            RoomFull: Two members are seated and neither is disconnected.
            AlreadyInRoom: The connection is seated in a different room.
        """
        room = self.rooms.get(room_id)
        if room is None:
            raise RoomNotFound()

        if connection_id in room.connections:
            self._clear_disconnect_timer(room, connection_id)
            return JoinResult(room, assigned_colors=False)

        if self.find_room_by_connection(connection_id) is not None:
            raise AlreadyInRoom()

        if len(room.connections) >= 2:
            if not room.disconnected_at:
                raise RoomFull()
            replaced_id = next(iter(room.disconnected_at))
            color = room.state.players.get(replaced_id, Player.GREEN)
            self._remove_connection(room, replaced_id)
            room.connections.append(connection_id)
            room.state.players[connection_id] = color
            logger.info("Room %s: %s took over the %s slot from %s",
                        room.id, connection_id, color.value, replaced_id)
            return JoinResult(room, assigned_colors=False)

        if room.started and room.connections:
            # Game already under way: take whichever colour is free
            taken = set(room.state.players.values())
            color = Player.BLACK if Player.GREEN in taken else Player.GREEN
            room.connections.append(connection_id)
            room.state.players[connection_id] = color
            return JoinResult(room, assigned_colors=False)

        room.connections.append(connection_id)
        room.state.players[connection_id] = Player.GREEN

        if len(room.connections) == 2:
            self._assign_colors(room)
            return JoinResult(room, assigned_colors=True)

        return JoinResult(room, assigned_colors=False)

    def leave_room(self, room_id: str, connection_id: str) -> Optional[Room]:
        """Remove a member. Returns the room, or None if it was deleted or missing."""
        room = self.rooms.get(room_id)
        if room is None:
            return None

        self._remove_connection(room, connection_id)
        if not room.connections:
            self.delete_room(room)
            return None
        return room

    def mark_disconnected(self, room_id: str, connection_id: str) -> Optional[Room]:
        """Start the grace window for a dropped connection."""
        room = self.rooms.get(room_id)
        if room is None:
            return None
        if connection_id in room.disconnected_at:
            return room

        room.disconnected_at[connection_id] = self.scheduler.now_ms()
        room.disconnect_timers[connection_id] = self.scheduler.call_later(
            self.grace_ms, lambda: self._expire_connection(room.id, connection_id)
        )
        return room

    def delete_room(self, room: Room) -> None:
        """Drop a room and cancel every timer it owns."""
        stop_timer(room)
        for handle in room.disconnect_timers.values():
            handle.cancel()
        room.disconnect_timers.clear()
        self.rooms.pop(room.id, None)
        logger.info("Room %s deleted", room.id)

    def _expire_connection(self, room_id: str, connection_id: str) -> None:
        room = self.rooms.get(room_id)
        if room is None:
            return
        # The handle has fired; drop it so removal does not cancel it again
        room.disconnect_timers.pop(connection_id, None)
        logger.info("Room %s: grace period over for %s", room_id, connection_id)
        self._remove_connection(room, connection_id)
        if not room.connections:
            self.delete_room(room)
        elif self.on_room_changed:
            self.on_room_changed(room)

    def _assign_colors(self, room: Room) -> None:
        """Two independent fair coin flips: who is GREEN, and who starts."""
        first, second = room.connections[0], room.connections[1]
        if self.rng.random() >= 0.5:
            first, second = second, first
        room.state.players = {first: Player.GREEN, second: Player.BLACK}
        room.state.current_player = Player.GREEN if self.rng.random() < 0.5 else Player.BLACK
        room.started = True
        logger.info("Room %s started, %s to move", room.id, room.state.current_player.value)

    def _clear_disconnect_timer(self, room: Room, connection_id: str) -> None:
        handle = room.disconnect_timers.pop(connection_id, None)
        if handle is not None:
            handle.cancel()
        room.disconnected_at.pop(connection_id, None)

    def _remove_connection(self, room: Room, connection_id: str) -> None:
        if connection_id in room.connections:
            room.connections.remove(connection_id)
        room.state.players.pop(connection_id, None)
        self._clear_disconnect_timer(room, connection_id)
