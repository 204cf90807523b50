"""Authoritative multiplayer server: rooms, turn arbitration, WebSocket app."""

from .rooms import Room, RoomManager, JoinResult, stop_timer
from .logic import TurnController, RoomPhase, room_phase
from .scheduler import LoopScheduler

__all__ = [
    'Room',
    'RoomManager',
    'JoinResult',
    'stop_timer',
    'TurnController',
    'RoomPhase',
    'room_phase',
    'LoopScheduler',
]
