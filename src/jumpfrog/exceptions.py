"""
Exception definitions for JumpFrog.

Hierarchy:
- JumpFrogError (base)
  - RejectedAction (illegal or out-of-turn request; state unchanged)
    - RoomNotFound
    - RoomFull
    - AlreadyInRoom
  - SearchFailed (bot could not produce an action)
"""
from typing import Optional


class JumpFrogError(Exception):
    """Base exception for all JumpFrog errors."""
    code: Optional[str] = None
    retryable: bool = False


class RejectedAction(JumpFrogError):
    """A client request that was refused. Reported to the requester only."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.code is not None:
            payload["code"] = self.code
        return payload


class RoomNotFound(RejectedAction):
    code = "ROOM_NOT_FOUND"
    # Recoverable by creating a new room

    def __init__(self, message: str = "Room not found."):
        super().__init__(message)


class RoomFull(RejectedAction):
    code = "ROOM_FULL"

    def __init__(self, message: str = "Room is full."):
        super().__init__(message)


class AlreadyInRoom(RejectedAction):
    code = "ALREADY_IN_ROOM"

    def __init__(self, message: str = "Already in another room."):
        super().__init__(message)


class SearchFailed(JumpFrogError):
    """The bot search raised; the turn goes back to the human side."""
    retryable = True
