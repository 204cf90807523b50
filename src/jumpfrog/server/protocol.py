"""Pydantic models for the room/game WebSocket protocol.

Keep transport concerns (event names, payload validation) here and the game
types in `jumpfrog.types`. Every message is a JSON envelope
`{"event": <name>, "data": {...}}`.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..types import Move, move_from_dict

# Client -> server
ROOM_CREATE = "room:create"
ROOM_JOIN = "room:join"
MOVE_REQUEST = "move:request"
TURN_END = "turn:end"
ROOM_LEAVE = "room:leave"

# Server -> client
ROOM_CREATED = "room:created"
ROOM_STATE = "room:state"
ROOM_ERROR = "room:error"

BAD_REQUEST = "BAD_REQUEST"
OPPONENT_DISCONNECTED = "OPPONENT_DISCONNECTED"


class Envelope(BaseModel):
    event: str
    data: Dict[str, Any] = Field(default_factory=dict)


class CoordModel(BaseModel):
    r: int = Field(ge=0, le=7)
    c: int = Field(ge=0, le=7)


class StepModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["STEP"]
    from_: CoordModel = Field(alias="from")
    to: CoordModel


class JumpModel(BaseModel):
    type: Literal["JUMP"]
    path: List[CoordModel] = Field(min_length=2)


MoveModel = Annotated[Union[StepModel, JumpModel], Field(discriminator="type")]


class RoomPayload(BaseModel):
    """Base for payloads that name a room."""
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId", min_length=1)


class RoomJoinPayload(RoomPayload):
    pass


class TurnEndPayload(RoomPayload):
    pass


class RoomLeavePayload(RoomPayload):
    pass


class MoveRequestPayload(RoomPayload):
    move: MoveModel

    def to_move(self) -> Move:
        return move_from_dict(self.move.model_dump(by_alias=True))


def message(event: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return {"event": event, "data": data}


def error_message(text: str, code: Optional[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"message": text}
    if code is not None:
        data["code"] = code
    return message(ROOM_ERROR, data)
