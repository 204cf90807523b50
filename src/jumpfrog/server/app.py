"""
JumpFrog multiplayer server - FastAPI application.

Clients talk over one WebSocket each (/ws) using the events in
`jumpfrog.server.protocol`. All room mutation happens synchronously inside
a handler or timer callback on the event loop; outgoing messages are queued
per connection and written by a sender task.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from ..config import Config, get_config
from ..exceptions import RejectedAction
from . import protocol
from .logic import TurnController
from .rooms import Room, RoomManager
from .scheduler import LoopScheduler, Scheduler

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """One client socket and its outgoing message queue."""
    id: str
    origin: Optional[str] = None
    outbox: "asyncio.Queue[Dict[str, Any]]" = field(default_factory=asyncio.Queue)

    def send(self, msg: Dict[str, Any]) -> None:
        self.outbox.put_nowait(msg)


class GameServer:
    """Routes protocol events to the room manager and turn controller."""

    def __init__(self, config: Config, scheduler: Optional[Scheduler] = None, rng=None):
        self.config = config
        self.scheduler = scheduler or LoopScheduler()
        self.connections: Dict[str, Connection] = {}
        self.rooms = RoomManager(
            self.scheduler,
            grace_ms=config.timing.disconnect_grace_ms,
            rng=rng,
            on_room_changed=self.broadcast_room_state,
        )
        self.turns = TurnController(
            self.scheduler,
            self.broadcast_room_state,
            window_ms=config.timing.continuation_window_ms,
            tick_ms=config.timing.continuation_tick_ms,
        )

    def connect(self, origin: Optional[str] = None) -> Connection:
        conn = Connection(id=uuid.uuid4().hex, origin=origin)
        self.connections[conn.id] = conn
        logger.info("connection opened: %s", conn.id)
        return conn

    def broadcast_room_state(self, room: Room) -> None:
        """Send one snapshot of the room to every live member."""
        snapshot = protocol.message(
            protocol.ROOM_STATE, {"roomId": room.id, "state": room.state.to_dict()}
        )
        for connection_id in room.connections:
            conn = self.connections.get(connection_id)
            if conn is not None:
                conn.send(snapshot)

    def share_url(self, conn: Connection, room_id: str) -> str:
        base = (conn.origin or self.config.server.share_base).rstrip("/")
        return f"{base}/play/{room_id}"

    def dispatch(self, conn: Connection, raw: str) -> None:
        """Handle one inbound message. Rejections go back to the sender only."""
        try:
            envelope = protocol.Envelope.model_validate(json.loads(raw))
            self._handle(conn, envelope.event, envelope.data)
        except RejectedAction as e:
            conn.send(protocol.message(protocol.ROOM_ERROR, e.to_payload()))
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.debug("bad request from %s: %s", conn.id, e)
            conn.send(protocol.error_message("Malformed request.", protocol.BAD_REQUEST))

    def _handle(self, conn: Connection, event: str, data: Dict[str, Any]) -> None:
        if event == protocol.ROOM_CREATE:
            room = self.rooms.create_room(conn.id)
            conn.send(protocol.message(protocol.ROOM_CREATED, {
                "roomId": room.id,
                "shareUrl": self.share_url(conn, room.id),
            }))

        elif event == protocol.ROOM_JOIN:
            payload = protocol.RoomJoinPayload.model_validate(data)
            result = self.rooms.join_room(payload.room_id, conn.id)
            conn.send(protocol.message(protocol.ROOM_STATE, {
                "roomId": result.room.id,
                "state": result.room.state.to_dict(),
            }))
            if result.assigned_colors:
                self.broadcast_room_state(result.room)

        elif event == protocol.MOVE_REQUEST:
            payload = protocol.MoveRequestPayload.model_validate(data)
            room = self.rooms.get_room(payload.room_id)
            self.turns.handle_move_request(room, conn.id, payload.to_move())

        elif event == protocol.TURN_END:
            payload = protocol.TurnEndPayload.model_validate(data)
            room = self.rooms.get_room(payload.room_id)
            self.turns.handle_turn_end(room, conn.id)

        elif event == protocol.ROOM_LEAVE:
            payload = protocol.RoomLeavePayload.model_validate(data)
            room = self.rooms.leave_room(payload.room_id, conn.id)
            if room is not None:
                self.broadcast_room_state(room)

        else:
            raise ValueError(f"Unknown event: {event!r}")

    def disconnect(self, conn: Connection) -> None:
        """Socket closed without room:leave: start the grace window."""
        self.connections.pop(conn.id, None)
        logger.info("connection closed: %s", conn.id)

        room = self.rooms.find_room_by_connection(conn.id)
        if room is None:
            return
        room = self.rooms.mark_disconnected(room.id, conn.id)
        if room is None:
            return
        notice = protocol.error_message("Opponent disconnected.", protocol.OPPONENT_DISCONNECTED)
        for connection_id in room.connections:
            other = self.connections.get(connection_id)
            if other is not None:
                other.send(notice)
        self.broadcast_room_state(room)


async def _drain(websocket: WebSocket, conn: Connection) -> None:
    try:
        while True:
            msg = await conn.outbox.get()
            await websocket.send_json(msg)
    except (WebSocketDisconnect, RuntimeError):
        # Socket already closed; the receive loop handles the disconnect
        logger.debug("sender stopped for %s", conn.id)


def create_app(config: Optional[Config] = None, scheduler: Optional[Scheduler] = None,
               rng=None) -> FastAPI:
    """Build the FastAPI app with a fresh in-memory room registry."""
    config = config or get_config()

    app = FastAPI(
        title="JumpFrog Server",
        description="Authoritative rooms and turn arbitration for JumpFrog",
        version="1.0.0",
    )
    # Reflect any origin so shared links work from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    server = GameServer(config, scheduler=scheduler, rng=rng)
    app.state.game_server = server

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        conn = server.connect(origin=websocket.headers.get("origin"))
        sender = asyncio.create_task(_drain(websocket, conn))
        try:
            while True:
                raw = await websocket.receive_text()
                server.dispatch(conn, raw)
        except WebSocketDisconnect:
            pass
        finally:
            server.disconnect(conn)
            sender.cancel()

    return app
