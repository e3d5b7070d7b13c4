"""REST service for networked games of Vändtia."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from random import Random
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.bot_arena import play_scripted_turns
from bots.policy import ScriptedBot
from engine.actions import apply_move, move_from_dict
from engine.service import TableService
from engine.state import GameState, InvalidSetup

from .rooms import InMemoryRoomStore, Room, RoomError, RoomNotFound, RoomPlayer, RoomStore

logger = logging.getLogger(__name__)

SCRIPTED_NAME = "Örjan"


class CreateRoomRequest(BaseModel):
    host_name: str
    session_id: Optional[str] = None


class JoinRoomRequest(BaseModel):
    code: str
    name: str
    session_id: Optional[str] = None


class StartRequest(BaseModel):
    session_id: str
    scripted_players: int = Field(0, ge=0, le=4)
    seed: Optional[int] = None


class MoveRequest(BaseModel):
    session_id: str
    move: Dict[str, Any]


_store = InMemoryRoomStore()


def get_store() -> RoomStore:
    return _store


app = FastAPI(title="Vändtia Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def load_room(store: RoomStore, room_id: str) -> Room:
    try:
        return store.load(room_id)
    except RoomNotFound as exc:
        raise HTTPException(status_code=404, detail="Room not found") from exc


def require_participant(store: RoomStore, room_id: str, session_id: str) -> RoomPlayer:
    load_room(store, room_id)
    player = store.seat_for(room_id, session_id)
    if player is None:
        raise HTTPException(status_code=403, detail="Not a participant")
    return player


def run_scripted_seats(state: GameState) -> GameState:
    bots = {index: ScriptedBot() for index, seat in enumerate(state.players) if seat.is_scripted}
    if not bots:
        return state
    return play_scripted_turns(state, bots)


def seat_payload(room: Room, player: RoomPlayer) -> Dict[str, object]:
    return {
        "room_id": room.id,
        "code": room.code,
        "session_id": player.session_id,
        "seat_index": player.player_index,
    }


@app.post("/rooms")
def create_room(request: CreateRoomRequest, store: RoomStore = Depends(get_store)) -> Dict[str, object]:
    session_id = request.session_id or uuid.uuid4().hex
    try:
        room, player = store.create(request.host_name, session_id)
    except RoomError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return seat_payload(room, player)


@app.post("/rooms/join")
def join_room(request: JoinRoomRequest, store: RoomStore = Depends(get_store)) -> Dict[str, object]:
    session_id = request.session_id or uuid.uuid4().hex
    try:
        room, player = store.join(request.code, request.name, session_id)
    except RoomNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RoomError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return seat_payload(room, player)


@app.post("/rooms/{room_id}/start")
def start_room(room_id: str, request: StartRequest, store: RoomStore = Depends(get_store)) -> Dict[str, object]:
    room = load_room(store, room_id)
    if room.host_session_id != request.session_id:
        raise HTTPException(status_code=403, detail="Only the host can start the game")
    scripted_names = [
        SCRIPTED_NAME if number == 0 else f"{SCRIPTED_NAME} {number + 1}"
        for number in range(request.scripted_players)
    ]
    rng = Random(request.seed) if request.seed is not None else None
    try:
        state = store.start(room_id, scripted_names=scripted_names, rng=rng)
    except InvalidSetup as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RoomError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    advanced = run_scripted_seats(state)
    if advanced is not state:
        store.persist(room_id, advanced)
    player = require_participant(store, room_id, request.session_id)
    return {"view": asdict(TableService(advanced).get_view(player.player_index))}


@app.get("/rooms/{room_id}/state")
def get_game_state(room_id: str, session_id: Optional[str] = None, store: RoomStore = Depends(get_store)) -> Dict[str, object]:
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session_id")
    player = require_participant(store, room_id, session_id)
    room = load_room(store, room_id)
    if room.game_state is None:
        return {"status": room.status.value, "version": room.version, "view": None}
    view = TableService(room.game_state).get_view(player.player_index)
    return {"status": room.status.value, "version": room.version, "view": asdict(view)}


@app.post("/rooms/{room_id}/moves")
def submit_move(room_id: str, request: MoveRequest, store: RoomStore = Depends(get_store)) -> Dict[str, object]:
    player = require_participant(store, room_id, request.session_id)
    room = load_room(store, room_id)
    if room.game_state is None:
        raise HTTPException(status_code=409, detail="The game has not started")
    try:
        move = move_from_dict(request.move)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    state = room.game_state
    successor = apply_move(state, move, player.player_index)
    accepted = successor is not state
    if accepted:
        successor = run_scripted_seats(successor)
        store.persist(room_id, successor)
    else:
        logger.debug(f"Room {room.code}: move from seat {player.player_index} rejected")

    room = load_room(store, room_id)
    view = TableService(room.game_state).get_view(player.player_index)
    return {"accepted": accepted, "version": room.version, "view": asdict(view)}
