"""Room storage for networked games.

The store keeps one authoritative game state per room. Writes are
last-write-wins; every write bumps the room's version and notifies the
room's subscribers.
"""

from __future__ import annotations

import logging
import random
import string
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from engine.game import deal_game
from engine.rules_schema import DEFAULT_CONFIG, TableConfig
from engine.state import Controller, GameState

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits

Subscriber = Callable[[GameState], None]


class RoomError(RuntimeError):
    """Raised when a room operation is not allowed."""


class RoomNotFound(RoomError, LookupError):
    """Raised when a room id or code does not exist."""


class RoomStatus(str, Enum):
    LOBBY = "lobby"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass
class RoomPlayer:
    room_id: str
    session_id: str
    name: str
    player_index: int
    controller: Controller = Controller.HUMAN


@dataclass
class Room:
    id: str
    code: str
    host_session_id: str
    status: RoomStatus = RoomStatus.LOBBY
    game_state: Optional[GameState] = None
    version: int = 0
    players: List[RoomPlayer] = field(default_factory=list)


class RoomStore:
    """Contract for whatever persists rooms and their game state."""

    def create(self, host_name: str, session_id: str) -> Tuple[Room, RoomPlayer]:
        raise NotImplementedError

    def join(self, code: str, name: str, session_id: str) -> Tuple[Room, RoomPlayer]:
        raise NotImplementedError

    def add_scripted_player(self, room_id: str, name: str) -> RoomPlayer:
        raise NotImplementedError

    def start(
        self,
        room_id: str,
        *,
        scripted_names: Sequence[str] = (),
        rng: Optional[Random] = None,
    ) -> GameState:
        """Seat ``scripted_names`` and deal; on failure the lobby is left as it was."""
        raise NotImplementedError

    def load(self, room_id: str) -> Room:
        raise NotImplementedError

    def persist(self, room_id: str, state: GameState) -> int:
        """Store ``state`` as the room's latest state; returns the new version."""
        raise NotImplementedError

    def subscribe(self, room_id: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for state changes; returns an unsubscribe function."""
        raise NotImplementedError

    def seat_for(self, room_id: str, session_id: str) -> Optional[RoomPlayer]:
        room = self.load(room_id)
        return next((player for player in room.players if player.session_id == session_id), None)


class InMemoryRoomStore(RoomStore):
    """Thread-safe store keeping rooms in process memory."""

    def __init__(self, *, config: Optional[TableConfig] = None, rng: Optional[Random] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()
        self._rooms: Dict[str, Room] = {}
        self._codes: Dict[str, str] = {}
        self._subscribers: Dict[str, List[Subscriber]] = {}

    # Lobby -------------------------------------------------------------

    def create(self, host_name: str, session_id: str) -> Tuple[Room, RoomPlayer]:
        name = self._validate_name(host_name)
        with self._lock:
            code = self._generate_code()
            room = Room(id=uuid.uuid4().hex, code=code, host_session_id=session_id)
            player = RoomPlayer(room_id=room.id, session_id=session_id, name=name, player_index=0)
            room.players.append(player)
            self._rooms[room.id] = room
            self._codes[code] = room.id
        logger.info(f"Room {room.code} created by {name}")
        return room, player

    def join(self, code: str, name: str, session_id: str) -> Tuple[Room, RoomPlayer]:
        valid_name = self._validate_name(name)
        with self._lock:
            room_id = self._codes.get(code.strip().upper())
            if room_id is None:
                raise RoomNotFound(f"No room with code {code!r}")
            room = self._rooms[room_id]
            existing = next((p for p in room.players if p.session_id == session_id), None)
            if existing is not None:
                return room, existing
            if room.status is not RoomStatus.LOBBY:
                raise RoomError(f"Room {room.code} is no longer accepting players")
            if len(room.players) >= self.config.max_players:
                raise RoomError(f"Room {room.code} is full")
            player = RoomPlayer(
                room_id=room.id,
                session_id=session_id,
                name=valid_name,
                player_index=len(room.players),
            )
            room.players.append(player)
        logger.info(f"{valid_name} joined room {room.code} at seat {player.player_index}")
        return room, player

    def add_scripted_player(self, room_id: str, name: str) -> RoomPlayer:
        """Seat a scripted opponent; it gets a session id nobody else holds."""
        valid_name = self._validate_name(name)
        with self._lock:
            room = self._get(room_id)
            if room.status is not RoomStatus.LOBBY:
                raise RoomError(f"Room {room.code} is no longer accepting players")
            if len(room.players) >= self.config.max_players:
                raise RoomError(f"Room {room.code} is full")
            player = self._scripted_player(room, valid_name, len(room.players))
            room.players.append(player)
        return player

    def start(
        self,
        room_id: str,
        *,
        scripted_names: Sequence[str] = (),
        rng: Optional[Random] = None,
    ) -> GameState:
        names = [self._validate_name(name) for name in scripted_names]
        with self._lock:
            room = self._get(room_id)
            if room.status is not RoomStatus.LOBBY:
                raise RoomError(f"Room {room.code} has already started")
            if len(room.players) + len(names) > self.config.max_players:
                raise RoomError(f"Room {room.code} has no room for {len(names)} scripted players")
            players = sorted(room.players, key=lambda player: player.player_index)
            seated = len(players)
            players += [self._scripted_player(room, name, seated + offset) for offset, name in enumerate(names)]
            state = deal_game(
                [player.name for player in players],
                controllers=[player.controller for player in players],
                rng=rng,
                config=self.config,
            )
            room.players = players
            room.status = RoomStatus.PLAYING
        self.persist(room_id, state)
        logger.info(f"Room {room.code} started with {len(players)} players")
        return state

    # State -------------------------------------------------------------

    def load(self, room_id: str) -> Room:
        with self._lock:
            return self._get(room_id)

    def persist(self, room_id: str, state: GameState) -> int:
        with self._lock:
            room = self._get(room_id)
            room.game_state = state
            room.version += 1
            room.status = RoomStatus.FINISHED if state.is_finished() else RoomStatus.PLAYING
            version = room.version
            subscribers = list(self._subscribers.get(room_id, []))
        for callback in subscribers:
            callback(state)
        return version

    def subscribe(self, room_id: str, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._get(room_id)
            self._subscribers.setdefault(room_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(room_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    # Helpers -----------------------------------------------------------

    def _get(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(f"Room {room_id} not found")
        return room

    def _scripted_player(self, room: Room, name: str, player_index: int) -> RoomPlayer:
        return RoomPlayer(
            room_id=room.id,
            session_id=f"scripted-{uuid.uuid4().hex}",
            name=name,
            player_index=player_index,
            controller=Controller.SCRIPTED,
        )

    def _generate_code(self) -> str:
        while True:
            code = "".join(self._rng.choice(CODE_ALPHABET) for _ in range(self.config.room_code_length))
            if code not in self._codes:
                return code

    def _validate_name(self, name: str) -> str:
        trimmed = name.strip()[: self.config.name_max_length]
        if not trimmed:
            raise RoomError("Player name cannot be empty")
        return trimmed

