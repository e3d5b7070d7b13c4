"""Game state data structures for Vändtia."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from .cards import Card


class InvalidSetup(ValueError):
    """Raised when a game cannot be dealt for the requested seats."""


class Phase(str, Enum):
    SWAP = "swap"
    PLAY = "play"
    FINISHED = "finished"


class Controller(str, Enum):
    """Who picks moves for a seat."""

    HUMAN = "human"
    SCRIPTED = "scripted"


class PlaySource(str, Enum):
    HAND = "hand"
    FACE_UP = "faceUp"
    FACE_DOWN = "faceDown"


@dataclass
class Seat:
    name: str
    hand: List[Card] = field(default_factory=list)
    face_up: List[List[Card]] = field(default_factory=lambda: [[], [], []])
    face_down: List[Card] = field(default_factory=list)
    controller: Controller = Controller.HUMAN

    def copy(self) -> "Seat":
        return Seat(
            name=self.name,
            hand=list(self.hand),
            face_up=[list(stack) for stack in self.face_up],
            face_down=list(self.face_down),
            controller=self.controller,
        )

    @property
    def is_scripted(self) -> bool:
        return self.controller is Controller.SCRIPTED

    def face_up_tops(self) -> List[Card]:
        """Return the visible top card of every non-empty face-up stack."""
        return [stack[-1] for stack in self.face_up if stack]

    def face_up_cards(self) -> List[Card]:
        return [card for stack in self.face_up for card in stack]

    def has_face_up(self) -> bool:
        return any(self.face_up)

    def has_won(self) -> bool:
        return not self.hand and not self.has_face_up() and not self.face_down


def play_source(seat: Seat) -> PlaySource:
    """Return the only zone the seat may currently play from."""
    if seat.hand:
        return PlaySource.HAND
    if seat.has_face_up():
        return PlaySource.FACE_UP
    return PlaySource.FACE_DOWN


@dataclass
class GameState:
    players: List[Seat]
    draw_pile: List[Card] = field(default_factory=list)
    discard_pile: List[Card] = field(default_factory=list)
    current_player_index: int = 0
    phase: Phase = Phase.SWAP
    swap_confirmed: List[bool] = field(default_factory=list)
    winner: Optional[int] = None
    message: str = ""
    last_played_cards: List[Card] = field(default_factory=list)
    must_cover_two: bool = False
    must_cover_two_player_index: Optional[int] = None
    burned_pile: List[Card] = field(default_factory=list)

    def copy(self) -> "GameState":
        """Return an isolated copy; cards are immutable and may be shared."""
        return GameState(
            players=[seat.copy() for seat in self.players],
            draw_pile=list(self.draw_pile),
            discard_pile=list(self.discard_pile),
            current_player_index=self.current_player_index,
            phase=self.phase,
            swap_confirmed=list(self.swap_confirmed),
            winner=self.winner,
            message=self.message,
            last_played_cards=list(self.last_played_cards),
            must_cover_two=self.must_cover_two,
            must_cover_two_player_index=self.must_cover_two_player_index,
            burned_pile=list(self.burned_pile),
        )

    @property
    def current_seat(self) -> Seat:
        return self.players[self.current_player_index]

    def is_finished(self) -> bool:
        return self.phase is Phase.FINISHED

    def must_cover_two_now(self) -> bool:
        return self.must_cover_two and self.must_cover_two_player_index == self.current_player_index

    def iter_cards(self) -> Iterator[Card]:
        """Yield all 52 cards zone by zone, cleared cards included."""
        for seat in self.players:
            yield from seat.hand
            yield from seat.face_up_cards()
            yield from seat.face_down
        yield from self.draw_pile
        yield from self.discard_pile
        yield from self.burned_pile
