"""JSON-compatible snapshots of a game state for room storage."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .cards import deserialize_card, serialize_card
from .state import Controller, GameState, Phase, Seat


def _seat_to_dict(seat: Seat) -> Dict[str, object]:
    return {
        "name": seat.name,
        "controller": seat.controller.value,
        "hand": [serialize_card(card) for card in seat.hand],
        "faceUp": [[serialize_card(card) for card in stack] for stack in seat.face_up],
        "faceDown": [serialize_card(card) for card in seat.face_down],
    }


def _seat_from_dict(payload: Mapping[str, Any]) -> Seat:
    return Seat(
        name=str(payload["name"]),
        hand=[deserialize_card(card) for card in payload.get("hand", [])],
        face_up=[[deserialize_card(card) for card in stack] for stack in payload.get("faceUp", [])],
        face_down=[deserialize_card(card) for card in payload.get("faceDown", [])],
        controller=Controller(payload.get("controller", Controller.HUMAN.value)),
    )


def _optional_index(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def state_to_dict(state: GameState) -> Dict[str, object]:
    """Return a canonical snapshot that :func:`state_from_dict` restores exactly."""
    return {
        "players": [_seat_to_dict(seat) for seat in state.players],
        "drawPile": [serialize_card(card) for card in state.draw_pile],
        "discardPile": [serialize_card(card) for card in state.discard_pile],
        "burnedPile": [serialize_card(card) for card in state.burned_pile],
        "currentPlayerIndex": state.current_player_index,
        "phase": state.phase.value,
        "swapConfirmed": list(state.swap_confirmed),
        "winner": state.winner,
        "message": state.message,
        "lastPlayedCards": [serialize_card(card) for card in state.last_played_cards],
        "mustCoverTwo": state.must_cover_two,
        "mustCoverTwoPlayerIndex": state.must_cover_two_player_index,
    }


def state_from_dict(payload: Mapping[str, Any]) -> GameState:
    players = [_seat_from_dict(seat) for seat in payload["players"]]
    return GameState(
        players=players,
        draw_pile=[deserialize_card(card) for card in payload.get("drawPile", [])],
        discard_pile=[deserialize_card(card) for card in payload.get("discardPile", [])],
        burned_pile=[deserialize_card(card) for card in payload.get("burnedPile", [])],
        current_player_index=int(payload.get("currentPlayerIndex", 0)),
        phase=Phase(payload.get("phase", Phase.SWAP.value)),
        swap_confirmed=[bool(flag) for flag in payload.get("swapConfirmed", [False] * len(players))],
        winner=_optional_index(payload.get("winner")),
        message=str(payload.get("message", "")),
        last_played_cards=[deserialize_card(card) for card in payload.get("lastPlayedCards", [])],
        # Older snapshots predate the two-cover fields.
        must_cover_two=bool(payload.get("mustCoverTwo", False)),
        must_cover_two_player_index=_optional_index(payload.get("mustCoverTwoPlayerIndex")),
    )
