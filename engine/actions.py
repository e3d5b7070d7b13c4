"""Move intents and their dispatch onto the transition engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from .game import (
    can_draw_from_talong,
    can_pick_up_pile,
    confirm_swap,
    draw_and_try_from_talong,
    pick_up_pile,
    play_cards,
    swap_cards,
)
from .mechanics import playable_groups
from .rules_schema import TableConfig
from .state import GameState, Phase, PlaySource, play_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapMove:
    hand_card_id: str
    face_up_card_id: str


@dataclass(frozen=True)
class ConfirmMove:
    pass


@dataclass(frozen=True)
class PlayMove:
    card_ids: Tuple[str, ...]


@dataclass(frozen=True)
class FaceDownMove:
    card_id: str


@dataclass(frozen=True)
class DrawAndTryMove:
    pass


@dataclass(frozen=True)
class PickupMove:
    pass


Move = Union[SwapMove, ConfirmMove, PlayMove, FaceDownMove, DrawAndTryMove, PickupMove]


def apply_move(
    state: GameState,
    move: Move,
    seat_index: Optional[int] = None,
    *,
    config: Optional[TableConfig] = None,
) -> GameState:
    """Apply a move for the acting seat.

    ``seat_index`` names who submitted the move; moves from anyone but
    the acting seat are silently rejected like any other illegal move.
    """
    acting = state.current_player_index
    if seat_index is not None and seat_index != acting:
        logger.debug(f"Move rejected: seat {seat_index} acted out of turn (seat {acting} to act)")
        return state
    if isinstance(move, SwapMove):
        return swap_cards(state, acting, move.hand_card_id, move.face_up_card_id)
    if isinstance(move, ConfirmMove):
        return confirm_swap(state, acting)
    if isinstance(move, PlayMove):
        return play_cards(state, move.card_ids, config=config)
    if isinstance(move, FaceDownMove):
        return play_cards(state, [move.card_id], config=config)
    if isinstance(move, DrawAndTryMove):
        return draw_and_try_from_talong(state, config=config)
    if isinstance(move, PickupMove):
        return pick_up_pile(state)
    raise TypeError(f"Unknown move {move!r}")


def legal_moves(state: GameState) -> List[Move]:
    """Enumerate the moves the acting seat may make.

    Plays list each playable card on its own plus, where several cards
    share a value, the whole group at once.
    """
    if state.phase is Phase.FINISHED:
        return []
    seat = state.current_seat

    if state.phase is Phase.SWAP:
        if state.swap_confirmed[state.current_player_index]:
            return []
        moves: List[Move] = [
            SwapMove(hand_card.id, top.id) for hand_card in seat.hand for top in seat.face_up_tops()
        ]
        moves.append(ConfirmMove())
        return moves

    moves = []
    source = play_source(seat)
    if source is PlaySource.FACE_DOWN:
        moves.extend(FaceDownMove(card.id) for card in seat.face_down)
    else:
        tops = seat.face_up_tops()
        for group in playable_groups(seat, state.discard_pile).values():
            singles = group if source is PlaySource.HAND else [card for card in group if card in tops]
            moves.extend(PlayMove((card.id,)) for card in singles)
            if len(group) > 1:
                moves.append(PlayMove(tuple(card.id for card in group)))
    if can_draw_from_talong(state):
        moves.append(DrawAndTryMove())
    if can_pick_up_pile(state):
        moves.append(PickupMove())
    return moves


# Serialization ---------------------------------------------------------


def move_to_dict(move: Move) -> Dict[str, object]:
    if isinstance(move, SwapMove):
        return {"type": "swap", "handCardId": move.hand_card_id, "faceUpCardId": move.face_up_card_id}
    if isinstance(move, ConfirmMove):
        return {"type": "confirm"}
    if isinstance(move, PlayMove):
        return {"type": "play", "cardIds": list(move.card_ids)}
    if isinstance(move, FaceDownMove):
        return {"type": "faceDown", "cardId": move.card_id}
    if isinstance(move, DrawAndTryMove):
        return {"type": "drawAndTry"}
    if isinstance(move, PickupMove):
        return {"type": "pickup"}
    raise TypeError(f"Unknown move {move!r}")


def _parse_play(payload: Mapping[str, object]) -> PlayMove:
    card_ids = payload["cardIds"]
    if not isinstance(card_ids, (list, tuple)):
        raise ValueError(f"cardIds must be a list of card ids, got {card_ids!r}")
    return PlayMove(tuple(str(card_id) for card_id in card_ids))


_PARSERS: Dict[str, Callable[[Mapping[str, object]], Move]] = {
    "swap": lambda payload: SwapMove(str(payload["handCardId"]), str(payload["faceUpCardId"])),
    "confirm": lambda payload: ConfirmMove(),
    "play": _parse_play,
    "faceDown": lambda payload: FaceDownMove(str(payload["cardId"])),
    "drawAndTry": lambda payload: DrawAndTryMove(),
    "pickup": lambda payload: PickupMove(),
}


def move_from_dict(payload: Mapping[str, object]) -> Move:
    move_type = payload.get("type")
    parser = _PARSERS.get(str(move_type))
    if parser is None:
        raise ValueError(f"Unknown move type: {move_type!r}")
    try:
        return parser(payload)
    except KeyError as exc:
        raise ValueError(f"Move of type {move_type!r} is missing {exc.args[0]!r}") from exc
