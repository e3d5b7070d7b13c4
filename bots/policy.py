"""Scripted opponent policy.

The policy keeps 2s and 10s on the table for the endgame, plays its
cheapest cards first and clears the pile whenever it can.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from engine.actions import ConfirmMove, DrawAndTryMove, FaceDownMove, PickupMove, PlayMove, SwapMove
from engine.cards import Card
from engine.game import can_draw_from_talong
from engine.mechanics import CLEAR_VALUE, RESET_VALUE, playable_groups, would_complete_four_of_a_kind
from engine.state import GameState, PlaySource, play_source

from .base import BotStrategy, PlayDecision, SwapDecision

logger = logging.getLogger(__name__)

POWER_SCORES = {RESET_VALUE: 200, CLEAR_VALUE: 190}


def power_score(card: Card) -> int:
    """Endgame worth of a card; always-playable cards rank highest."""
    return POWER_SCORES.get(card.value, card.value)


def _promotion_key(card: Card) -> Tuple[int, int, str]:
    return (-power_score(card), -card.value, card.id)


def _replacement_key(card: Card) -> Tuple[int, int, str]:
    return (power_score(card), card.value, card.id)


def choose_swap_decision(state: GameState, seat_index: int) -> SwapDecision:
    seat = state.players[seat_index]
    tops = seat.face_up_tops()
    if not seat.hand or not tops:
        return ConfirmMove()

    promote = min(seat.hand, key=_promotion_key)
    replace = min(tops, key=_replacement_key)

    matching = next((card for card in tops if card.value == promote.value), None)
    if matching is not None:
        return SwapMove(hand_card_id=promote.id, face_up_card_id=matching.id)

    # Strict improvement only, so equal duplicates cannot swap back and forth.
    if power_score(promote) <= power_score(replace):
        return ConfirmMove()
    return SwapMove(hand_card_id=promote.id, face_up_card_id=replace.id)


def choose_play_decision(state: GameState, seat_index: int) -> PlayDecision:
    seat = state.players[seat_index]
    source = play_source(seat)

    if source is PlaySource.FACE_DOWN:
        if not seat.face_down:
            return PickupMove()
        return FaceDownMove(card_id=seat.face_down[0].id)

    groups = playable_groups(seat, state.discard_pile)
    if not groups:
        if state.current_player_index == seat_index and can_draw_from_talong(state):
            return DrawAndTryMove()
        return PickupMove()

    chosen = _pick_value(groups, state)
    return PlayMove(card_ids=tuple(card.id for card in groups[chosen]))


def _pick_value(groups: Dict[int, List[Card]], state: GameState) -> int:
    values = sorted(groups)
    if CLEAR_VALUE in values:
        return CLEAR_VALUE
    completing: Optional[int] = next(
        (value for value in values if would_complete_four_of_a_kind(value, state.discard_pile, len(groups[value]))),
        None,
    )
    if completing is not None:
        return completing
    ordinary = [value for value in values if value not in (RESET_VALUE, CLEAR_VALUE)]
    if ordinary:
        return ordinary[0]
    if RESET_VALUE in values:
        return RESET_VALUE
    return values[0]


class ScriptedBot(BotStrategy):
    name = "Scripted"

    def choose_swap(self, state: GameState, seat_index: int) -> SwapDecision:
        decision = choose_swap_decision(state, seat_index)
        logger.debug(f"{self.name} seat {seat_index} swap decision: {decision}")
        return decision

    def choose_play(self, state: GameState, seat_index: int) -> PlayDecision:
        decision = choose_play_decision(state, seat_index)
        logger.debug(f"{self.name} seat {seat_index} play decision: {decision}")
        return decision
