"""Seat-scoped views of a game for UI and network consumers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import List, Optional, Sequence

from .actions import Move, apply_move, legal_moves, move_to_dict
from .cards import HiddenCard
from .game import can_draw_from_talong, can_pick_up_pile, deal_game
from .rules_schema import TableConfig
from .serialize import state_to_dict
from .state import Controller, GameState

logger = logging.getLogger(__name__)


def project_state(state: GameState, viewer: int) -> GameState:
    """Return a copy of ``state`` as seat ``viewer`` is allowed to see it.

    Other seats' hands and face-down cards, and the stock, become
    :class:`HiddenCard` placeholders with position-derived ids. Zone
    sizes are kept. Face-up stacks and the discard pile are public.
    """
    projected = state.copy()
    for index, seat in enumerate(projected.players):
        if index == viewer:
            continue
        seat.hand = [HiddenCard(id=f"hidden_h_{index}_{pos}") for pos in range(len(seat.hand))]
        seat.face_down = [
            HiddenCard(id=f"hidden_fd_{index}_{pos}") for pos in range(len(seat.face_down))
        ]
    projected.draw_pile = [HiddenCard(id=f"hidden_dp_{pos}") for pos in range(len(state.draw_pile))]
    return projected


@dataclass
class TableView:
    viewer: int
    phase: str
    current_player: int
    is_my_turn: bool
    must_cover_two: bool
    winner: Optional[int]
    message: str
    state: dict
    legal_moves: list[dict]
    can_draw_from_talong: bool
    can_pick_up_pile: bool


class TableService:
    """Facade holding the latest state of one table."""

    def __init__(self, state: Optional[GameState] = None, *, config: Optional[TableConfig] = None) -> None:
        self.state = state
        self.config = config

    # Lifecycle ---------------------------------------------------------

    def start_new_game(
        self,
        names: Sequence[str],
        *,
        controllers: Optional[Sequence[Controller]] = None,
        rng: Optional[Random] = None,
    ) -> GameState:
        self.state = deal_game(names, controllers=controllers, rng=rng, config=self.config)
        return self.state

    def has_active_game(self) -> bool:
        return self.state is not None

    # Actions -----------------------------------------------------------

    def submit(self, seat_index: int, move: Move) -> bool:
        """Apply a move; returns False when the engine rejected it."""
        state = self._require_state()
        successor = apply_move(state, move, seat_index, config=self.config)
        if successor is state:
            logger.debug(f"Seat {seat_index} submitted a rejected move: {move_to_dict(move)}")
            return False
        self.state = successor
        return True

    # Views -------------------------------------------------------------

    def get_view(self, viewer: int) -> TableView:
        state = self._require_state()
        is_my_turn = state.current_player_index == viewer and not state.is_finished()
        moves: List[dict] = [move_to_dict(move) for move in legal_moves(state)] if is_my_turn else []
        return TableView(
            viewer=viewer,
            phase=state.phase.value,
            current_player=state.current_player_index,
            is_my_turn=is_my_turn,
            must_cover_two=state.must_cover_two_now(),
            winner=state.winner,
            message=state.message,
            state=state_to_dict(project_state(state, viewer)),
            legal_moves=moves,
            can_draw_from_talong=is_my_turn and can_draw_from_talong(state),
            can_pick_up_pile=is_my_turn and can_pick_up_pile(state),
        )

    # Helpers -----------------------------------------------------------

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("No active game.")
        return self.state
