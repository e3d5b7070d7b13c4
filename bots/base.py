"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Union

from engine.actions import (
    ConfirmMove,
    DrawAndTryMove,
    FaceDownMove,
    PickupMove,
    PlayMove,
    SwapMove,
)
from engine.state import GameState

SwapDecision = Union[SwapMove, ConfirmMove]
PlayDecision = Union[FaceDownMove, PlayMove, DrawAndTryMove, PickupMove]


class BotStrategy:
    """Base class for bot policies.

    Bots read the state and return a move; they never change the state
    themselves. Every decision goes back through the transition engine.
    """

    name: str = "BaseBot"

    def on_game_start(self, state: GameState, seat_index: int) -> None:
        """Optional hook invoked once the cards are dealt."""
        return None

    def choose_swap(self, state: GameState, seat_index: int) -> SwapDecision:
        """Return a swap to make, or confirm the current table."""
        return ConfirmMove()

    def choose_play(self, state: GameState, seat_index: int) -> PlayDecision:
        """Return the move to make during the play phase."""
        return PickupMove()
