"""Random baseline bot for arena comparisons."""

from __future__ import annotations

import random
from typing import Optional

from engine.actions import ConfirmMove, SwapMove, legal_moves
from engine.state import GameState

from .base import BotStrategy, PlayDecision, SwapDecision


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None, swap_rate: float = 0.3) -> None:
        self._rng = random.Random(seed)
        self._swap_rate = swap_rate

    def choose_swap(self, state: GameState, seat_index: int) -> SwapDecision:
        swaps = [move for move in legal_moves(state) if isinstance(move, SwapMove)]
        # Confirming most of the time keeps the swap phase short.
        if not swaps or self._rng.random() >= self._swap_rate:
            return ConfirmMove()
        return self._rng.choice(swaps)

    def choose_play(self, state: GameState, seat_index: int) -> PlayDecision:
        legal = legal_moves(state)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return self._rng.choice(legal)  # type: ignore[return-value]
