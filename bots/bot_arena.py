"""Simple bot arena for Vändtia."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from random import Random
from typing import Dict, Iterable, Mapping, Optional, Sequence

from engine.actions import Move, apply_move
from engine.game import deal_game
from engine.state import Controller, GameState, Phase

from .base import BotStrategy
from .policy import ScriptedBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "scripted": ScriptedBot,
    "random": RandomBot,
}

# Pickups can recycle the same cards forever; cap a game's length.
DEFAULT_MAX_MOVES = 2000


class BotMoveRejected(RuntimeError):
    """Raised when a bot proposes a move the engine does not accept."""


def choose_move(bot: BotStrategy, state: GameState, seat_index: int) -> Move:
    if state.phase is Phase.SWAP:
        return bot.choose_swap(state, seat_index)
    return bot.choose_play(state, seat_index)


def play_scripted_turns(
    state: GameState,
    bots: Mapping[int, BotStrategy],
    *,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> GameState:
    """Let bot seats act until a seat without a bot must move or the game ends."""
    for _ in range(max_moves):
        if state.is_finished() or state.current_player_index not in bots:
            return state
        seat_index = state.current_player_index
        bot = bots[seat_index]
        move = choose_move(bot, state, seat_index)
        successor = apply_move(state, move, seat_index)
        if successor is state:
            raise BotMoveRejected(f"{bot.name} at seat {seat_index} proposed an illegal move: {move}")
        state = successor
    return state


@dataclass
class GameResult:
    winner: Optional[int]
    moves: int
    final_state: GameState


def play_game(
    bots: Sequence[BotStrategy],
    *,
    rng: Optional[Random] = None,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> GameResult:
    names = [f"{bot.name} {index + 1}" for index, bot in enumerate(bots)]
    state = deal_game(names, controllers=[Controller.SCRIPTED] * len(bots), rng=rng)
    for index, bot in enumerate(bots):
        bot.on_game_start(state, index)

    seats = dict(enumerate(bots))
    moves = 0
    while not state.is_finished() and moves < max_moves:
        state = play_scripted_turns(state, seats, max_moves=1)
        moves += 1

    if not state.is_finished():
        logger.warning(f"Game abandoned after {moves} moves without a winner")
    return GameResult(winner=state.winner, moves=moves, final_state=state)


def run_match(
    bots: Sequence[BotStrategy],
    *,
    n_games: int = 10,
    seed: int | None = None,
    max_moves: int = DEFAULT_MAX_MOVES,
) -> dict:
    rng = Random(seed)
    wins = [0] * len(bots)
    unfinished = 0
    history = []
    for _ in range(n_games):
        result = play_game(bots, rng=rng, max_moves=max_moves)
        if result.winner is None:
            unfinished += 1
        else:
            wins[result.winner] += 1
        history.append({"winner": result.winner, "moves": result.moves})
    return {"wins": wins, "unfinished": unfinished, "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument(
        "--bots",
        nargs="+",
        default=["scripted", "random"],
        choices=BOT_REGISTRY.keys(),
        help="One bot per seat, in seat order.",
    )
    parser.add_argument("--n", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-moves", type=int, default=DEFAULT_MAX_MOVES)
    parser.add_argument("--verbose", action="store_true", help="Log every bot decision.")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    bots = [BOT_REGISTRY[name]() for name in args.bots]
    results = run_match(bots, n_games=args.n, seed=args.seed, max_moves=args.max_moves)

    for index, bot in enumerate(bots):
        print(f"Seat {index} ({bot.name}): {results['wins'][index]}/{args.n} wins")
    print(f"Unfinished games: {results['unfinished']}")


if __name__ == "__main__":
    main()
