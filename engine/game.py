"""State transitions for a game of Vändtia.

Every transition takes a :class:`GameState` and returns a successor.
The input is never modified: work happens on ``state.copy()``. A move
that is not legal in the given state returns the input object itself,
so stale or racing clients cannot corrupt a game.
"""

from __future__ import annotations

import logging
from random import Random
from typing import Iterable, List, Optional, Sequence

from .cards import Card, card_label, sort_cards
from .deck import DECK_SIZE, create_deck
from .mechanics import (
    CLEAR_VALUE,
    RESET_VALUE,
    can_play_card,
    clears_pile,
    next_player,
    playable_cards,
    reachable_face_up,
)
from .rules_schema import DEFAULT_CONFIG, TableConfig
from .state import Controller, GameState, InvalidSetup, Phase, PlaySource, Seat, play_source

logger = logging.getLogger(__name__)


def _reject(state: GameState, reason: str) -> GameState:
    logger.debug(f"Move rejected: {reason}")
    return state


# Deal ------------------------------------------------------------------


def deal_game(
    names: Sequence[str],
    *,
    controllers: Optional[Sequence[Controller]] = None,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
    config: Optional[TableConfig] = None,
) -> GameState:
    """Deal a fresh game; seat 0 starts the swap phase."""
    config = config or DEFAULT_CONFIG
    seat_names = [str(name).strip() for name in names]
    if len(seat_names) < config.min_players:
        raise InvalidSetup(f"At least {config.min_players} players are required.")
    if len(seat_names) > config.max_players:
        raise InvalidSetup(f"At most {config.max_players} players can be dealt in.")
    if any(not name for name in seat_names):
        raise InvalidSetup("Player names must not be empty.")
    if controllers is None:
        controllers = [Controller.HUMAN] * len(seat_names)
    if len(controllers) != len(seat_names):
        raise InvalidSetup("Exactly one controller is required per player.")

    if deck is not None:
        cards = list(deck)
        if len(cards) != DECK_SIZE or len({card.id for card in cards}) != DECK_SIZE:
            raise InvalidSetup(f"Deck must contain exactly {DECK_SIZE} distinct cards.")
    else:
        cards = create_deck(rng)

    players = [
        Seat(
            name=name,
            face_up=[[] for _ in range(config.table_slots)],
            controller=Controller(controller),
        )
        for name, controller in zip(seat_names, controllers)
    ]

    for _ in range(config.table_slots):
        for seat in players:
            seat.face_down.append(cards.pop())
    for slot in range(config.table_slots):
        for seat in players:
            seat.face_up[slot].append(cards.pop())
    for _ in range(config.hand_size):
        for seat in players:
            seat.hand.append(cards.pop())

    for seat in players:
        seat.hand = sort_cards(seat.hand)

    logger.info(f"Dealt a game for {len(players)} players: {', '.join(seat_names)}")
    return GameState(
        players=players,
        draw_pile=cards,
        discard_pile=[],
        current_player_index=0,
        phase=Phase.SWAP,
        swap_confirmed=[False] * len(players),
        winner=None,
        message=f"{seat_names[0]}: swap cards between hand and table, or confirm.",
        last_played_cards=[],
    )


# Swap phase ------------------------------------------------------------


def swap_cards(state: GameState, seat_index: int, hand_card_id: str, face_up_card_id: str) -> GameState:
    """Move a hand card onto a face-up stack.

    A hand card matching the stack top's value is stacked on it. Any
    other card trades places with the stack top.
    """
    if state.phase is not Phase.SWAP:
        return _reject(state, "swaps are only allowed during the swap phase")
    if not 0 <= seat_index < len(state.players):
        return _reject(state, f"no seat {seat_index}")
    if state.swap_confirmed[seat_index]:
        return _reject(state, f"seat {seat_index} already confirmed its swaps")

    seat = state.players[seat_index]
    hand_card = next((card for card in seat.hand if card.id == hand_card_id), None)
    stack_index = next(
        (i for i, stack in enumerate(seat.face_up) if stack and stack[-1].id == face_up_card_id),
        None,
    )
    if hand_card is None or stack_index is None:
        return _reject(state, "swap cards are not in the seat's hand and face-up tops")

    new_state = state.copy()
    seat = new_state.players[seat_index]
    seat.hand.remove(hand_card)
    stack = seat.face_up[stack_index]
    if stack[-1].value == hand_card.value:
        stack.append(hand_card)
    else:
        seat.hand.append(stack.pop())
        stack.append(hand_card)
    seat.hand = sort_cards(seat.hand)
    return new_state


def confirm_swap(state: GameState, seat_index: int) -> GameState:
    if state.phase is not Phase.SWAP:
        return _reject(state, "nothing to confirm outside the swap phase")
    if not 0 <= seat_index < len(state.players):
        return _reject(state, f"no seat {seat_index}")
    if state.swap_confirmed[seat_index]:
        return state

    new_state = state.copy()
    new_state.swap_confirmed[seat_index] = True

    if all(new_state.swap_confirmed):
        new_state.phase = Phase.PLAY
        new_state.current_player_index = 0
        new_state.message = f"{new_state.players[0].name}'s turn: play a card!"
        return new_state

    count = len(new_state.players)
    following = (seat_index + 1) % count
    while new_state.swap_confirmed[following]:
        following = (following + 1) % count
    new_state.current_player_index = following
    new_state.message = f"{new_state.players[following].name}: swap cards or confirm."
    return new_state


# Play phase ------------------------------------------------------------


def can_pick_up_pile(state: GameState) -> bool:
    if state.phase is not Phase.PLAY or not state.discard_pile:
        return False
    if state.must_cover_two_now():
        return False
    return play_source(state.current_seat) is not PlaySource.FACE_DOWN


def can_draw_from_talong(state: GameState) -> bool:
    """True when the acting seat may try its luck with the top stock card."""
    if state.phase is not Phase.PLAY or not state.discard_pile or not state.draw_pile:
        return False
    seat = state.current_seat
    if play_source(seat) is PlaySource.FACE_DOWN:
        return False
    return not playable_cards(seat, state.discard_pile)


def play_cards(
    state: GameState,
    card_ids: Iterable[str],
    *,
    config: Optional[TableConfig] = None,
) -> GameState:
    """Play one or more same-value cards from the acting seat's active zone."""
    if state.phase is not Phase.PLAY:
        return _reject(state, f"cannot play cards in phase {state.phase.value}")
    ids = list(card_ids)
    if not ids:
        return _reject(state, "no cards selected")

    seat = state.current_seat
    source = play_source(seat)

    if source is PlaySource.FACE_DOWN:
        blind = next((card for card in seat.face_down if card.id == ids[0]), None)
        if blind is None:
            return _reject(state, f"{ids[0]} is not one of the seat's face-down cards")
        new_state = state.copy()
        seat = new_state.current_seat
        seat.face_down.remove(blind)
        if not can_play_card(blind, new_state.discard_pile):
            _absorb_pile(new_state, seat, [blind])
            new_state.message = (
                f"{seat.name} turned up a {card_label(blind.value)} and had to pick up the pile! "
                f"{new_state.current_seat.name}'s turn."
            )
            return new_state
        return _finish_play(new_state, [blind], source, config or DEFAULT_CONFIG)

    if len(set(ids)) != len(ids):
        return _reject(state, "card ids must be distinct")
    if source is PlaySource.HAND:
        by_id = {card.id: card for card in seat.hand}
        if any(card_id not in by_id for card_id in ids):
            return _reject(state, "cards must come from the hand")
        cards = [by_id[card_id] for card_id in ids]
    else:
        picked = reachable_face_up(seat, ids)
        if picked is None:
            return _reject(state, "cards must be reachable face-up stack tops")
        cards = picked

    if any(card.value != cards[0].value for card in cards):
        return _reject(state, "all played cards must share one value")
    if not can_play_card(cards[0], state.discard_pile):
        return _reject(state, f"a {card_label(cards[0].value)} cannot be played on this pile")

    new_state = state.copy()
    seat = new_state.current_seat
    played = {card.id for card in cards}
    if source is PlaySource.HAND:
        seat.hand = [card for card in seat.hand if card.id not in played]
    else:
        seat.face_up = [[card for card in stack if card.id not in played] for stack in seat.face_up]
    return _finish_play(new_state, cards, source, config or DEFAULT_CONFIG)


def pick_up_pile(state: GameState) -> GameState:
    """Take the whole discard pile into hand and pass the turn."""
    if not can_pick_up_pile(state):
        return _reject(state, "the pile cannot be picked up now")
    new_state = state.copy()
    seat = new_state.current_seat
    _absorb_pile(new_state, seat, [])
    new_state.message = f"{seat.name} picked up the pile. {new_state.current_seat.name}'s turn."
    return new_state


def draw_and_try_from_talong(state: GameState, *, config: Optional[TableConfig] = None) -> GameState:
    """Turn the top stock card and play it if it fits, otherwise take the pile with it."""
    if not can_draw_from_talong(state):
        return _reject(state, "drawing from the talong is not allowed now")
    new_state = state.copy()
    seat = new_state.current_seat
    drawn = new_state.draw_pile.pop()
    if not can_play_card(drawn, new_state.discard_pile):
        _absorb_pile(new_state, seat, [drawn])
        new_state.message = (
            f"{seat.name} drew a {card_label(drawn.value)} that did not fit and picked up the pile. "
            f"{new_state.current_seat.name}'s turn."
        )
        return new_state
    new_state = _finish_play(new_state, [drawn], None, config or DEFAULT_CONFIG)
    new_state.message = f"{seat.name} drew a {card_label(drawn.value)} from the talong. {new_state.message}"
    return new_state


# Helpers ---------------------------------------------------------------


def _refill_hand(seat: Seat, draw_pile: List[Card], hand_size: int) -> None:
    while len(seat.hand) < hand_size and draw_pile:
        seat.hand.append(draw_pile.pop())
    seat.hand = sort_cards(seat.hand)


def _absorb_pile(state: GameState, seat: Seat, extra: List[Card]) -> None:
    seat.hand = sort_cards(seat.hand + state.discard_pile + extra)
    state.discard_pile = []
    state.last_played_cards = []
    state.must_cover_two = False
    state.must_cover_two_player_index = None
    state.current_player_index = next_player(state)


def _finish_play(
    state: GameState,
    cards: List[Card],
    source: Optional[PlaySource],
    config: TableConfig,
) -> GameState:
    """Resolve a play already removed from its zone; ``source`` None means the talong."""
    index = state.current_player_index
    seat = state.players[index]
    value = cards[0].value

    state.discard_pile.extend(cards)
    state.last_played_cards = list(cards)

    if value == RESET_VALUE:
        state.must_cover_two = True
        state.must_cover_two_player_index = index
    else:
        state.must_cover_two = False
        state.must_cover_two_player_index = None

    cleared = clears_pile(value, state.discard_pile)
    if cleared:
        state.burned_pile.extend(state.discard_pile)
        state.discard_pile = []
        state.must_cover_two = False
        state.must_cover_two_player_index = None

    if source is PlaySource.HAND:
        _refill_hand(seat, state.draw_pile, config.hand_size)

    if seat.has_won():
        state.phase = Phase.FINISHED
        state.winner = index
        state.must_cover_two = False
        state.must_cover_two_player_index = None
        state.message = f"{seat.name} wins!"
        logger.info(f"Game finished: seat {index} ({seat.name}) wins")
        return state

    if cleared:
        reason = "Ten!" if value == CLEAR_VALUE else "Four of a kind!"
        state.message = f"{reason} The pile is cleared. {seat.name} plays again."
        return state

    if state.must_cover_two:
        state.message = f"{seat.name} played a 2 and must cover it."
        return state

    if source is PlaySource.HAND and not seat.hand:
        if any(top.value == value for top in seat.face_up_tops()):
            state.message = (
                f"{seat.name} has a matching face-up table card and keeps playing."
            )
            return state

    state.current_player_index = next_player(state)
    state.message = f"{state.current_seat.name}'s turn."
    return state
