"""Playability rules and turn order for Vändtia."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .cards import Card
from .state import GameState, PlaySource, Seat, play_source

# A 2 may always be played and opens the pile for anything.
RESET_VALUE = 2
# A 10 may always be played and clears the pile.
CLEAR_VALUE = 10
# This many equal values on top of the pile clear it as well.
CLEAR_RUN_LENGTH = 4


def top_value(discard_pile: Sequence[Card]) -> Optional[int]:
    if not discard_pile:
        return None
    return discard_pile[-1].value


def can_play_card(card: Card, discard_pile: Sequence[Card]) -> bool:
    """Return True if the card may go on top of the discard pile."""
    if card.value in (RESET_VALUE, CLEAR_VALUE):
        return True
    top = top_value(discard_pile)
    if top is None or top == RESET_VALUE:
        return True
    return card.value >= top


def is_four_of_a_kind(discard_pile: Sequence[Card]) -> bool:
    if len(discard_pile) < CLEAR_RUN_LENGTH:
        return False
    top = discard_pile[-1].value
    return all(card.value == top for card in discard_pile[-CLEAR_RUN_LENGTH:])


def would_complete_four_of_a_kind(value: int, discard_pile: Sequence[Card], count: int = 1) -> bool:
    """Return True if adding ``count`` cards of ``value`` makes four equal on top."""
    run = 0
    for card in reversed(discard_pile):
        if card.value != value:
            break
        run += 1
    return run > 0 and run + count >= CLEAR_RUN_LENGTH


def clears_pile(played_value: int, discard_pile: Sequence[Card]) -> bool:
    """Check the pile *after* the played cards were added to it."""
    return played_value == CLEAR_VALUE or is_four_of_a_kind(discard_pile)


def reachable_face_up(seat: Seat, card_ids: Iterable[str]) -> Optional[List[Card]]:
    """Resolve ids against face-up stacks, peeling from the top down.

    Each id must be the top of its stack once the other selected cards
    above it are gone. Returns None if any id is buried or unknown.
    """
    wanted = list(card_ids)
    stacks = [list(stack) for stack in seat.face_up]
    picked: List[Card] = []
    progress = True
    while wanted and progress:
        progress = False
        for stack in stacks:
            if stack and stack[-1].id in wanted:
                card = stack.pop()
                wanted.remove(card.id)
                picked.append(card)
                progress = True
    if wanted:
        return None
    return picked


def source_cards(seat: Seat) -> List[Card]:
    """Cards the seat could select right now (face-up tops only)."""
    source = play_source(seat)
    if source is PlaySource.HAND:
        return list(seat.hand)
    if source is PlaySource.FACE_UP:
        return seat.face_up_tops()
    return list(seat.face_down)


def playable_cards(seat: Seat, discard_pile: Sequence[Card]) -> List[Card]:
    """Known cards in the active zone that may be played; blind cards never count."""
    if play_source(seat) is PlaySource.FACE_DOWN:
        return []
    return [card for card in source_cards(seat) if can_play_card(card, discard_pile)]


def playable_groups(seat: Seat, discard_pile: Sequence[Card]) -> Dict[int, List[Card]]:
    """Group every playable reachable card by value.

    For face-up play a group includes same-value cards stacked directly
    beneath a playable top, since they can be played in one move.
    """
    groups: Dict[int, List[Card]] = {}
    if play_source(seat) is PlaySource.FACE_UP:
        for stack in seat.face_up:
            if not stack or not can_play_card(stack[-1], discard_pile):
                continue
            value = stack[-1].value
            group = groups.setdefault(value, [])
            for card in reversed(stack):
                if card.value != value:
                    break
                group.append(card)
        return groups
    for card in playable_cards(seat, discard_pile):
        groups.setdefault(card.value, []).append(card)
    return groups


def next_player(state: GameState) -> int:
    """Return the next seat after the current one that has not yet won."""
    count = len(state.players)
    candidate = (state.current_player_index + 1) % count
    for _ in range(count):
        if not state.players[candidate].has_won():
            return candidate
        candidate = (candidate + 1) % count
    return candidate
