"""Deck creation utilities for Vändtia."""

from __future__ import annotations

from random import Random
from typing import List, Optional

from .cards import VALUES, Card, Suit

DECK_SIZE = 52


def build_deck() -> List[Card]:
    """Return the ordered 52-card deck with ids ``card-0`` .. ``card-51``."""
    cards: List[Card] = []
    for suit in Suit:
        for value in VALUES:
            cards.append(Card(id=f"card-{len(cards)}", value=value, suit=suit))
    return cards


def create_deck(rng: Optional[Random] = None) -> List[Card]:
    """Return a uniformly shuffled deck; ``rng`` makes the order reproducible."""
    cards = build_deck()
    if rng is None:
        rng = Random()
    rng.shuffle(cards)
    return cards
