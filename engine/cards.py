"""Card-related data structures and helpers for Vändtia."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]


SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

# Values run from 2 up to the ace; suits carry no gameplay weight.
LOWEST_VALUE = 2
HIGHEST_VALUE = 14
VALUES: list[int] = list(range(LOWEST_VALUE, HIGHEST_VALUE + 1))

FACE_LABELS: dict[int, str] = {11: "J", 12: "Q", 13: "K", 14: "A"}

HIDDEN_MARKER = "?"


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    id: str
    value: int
    suit: Suit

    def __str__(self) -> str:
        return card_name(self)


@dataclass(frozen=True)
class HiddenCard:
    """Placeholder for a card whose identity the viewer may not see."""

    id: str
    value: str = HIDDEN_MARKER
    suit: str = HIDDEN_MARKER


def card_label(value: int) -> str:
    return FACE_LABELS.get(value, str(value))


def card_name(card: Card) -> str:
    return f"{card_label(card.value)}{card.suit.symbol}"


def sort_cards(cards: list[Card]) -> list[Card]:
    """Return cards ordered by value; the sort is stable for equal values."""
    return sorted(cards, key=lambda card: card.value)


def serialize_card(card: Card | HiddenCard) -> dict[str, object]:
    if isinstance(card, HiddenCard):
        return {"id": card.id, "value": card.value, "suit": card.suit}
    return {"id": card.id, "value": card.value, "suit": card.suit.value}


def deserialize_card(payload: Mapping[str, object]) -> Card | HiddenCard:
    if payload["value"] == HIDDEN_MARKER:
        return HiddenCard(id=str(payload["id"]))
    value = int(payload["value"])  # type: ignore[arg-type]
    if value < LOWEST_VALUE or value > HIGHEST_VALUE:
        raise ValueError(f"Card value out of range: {value!r}")
    return Card(id=str(payload["id"]), value=value, suit=Suit(str(payload["suit"]).lower()))
