"""Validation schema for Vändtia table configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .deck import DECK_SIZE


class TableConfig(BaseModel):
    hand_size: int = Field(3, ge=1, description="Cards dealt to, and refilled into, each hand.")
    table_slots: int = Field(3, ge=1, description="Face-down cards and face-up stacks per seat.")
    min_players: int = Field(2, ge=2, description="Fewest seats a game may be dealt for.")
    max_players: int = Field(5, ge=2, description="Most seats a game may be dealt for.")
    name_max_length: int = Field(50, ge=1, description="Seat names are cut to this length.")
    room_code_length: int = Field(6, ge=4, le=12, description="Length of shareable room codes.")

    @field_validator("max_players")
    @classmethod
    def ensure_players_fit_deck(cls, value: int, info: ValidationInfo) -> int:
        min_players = info.data.get("min_players", 2)
        if value < min_players:
            raise ValueError("max_players must not be below min_players.")
        per_seat = info.data.get("hand_size", 3) + 2 * info.data.get("table_slots", 3)
        if value * per_seat > DECK_SIZE:
            raise ValueError(
                f"Dealing {per_seat} cards to {value} seats needs more than {DECK_SIZE} cards."
            )
        return value

    def cards_per_seat(self) -> int:
        return self.hand_size + 2 * self.table_slots


DEFAULT_CONFIG = TableConfig()
