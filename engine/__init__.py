"""Core rules engine package for Vändtia."""

__all__ = [
    "cards",
    "deck",
    "rules_schema",
    "state",
    "mechanics",
    "game",
    "actions",
    "serialize",
    "service",
]
