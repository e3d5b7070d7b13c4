from random import Random

import pytest
from pydantic import ValidationError

from engine.game import deal_game
from engine.rules_schema import DEFAULT_CONFIG, TableConfig


def test_default_config_matches_the_house_rules():
    assert DEFAULT_CONFIG.hand_size == 3
    assert DEFAULT_CONFIG.table_slots == 3
    assert DEFAULT_CONFIG.cards_per_seat() == 9
    assert DEFAULT_CONFIG.max_players == 5


@pytest.mark.parametrize(
    "overrides",
    [{"max_players": 6}, {"hand_size": 0}, {"min_players": 4, "max_players": 3}, {"room_code_length": 2}],
)
def test_invalid_configs_are_rejected(overrides):
    with pytest.raises(ValidationError):
        TableConfig(**overrides)


def test_smaller_tables_deal_fewer_cards():
    config = TableConfig(hand_size=4, table_slots=2, max_players=6)

    state = deal_game(["A", "B", "C", "D", "E", "F"], rng=Random(0), config=config)

    assert all(len(seat.hand) == 4 and len(seat.face_down) == 2 for seat in state.players)
    assert len(state.draw_pile) == 52 - 6 * 8
