from collections import Counter
from random import Random

import pytest

from engine.cards import Card, Suit
from engine.deck import DECK_SIZE, build_deck, create_deck
from engine.game import confirm_swap, deal_game, swap_cards
from engine.state import Controller, GameState, InvalidSetup, Phase, Seat


def card(card_id, value):
    return Card(id=card_id, value=value, suit=Suit.SPADES)


def swap_state(hand, face_up, *, seats=2):
    players = [Seat(name="Alice", hand=list(hand), face_up=face_up, face_down=[card("down", 4)])]
    players += [Seat(name=f"Player {i}", hand=[card(f"p{i}", 9)]) for i in range(1, seats)]
    return GameState(players=players, phase=Phase.SWAP, swap_confirmed=[False] * seats)


def test_create_deck_has_every_value_in_every_suit():
    deck = create_deck(Random(3))

    assert len(deck) == DECK_SIZE
    assert len({c.id for c in deck}) == DECK_SIZE
    assert Counter(c.value for c in deck) == {value: 4 for value in range(2, 15)}
    assert Counter(c.suit for c in deck) == {suit: 13 for suit in Suit}


def test_seeded_decks_are_reproducible():
    assert create_deck(Random(11)) == create_deck(Random(11))


def test_deal_gives_each_seat_three_zones():
    state = deal_game(["Alice", "Bob"], rng=Random(5))

    assert state.phase is Phase.SWAP
    assert state.current_player_index == 0
    assert state.swap_confirmed == [False, False]
    assert state.discard_pile == []
    assert len(state.draw_pile) == DECK_SIZE - 2 * 9
    for seat in state.players:
        assert len(seat.hand) == 3
        assert len(seat.face_down) == 3
        assert [len(stack) for stack in seat.face_up] == [1, 1, 1]
        assert [c.value for c in seat.hand] == sorted(c.value for c in seat.hand)
    assert len({c.id for c in state.iter_cards()}) == DECK_SIZE


def test_deal_goes_round_the_table_from_the_top_of_the_deck():
    state = deal_game(["Alice", "Bob"], deck=build_deck())
    alice, bob = state.players

    assert [c.id for c in alice.face_down] == ["card-51", "card-49", "card-47"]
    assert [c.id for c in bob.face_down] == ["card-50", "card-48", "card-46"]
    assert [stack[0].id for stack in alice.face_up] == ["card-45", "card-43", "card-41"]
    assert {c.id for c in alice.hand} == {"card-39", "card-37", "card-35"}
    assert state.draw_pile[-1].id == "card-33"


def test_deal_records_controllers():
    state = deal_game(["Alice", "Örjan"], controllers=[Controller.HUMAN, Controller.SCRIPTED], rng=Random(1))

    assert not state.players[0].is_scripted
    assert state.players[1].is_scripted


@pytest.mark.parametrize(
    "names",
    [["Alice"], ["A", "B", "C", "D", "E", "F"], ["Alice", "   "]],
)
def test_deal_rejects_bad_seatings(names):
    with pytest.raises(InvalidSetup):
        deal_game(names)


def test_deal_rejects_short_deck_and_controller_mismatch():
    with pytest.raises(InvalidSetup):
        deal_game(["Alice", "Bob"], deck=build_deck()[:40])
    with pytest.raises(InvalidSetup):
        deal_game(["Alice", "Bob"], controllers=[Controller.HUMAN])


def test_matching_hand_card_is_stacked_on_table_card():
    state = swap_state(
        [card("hand-seven", 7), card("other", 9)],
        [[card("table-seven", 7)], [card("table-three", 3)], []],
    )

    after = swap_cards(state, 0, "hand-seven", "table-seven")

    seat = after.players[0]
    assert [c.id for c in seat.hand] == ["other"]
    assert [c.id for c in seat.face_up[0]] == ["table-seven", "hand-seven"]
    assert [c.id for c in seat.face_up[1]] == ["table-three"]


def test_different_value_trades_places_with_table_card():
    state = swap_state(
        [card("hand-ace", 14), card("hand-five", 5)],
        [[card("table-three", 3)], [card("table-nine", 9)], []],
    )

    after = swap_cards(state, 0, "hand-ace", "table-three")

    seat = after.players[0]
    assert [c.id for c in seat.hand] == ["table-three", "hand-five"]
    assert [c.id for c in seat.face_up[0]] == ["hand-ace"]
    assert state.players[0].face_up[0][0].id == "table-three"


def test_swap_needs_a_stack_top_and_a_hand_card():
    state = swap_state(
        [card("hand-ace", 14)],
        [[card("buried", 3), card("top", 3)], [], []],
    )

    assert swap_cards(state, 0, "hand-ace", "buried") is state
    assert swap_cards(state, 0, "missing", "top") is state
    assert swap_cards(state, 5, "hand-ace", "top") is state


def test_swap_rejected_after_confirming_or_outside_swap_phase():
    state = swap_state([card("hand-ace", 14)], [[card("top", 3)], [], []])
    state.swap_confirmed[0] = True
    assert swap_cards(state, 0, "hand-ace", "top") is state

    playing = swap_state([card("hand-ace", 14)], [[card("top", 3)], [], []])
    playing.phase = Phase.PLAY
    assert swap_cards(playing, 0, "hand-ace", "top") is playing


def test_confirming_hands_the_turn_to_next_unconfirmed_seat():
    state = swap_state([card("a", 5)], [[card("t", 6)], [], []], seats=3)

    after_one = confirm_swap(state, 1)
    assert after_one.current_player_index == 2
    assert after_one.phase is Phase.SWAP

    after_two = confirm_swap(after_one, 2)
    assert after_two.current_player_index == 0

    after_all = confirm_swap(after_two, 0)
    assert after_all.phase is Phase.PLAY
    assert after_all.current_player_index == 0
    assert after_all.swap_confirmed == [True, True, True]


def test_confirm_is_idempotent():
    state = swap_state([card("a", 5)], [[card("t", 6)], [], []])

    confirmed = confirm_swap(state, 0)

    assert confirm_swap(confirmed, 0) is confirmed
    assert confirmed.current_player_index == 1
