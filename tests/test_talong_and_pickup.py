from engine.actions import DrawAndTryMove, PickupMove, PlayMove, legal_moves
from engine.cards import Card, Suit
from engine.game import can_draw_from_talong, can_pick_up_pile, draw_and_try_from_talong, pick_up_pile
from engine.state import GameState, Phase, Seat


def card(card_id, value):
    return Card(id=card_id, value=value, suit=Suit.CLUBS)


def create_state(hand, *, discard, draw=None, face_down=None):
    return GameState(
        players=[
            Seat(name="Alice", hand=list(hand), face_down=face_down or []),
            Seat(name="Bob", hand=[card("bob-6", 6)]),
        ],
        draw_pile=draw or [],
        discard_pile=discard,
        current_player_index=0,
        phase=Phase.PLAY,
        swap_confirmed=[True, True],
    )


def test_drawing_is_the_only_alternative_to_picking_up():
    state = create_state(
        [card("five", 5), card("three", 3)],
        discard=[card("nine", 9)],
        draw=[card("draw-ace", 14)],
    )

    assert can_draw_from_talong(state)
    assert legal_moves(state) == [DrawAndTryMove(), PickupMove()]


def test_playable_talong_card_goes_on_the_pile():
    state = create_state(
        [card("five", 5), card("three", 3)],
        discard=[card("nine", 9)],
        draw=[card("draw-ace", 14)],
    )

    after = draw_and_try_from_talong(state)

    assert after.discard_pile[-1].id == "draw-ace"
    assert after.draw_pile == []
    assert [c.id for c in after.players[0].hand] == ["five", "three"]
    assert after.current_player_index == 1
    assert after.message.startswith("Alice drew a A from the talong.")


def test_unplayable_talong_card_is_taken_with_the_pile():
    state = create_state(
        [card("five", 5), card("three", 3)],
        discard=[card("nine", 9)],
        draw=[card("draw-four", 4)],
    )

    after = draw_and_try_from_talong(state)

    assert [c.value for c in after.players[0].hand] == [3, 4, 5, 9]
    assert after.discard_pile == []
    assert after.current_player_index == 1


def test_talong_two_must_be_covered_by_the_same_seat():
    state = create_state(
        [card("five", 5), card("three", 3)],
        discard=[card("nine", 9)],
        draw=[card("draw-two", 2)],
    )

    after = draw_and_try_from_talong(state)

    assert after.must_cover_two_now()
    assert after.current_player_index == 0
    assert PlayMove(("three",)) in legal_moves(after)
    assert PickupMove() not in legal_moves(after)


def test_talong_ten_clears_the_pile():
    state = create_state(
        [card("five", 5)],
        discard=[card("queen", 12)],
        draw=[card("draw-ten", 10)],
    )

    after = draw_and_try_from_talong(state)

    assert after.discard_pile == []
    assert [c.id for c in after.burned_pile] == ["queen", "draw-ten"]
    assert after.current_player_index == 0


def test_drawing_not_allowed_with_a_playable_card_or_empty_stock():
    playable = create_state([card("ten", 10)], discard=[card("nine", 9)], draw=[card("x", 4)])
    assert not can_draw_from_talong(playable)
    assert draw_and_try_from_talong(playable) is playable

    no_stock = create_state([card("three", 3)], discard=[card("nine", 9)])
    assert not can_draw_from_talong(no_stock)
    assert draw_and_try_from_talong(no_stock) is no_stock

    blind = create_state([], discard=[card("nine", 9)], draw=[card("x", 4)], face_down=[card("down", 3)])
    assert not can_draw_from_talong(blind)


def test_pick_up_takes_the_whole_pile_and_passes():
    state = create_state([card("three", 3)], discard=[card("start", 5), card("nine", 9)])

    after = pick_up_pile(state)

    assert [c.id for c in after.players[0].hand] == ["three", "start", "nine"]
    assert after.discard_pile == []
    assert after.last_played_cards == []
    assert after.current_player_index == 1
    assert after.message == "Alice picked up the pile. Bob's turn."


def test_pick_up_rejected_on_empty_pile_or_uncovered_two():
    empty = create_state([card("three", 3)], discard=[])
    assert not can_pick_up_pile(empty)
    assert pick_up_pile(empty) is empty

    two = create_state([card("three", 3)], discard=[card("two", 2)])
    two.must_cover_two = True
    two.must_cover_two_player_index = 0
    assert not can_pick_up_pile(two)
    assert pick_up_pile(two) is two
