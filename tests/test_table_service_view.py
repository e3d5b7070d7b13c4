from random import Random

import pytest

from engine.actions import ConfirmMove, PlayMove, move_from_dict, move_to_dict
from engine.cards import HiddenCard
from engine.serialize import state_from_dict, state_to_dict
from engine.service import TableService, project_state
from engine.state import Phase


def start_service(seed=4):
    service = TableService()
    service.start_new_game(["Alice", "Bob"], rng=Random(seed))
    return service


def test_projection_hides_other_hands_and_blind_cards():
    state = start_service().state

    projected = project_state(state, 0)

    bob = projected.players[1]
    assert [c.id for c in bob.hand] == ["hidden_h_1_0", "hidden_h_1_1", "hidden_h_1_2"]
    assert [c.id for c in bob.face_down] == ["hidden_fd_1_0", "hidden_fd_1_1", "hidden_fd_1_2"]
    assert all(isinstance(c, HiddenCard) for c in bob.hand + bob.face_down)
    assert bob.face_up == state.players[1].face_up
    assert projected.players[0] == state.players[0]
    assert projected.draw_pile[0].id == "hidden_dp_0"
    assert len(projected.draw_pile) == len(state.draw_pile)
    assert not isinstance(state.players[1].hand[0], HiddenCard)


def test_view_lists_moves_only_for_the_acting_seat():
    service = start_service()

    mine = service.get_view(0)
    theirs = service.get_view(1)

    assert mine.is_my_turn
    assert {"type": "confirm"} in mine.legal_moves
    assert not theirs.is_my_turn
    assert theirs.legal_moves == []
    assert theirs.state["players"][0]["hand"][0]["value"] == "?"
    assert mine.phase == "swap"


def test_submit_reports_rejections():
    service = start_service()

    assert not service.submit(1, ConfirmMove())
    assert service.submit(0, ConfirmMove())
    assert service.state.current_player_index == 1
    assert service.submit(1, ConfirmMove())
    assert service.state.phase is Phase.PLAY
    assert not service.submit(0, PlayMove(card_ids=("not-a-card",)))


def test_service_without_game_raises():
    service = TableService()

    assert not service.has_active_game()
    with pytest.raises(RuntimeError):
        service.get_view(0)


def test_state_snapshot_restores_a_game_in_progress():
    service = start_service()
    service.submit(0, ConfirmMove())
    service.submit(1, ConfirmMove())
    hand = service.state.players[0].hand
    service.submit(0, PlayMove(card_ids=(hand[0].id,)))

    payload = state_to_dict(service.state)

    assert payload["phase"] == "play"
    assert "discardPile" in payload and "mustCoverTwoPlayerIndex" in payload
    assert state_from_dict(payload) == service.state


def test_move_payloads_use_wire_names():
    assert move_to_dict(PlayMove(card_ids=("card-1", "card-14"))) == {"type": "play", "cardIds": ["card-1", "card-14"]}
    assert move_from_dict({"type": "faceDown", "cardId": "card-3"}).card_id == "card-3"
    with pytest.raises(ValueError):
        move_from_dict({"type": "shuffle"})
    with pytest.raises(ValueError):
        move_from_dict({"type": "swap", "handCardId": "card-1"})


def test_malformed_play_payloads_raise_value_error():
    with pytest.raises(ValueError):
        move_from_dict({"type": "play", "cardIds": 5})
    with pytest.raises(ValueError):
        move_from_dict({"type": "play", "cardIds": "abc"})
    assert move_from_dict({"type": "play", "cardIds": ("card-1",)}) == PlayMove(card_ids=("card-1",))


def test_snapshot_indices_are_read_back_as_ints():
    service = start_service()
    payload = state_to_dict(service.state)
    payload["winner"] = "1"
    payload["phase"] = "finished"
    payload["mustCoverTwoPlayerIndex"] = "0"

    restored = state_from_dict(payload)

    assert restored.winner == 1
    assert restored.must_cover_two_player_index == 0
