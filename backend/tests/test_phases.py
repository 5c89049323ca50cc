from datetime import datetime, timedelta

import pytest

from drawstar.services.game.phases import (
    FINISH,
    FINISH_EMPTY,
    NEXT_DRAWING,
    NEXT_ROUND,
    START_VOTING,
    decide_transition,
)
from drawstar.services.game.store import RoomSnapshot

NOW = datetime(2026, 1, 1, 12, 0, 0)


def snapshot(**overrides):
    values = dict(
        id=1,
        status='playing',
        current_phase='voting',
        current_round=1,
        rounds=3,
        current_drawing_index=0,
        current_prompt_id=7,
        phase_end_time=NOW - timedelta(seconds=1),
        drawing_time=60,
        voting_time=30,
    )
    values.update(overrides)
    return RoomSnapshot(**values)


def no_prompt():
    raise AssertionError('prompt should not be picked')


def test_drawing_always_moves_to_voting():
    t = decide_transition(snapshot(current_phase='drawing', current_drawing_index=4), 0, NOW, no_prompt)
    assert t.kind == START_VOTING
    assert t.values == {
        'current_phase': 'voting',
        'current_drawing_index': 0,
        'phase_end_time': NOW + timedelta(seconds=30),
    }


def test_voting_without_drawings_starts_next_round():
    t = decide_transition(snapshot(current_round=2), 0, NOW, lambda: 42)
    assert t.kind == NEXT_ROUND
    assert t.values == {
        'current_phase': 'drawing',
        'current_round': 3,
        'current_prompt_id': 42,
        'phase_end_time': NOW + timedelta(seconds=60),
    }
    assert not t.computes_scores


def test_voting_without_drawings_on_last_round_finishes_without_scores():
    t = decide_transition(snapshot(current_round=3), 0, NOW, no_prompt)
    assert t.kind == FINISH_EMPTY
    assert t.values == {'current_phase': 'results', 'status': 'completed', 'phase_end_time': None}
    assert not t.computes_scores


def test_last_drawing_on_last_round_finishes_with_scores():
    t = decide_transition(snapshot(current_round=3, current_drawing_index=2), 3, NOW, no_prompt)
    assert t.kind == FINISH
    assert t.computes_scores
    assert t.values['status'] == 'completed'
    assert t.values['phase_end_time'] is None


def test_last_drawing_before_last_round_starts_next_round():
    t = decide_transition(snapshot(current_round=1, current_drawing_index=1), 2, NOW, lambda: 5)
    assert t.kind == NEXT_ROUND
    assert t.values['current_round'] == 2
    assert t.values['current_prompt_id'] == 5


def test_more_drawings_advance_the_index():
    t = decide_transition(snapshot(current_drawing_index=1, voting_time=15), 4, NOW, no_prompt)
    assert t.kind == NEXT_DRAWING
    assert t.values == {
        'current_drawing_index': 2,
        'phase_end_time': NOW + timedelta(seconds=15),
    }


def test_index_past_the_end_counts_as_last_drawing():
    t = decide_transition(snapshot(rounds=1, current_drawing_index=5), 2, NOW, no_prompt)
    assert t.kind == FINISH


def test_single_round_single_drawing_goes_straight_to_results():
    t = decide_transition(snapshot(rounds=1, current_round=1), 1, NOW, no_prompt)
    assert t.kind == FINISH


def test_results_phase_is_not_advanced():
    with pytest.raises(ValueError):
        decide_transition(snapshot(current_phase='results'), 0, NOW, no_prompt)
