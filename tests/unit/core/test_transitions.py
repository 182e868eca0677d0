# tests/unit/core/test_transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

from statetree.core.events import EventResponse
from statetree.core.identifiers import EventId, StateId
from statetree.core.transitions import Transition, TransitionId


def test_transition_defaults():
    transition = Transition(StateId("b"))
    assert transition.condition is None
    assert transition.behavior is None
    assert transition.is_shallow


def test_missing_condition_passes():
    assert Transition(StateId("b")).evaluate_condition()


def test_condition_result_is_used():
    assert not Transition(StateId("b"), condition=lambda: False).evaluate_condition()
    assert Transition(StateId("b"), condition=lambda: True).evaluate_condition()


def test_transition_id_is_value_keyed():
    key = TransitionId(EventId("go"), StateId("a"))
    assert key == TransitionId(EventId("go"), StateId("a"))
    assert key.event == EventId("go")
    assert key.origin == StateId("a")
    assert {key: 1}[TransitionId(EventId("go"), StateId("a"))] == 1


def test_event_response_reports_consume_flag():
    action = MagicMock()

    assert EventResponse(action, True).invoke()
    assert not EventResponse(action, False).invoke()
    assert action.call_count == 2
