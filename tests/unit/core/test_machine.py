# tests/unit/core/test_machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from unittest.mock import MagicMock

import pytest

from statetree.core.errors import InvalidIdentifierError
from statetree.core.events import EventResponse
from statetree.core.identifiers import EventId, StateId
from statetree.core.machine import Machine
from statetree.core.states import State

EVENT = EventId("event")


@pytest.mark.parametrize("value", [None, "", " ", "   ", "\t", "\n"])
def test_constructor_rejects_blank_id(value):
    with pytest.raises(InvalidIdentifierError):
        Machine(value)


def test_machine_is_a_state(machine):
    assert isinstance(machine, State)
    assert not machine.entered


def test_enter_enters_state(machine):
    action = MagicMock()
    machine.add_enter_behavior(action)

    machine.enter()

    action.assert_called_once()
    assert machine.entered


def test_enter_is_idempotent(machine):
    action = MagicMock()
    machine.add_enter_behavior(action)

    machine.enter()
    machine.enter()

    action.assert_called_once()


def test_update_updates_state(machine):
    action = MagicMock()
    machine.add_update_behavior(action)

    machine.enter()
    machine.update()

    action.assert_called_once()


def test_exit_exits_state(machine):
    action = MagicMock()
    machine.add_exit_behavior(action)

    machine.enter()
    machine.exit()

    action.assert_called_once()
    assert not machine.entered


def test_exit_before_enter_does_nothing(machine):
    action = MagicMock()
    machine.add_exit_behavior(action)

    machine.exit()
    machine.enter()

    action.assert_not_called()


def test_exit_is_idempotent(machine):
    action = MagicMock()
    machine.add_exit_behavior(action)

    machine.enter()
    machine.exit()
    machine.exit()

    action.assert_called_once()


def test_enter_exit_cycles_repeat(machine):
    enter = MagicMock()
    exit_ = MagicMock()
    machine.add_enter_behavior(enter).add_exit_behavior(exit_)

    for _ in range(3):
        machine.enter()
        machine.exit()

    assert enter.call_count == 3
    assert exit_.call_count == 3


def test_enter_runs_whole_active_branch(machine, recorder, call_log):
    child = State("child")
    grandchild = State("grandchild")
    machine.add_enter_behavior(recorder("machine"))
    child.add_enter_behavior(recorder("child"))
    grandchild.add_enter_behavior(recorder("grandchild"))
    child.add_child(grandchild)
    machine.add_child(child)
    call_log.clear()

    machine.enter()

    assert call_log == ["machine", "child", "grandchild"]


def test_send_event_before_enter_does_nothing(machine):
    action = MagicMock()
    machine.event_responses[EVENT] = EventResponse(action, True)

    assert not machine.send_event(EVENT)
    action.assert_not_called()


def test_send_event_uses_own_response(machine):
    action = MagicMock()
    machine.event_responses[EVENT] = EventResponse(action, True)
    machine.enter()

    assert machine.send_event(EVENT)
    action.assert_called_once()


def test_send_event_uses_own_transition(machine, recorder, call_log):
    a = State("a").add_exit_behavior(recorder("a:exit"))
    b = State("b").add_enter_behavior(recorder("b:enter"))
    machine.add_children([a, b])
    machine.add_transition("a", "b", EVENT)
    machine.enter()
    call_log.clear()

    assert machine.send_event("event")

    assert machine.active_child_id == StateId("b")
    assert call_log == ["a:exit", "b:enter"]


def test_send_event_drills_when_not_consumed(machine):
    child = State("child")
    machine.add_child(child)
    machine_action = MagicMock()
    child_action = MagicMock()
    machine.event_responses[EVENT] = EventResponse(machine_action, False)
    child.event_responses[EVENT] = EventResponse(child_action, True)
    machine.enter()

    assert machine.send_event(EVENT)

    machine_action.assert_called_once()
    child_action.assert_called_once()


def test_send_event_unhandled(machine):
    machine.add_child(State("child"))
    machine.enter()

    assert not machine.send_event(EVENT)


def test_bubble_event_before_enter_does_nothing(machine):
    child = State("child")
    grandchild = State("grandchild")
    child.add_child(grandchild)
    machine.add_child(child)
    action = MagicMock()
    grandchild.event_responses[EVENT] = EventResponse(action, True)

    assert not machine.bubble_event(EVENT)
    action.assert_not_called()


def test_bubble_event_fires_from_innermost_active_state(machine):
    child = State("child")
    grandchild = State("grandchild")
    child.add_child(grandchild)
    machine.add_child(child)
    action = MagicMock()
    response = EventResponse(action, True)
    grandchild.event_responses[EVENT] = response
    machine.event_responses[EVENT] = response
    machine.enter()

    assert machine.bubble_event(EVENT)

    action.assert_called_once()


def test_bubble_event_reaches_machine(machine):
    child = State("child")
    machine.add_child(child)
    child_action = MagicMock()
    machine_action = MagicMock()
    child.event_responses[EVENT] = EventResponse(child_action, False)
    machine.event_responses[EVENT] = EventResponse(machine_action, True)
    machine.enter()

    assert machine.bubble_event(EVENT)

    child_action.assert_called_once()
    machine_action.assert_called_once()


def test_bubble_event_on_childless_machine(machine):
    action = MagicMock()
    machine.event_responses[EVENT] = EventResponse(action, True)
    machine.enter()

    assert machine.bubble_event(EVENT)
    action.assert_called_once()


def test_events_ignored_after_exit(machine):
    action = MagicMock()
    machine.event_responses[EVENT] = EventResponse(action, True)
    machine.enter()
    machine.exit()

    assert not machine.send_event(EVENT)
    assert not machine.bubble_event(EVENT)
    action.assert_not_called()


def test_enter_and_exit_are_logged(machine, caplog):
    with caplog.at_level(logging.DEBUG, logger="statetree"):
        machine.enter()
        machine.exit()

    messages = [record.getMessage() for record in caplog.records]
    assert "Machine machine entered" in messages
    assert "Machine machine exited" in messages
