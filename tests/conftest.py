# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Callable, List

import pytest

from statetree.core.machine import Machine
from statetree.core.states import State


@pytest.fixture
def state():
    """A bare state with no children."""
    return State("state")


@pytest.fixture
def machine():
    """A machine that has not been entered."""
    return Machine("machine")


@pytest.fixture
def call_log():
    """A shared list that recorder callbacks append to."""
    return []


@pytest.fixture
def recorder(call_log: List[str]) -> Callable[[str], Callable[[], None]]:
    """Returns a factory of callbacks that log a label when called."""

    def _make(label: str) -> Callable[[], None]:
        def _record() -> None:
            call_log.append(label)

        return _record

    return _make


@pytest.fixture
def branch(recorder, call_log):
    """
    Builds root -> child -> grandchild, each logging its enter, update and exit
    behaviours as "<id>:<phase>". The log is cleared once the tree is built.
    """
    root = State("root")
    child = State("child")
    grandchild = State("grandchild")
    for node in (root, child, grandchild):
        node.add_enter_behavior(recorder(f"{node.id}:enter"))
        node.add_update_behavior(recorder(f"{node.id}:update"))
        node.add_exit_behavior(recorder(f"{node.id}:exit"))
    child.add_child(grandchild)
    root.add_child(child)
    call_log.clear()
    return root, child, grandchild
