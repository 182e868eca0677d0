# statetree/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging

from statetree.core.identifiers import EventIdLike, StateIdLike, as_event_id
from statetree.core.states import State

logger = logging.getLogger(__name__)


class Machine(State):
    """
    Root of a state tree. Adds idempotent enter/exit and the two entry points
    for injecting events into a running tree.
    """

    def __init__(self, state_id: StateIdLike) -> None:
        super().__init__(state_id)
        self._entered = False

    @property
    def entered(self) -> bool:
        """True between a call to :meth:`enter` and the next call to :meth:`exit`."""
        return self._entered

    def enter(self) -> None:
        """Enter the active branch. Does nothing if already entered."""
        if self._entered:
            return
        self.enter_state()
        self._entered = True
        logger.debug("Machine %s entered", self.id)

    def update(self) -> None:
        """Run update behaviours along the active branch."""
        self.update_state()

    def exit(self) -> None:
        """Exit the active branch. Does nothing unless entered."""
        if not self._entered:
            return
        self.exit_state()
        self._entered = False
        logger.debug("Machine %s exited", self.id)

    def send_event(self, event: EventIdLike) -> bool:
        """
        Offer ``event`` to the machine itself, then drill it down the active
        branch. Does nothing unless entered.

        :return: True if some state consumed the event.
        """
        if not self._entered:
            return False
        event = as_event_id(event)
        if self.try_transition(event):
            return True
        if self.try_handle_event(event):
            return True
        return self.drill_event(event)

    def bubble_event(self, event: EventIdLike) -> bool:
        """
        Fire ``event`` from the innermost active state so that it bubbles up
        through every active ancestor. Does nothing unless entered.

        :return: True if some state consumed the event.
        """
        if not self._entered:
            return False
        leaf: State = self
        while leaf.active_child is not None:
            leaf = leaf.active_child
        return leaf.fire_event(event)
