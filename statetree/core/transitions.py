# statetree/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional

from statetree.core.identifiers import EventId, StateId

Condition = Callable[[], bool]
Behavior = Callable[[], None]


class TransitionId(NamedTuple):
    """
    Key of a transition within its owning state: the triggering event plus the
    child that must be active for the transition to fire.
    """

    event: EventId
    origin: StateId


@dataclass(frozen=True)
class Transition:
    """
    Describes a change of the owning state's active child.

    :param to: Id of the child that becomes active once the transition completes.
    :param condition: Optional guard; the transition only fires when it returns True.
    :param behavior: Optional action run between exiting the old child and
        entering the new one.
    :param is_shallow: When True only the two children's own enter/exit
        behaviours run; otherwise their whole active branches are exited and
        entered.
    """

    to: StateId
    condition: Optional[Condition] = None
    behavior: Optional[Behavior] = None
    is_shallow: bool = True

    def evaluate_condition(self) -> bool:
        """
        Return True if the transition may fire. A missing condition always passes.
        """
        return self.condition is None or bool(self.condition())
