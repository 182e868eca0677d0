# statetree/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""statetree: a hierarchical finite state machine engine.

States own their children and keep one of them active. Transitions switch the
active child in response to events, and events travel either up from the
innermost active state or down from the root.
"""

from statetree.core.behaviors import BehaviorList
from statetree.core.errors import (
    InvalidIdentifierError,
    InvariantViolationError,
    MissingEntityError,
    StateTreeError,
    StructuralConflictError,
    ValidationError,
)
from statetree.core.events import EventResponse
from statetree.core.identifiers import EventId, StateId, as_event_id, as_state_id
from statetree.core.machine import Machine
from statetree.core.states import State
from statetree.core.transitions import Transition, TransitionId
from statetree.core.validations import Validator

__version__ = "0.1.0"

__all__ = [
    "BehaviorList",
    "EventId",
    "EventResponse",
    "InvalidIdentifierError",
    "InvariantViolationError",
    "Machine",
    "MissingEntityError",
    "State",
    "StateId",
    "StateTreeError",
    "StructuralConflictError",
    "Transition",
    "TransitionId",
    "ValidationError",
    "Validator",
    "as_event_id",
    "as_state_id",
]
