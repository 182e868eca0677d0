# statetree/core/identifiers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from statetree.core.errors import InvalidIdentifierError


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not isinstance(value, str) or not value.strip()


@dataclass(frozen=True)
class StateId:
    """
    Identifies a state among its siblings. Two ids are equal when their
    underlying strings are equal.
    """

    value: str

    def __post_init__(self) -> None:
        if _is_blank(self.value):
            raise InvalidIdentifierError(
                "State ID may not be None, empty, or comprised solely of whitespace."
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EventId:
    """
    Identifies an event a state may respond to.

    Unlike StateId, a blank EventId can be constructed; it is rejected when used
    to register a transition.
    """

    value: Optional[str]

    def is_blank(self) -> bool:
        """Return True if the id is None, empty, or whitespace-only."""
        return _is_blank(self.value)

    def __str__(self) -> str:
        return "" if self.value is None else self.value


StateIdLike = Union[StateId, str]
EventIdLike = Union[EventId, str]


def as_state_id(value: StateIdLike) -> StateId:
    """
    Coerce a plain string into a StateId, passing existing ids through.

    :raises InvalidIdentifierError: If the string is blank.
    """
    if isinstance(value, StateId):
        return value
    return StateId(value)


def as_event_id(value: EventIdLike) -> EventId:
    """Coerce a plain string into an EventId, passing existing ids through."""
    if isinstance(value, EventId):
        return value
    return EventId(value)


def lookup_state_id(value: StateIdLike) -> Optional[StateId]:
    """
    Coerce ``value`` for a lookup. Returns None for a blank string, which can
    never name an existing state.
    """
    if isinstance(value, StateId):
        return value
    if _is_blank(value):
        return None
    return StateId(value)
