# statetree/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class EventResponse:
    """
    A state's response to an event.

    :param response: Action invoked when the event reaches the state.
    :param should_consume: Whether handling the event stops its propagation.
    """

    response: Callable[[], None]
    should_consume: bool

    def invoke(self) -> bool:
        """
        Run the response and report whether the event was consumed.
        """
        self.response()
        return self.should_consume
