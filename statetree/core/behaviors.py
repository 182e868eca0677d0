# statetree/core/behaviors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Callable, Iterator, List

Behavior = Callable[[], None]


class BehaviorList:
    """
    Ordered list of callbacks run together, in subscription order.

    The callable passed to :meth:`add` is its own handle: it can only be removed
    by passing the same object back to :meth:`remove`. A lambda written inline
    at the call site can therefore never be unsubscribed.
    """

    def __init__(self) -> None:
        self._behaviors: List[Behavior] = []

    def add(self, behavior: Behavior) -> None:
        """
        Subscribe a callback. The same callable may be added more than once.

        :param behavior: A zero-argument callable.
        """
        if not callable(behavior):
            raise TypeError("Behavior must be callable")
        self._behaviors.append(behavior)

    def remove(self, behavior: Behavior) -> None:
        """
        Unsubscribe the most recently added occurrence of ``behavior``. Does
        nothing if it was never added.
        """
        for index in range(len(self._behaviors) - 1, -1, -1):
            if self._behaviors[index] is behavior:
                del self._behaviors[index]
                return

    def invoke(self) -> None:
        """Run every callback in subscription order."""
        # Snapshot so a callback unsubscribing itself does not skip its neighbour.
        for behavior in list(self._behaviors):
            behavior()

    def __len__(self) -> int:
        return len(self._behaviors)

    def __iter__(self) -> Iterator[Behavior]:
        return iter(list(self._behaviors))

    def __contains__(self, behavior: object) -> bool:
        return any(b is behavior for b in self._behaviors)
