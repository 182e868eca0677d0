# statetree/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional
from weakref import ReferenceType, ref

from statetree.core.behaviors import Behavior, BehaviorList
from statetree.core.errors import (
    InvalidIdentifierError,
    InvariantViolationError,
    MissingEntityError,
    StructuralConflictError,
)
from statetree.core.events import EventResponse
from statetree.core.identifiers import (
    EventId,
    EventIdLike,
    StateId,
    StateIdLike,
    as_event_id,
    as_state_id,
    lookup_state_id,
)
from statetree.core.transitions import Condition, Transition, TransitionId

logger = logging.getLogger(__name__)


class State:
    """
    A single unit of logic in a hierarchical finite state machine.

    A state owns any number of child states and treats exactly one of them as
    active at a time. The first child ever added becomes the default child and
    is the fallback whenever the active child goes away. Following active
    children from a state downwards gives its active branch.

    Each state carries three ordered behaviour lists. Enter and update
    behaviours run top-down along the active branch (outermost first); exit
    behaviours run bottom-up (innermost first).

    Transitions registered on a state switch its active child when an event
    arrives while the transition's origin is active and its condition passes.
    Shallow transitions (the default) run only the two children's own exit and
    enter behaviours; deep transitions exit and enter the children's whole
    active branches.

    Events travel either upwards with :meth:`fire_event` or downwards with
    :meth:`drill_event`. A state consumes an event by taking a transition, or by
    running an :class:`EventResponse` whose ``should_consume`` flag is set.
    Consumed events propagate no further.

    Callbacks may mutate the tree or dispatch further events; the engine does
    not guard against this and the outcome of such re-entrant calls is not
    guaranteed to be consistent.
    """

    def __init__(self, state_id: StateIdLike) -> None:
        """
        :param state_id: Id of the new state, as a StateId or a plain string.
        :raises InvalidIdentifierError: If the id is None, empty, or whitespace.
        """
        self._id = as_state_id(state_id)
        self._parent: Optional[ReferenceType[State]] = None
        self._children: Dict[StateId, State] = {}
        self._transitions: Dict[TransitionId, Transition] = {}
        self._active_child_id: Optional[StateId] = None
        self._default_child_id: Optional[StateId] = None
        self._enter_behaviors = BehaviorList()
        self._update_behaviors = BehaviorList()
        self._exit_behaviors = BehaviorList()
        # Mutated directly by embedders.
        self.event_responses: Dict[EventId, EventResponse] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id.value!r})"

    def __getitem__(self, state_id: StateIdLike) -> State:
        return self.get_child(state_id)

    @property
    def id(self) -> StateId:
        """The id of this state."""
        return self._id

    @property
    def parent(self) -> Optional[State]:
        """The state that owns this one, or None for a root."""
        return self._parent() if self._parent is not None else None

    @property
    def active_child_id(self) -> Optional[StateId]:
        """Id of the active child, or None when there are no children."""
        return self._active_child_id

    @property
    def default_child_id(self) -> Optional[StateId]:
        """Id of the default child, or None when there are no children."""
        return self._default_child_id

    @property
    def active_child(self) -> Optional[State]:
        """The active child itself, or None when there are no children."""
        if self._active_child_id is None:
            return None
        return self._children[self._active_child_id]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_child(self, state_id: StateIdLike) -> State:
        """
        Return the child with the given id.

        :raises MissingEntityError: If there is no such child.
        """
        child = self._children.get(lookup_state_id(state_id))
        if child is None:
            raise MissingEntityError(f"State {self._id} does not contain a child with ID {state_id}.")
        return child

    def get_all_children(self) -> List[State]:
        """Return the children in the order they were added."""
        return list(self._children.values())

    def get_transitions(self) -> Mapping[TransitionId, Transition]:
        """Return a read-only view of this state's transitions."""
        return MappingProxyType(self._transitions)

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def add_child(self, child: State) -> State:
        """
        Attach ``child`` to this state.

        The first child ever attached (or the first after the state was emptied)
        becomes both default and active, and its active branch is entered
        straight away.

        :param child: The state to attach.
        :return: This state, for chaining.
        :raises StructuralConflictError: If ``child`` is this state, already has
            a parent, is an ancestor of this state, or shares its id with an
            existing child.
        """
        if child is self:
            raise StructuralConflictError("State may not add itself to its children.")

        if child.parent is not None:
            raise StructuralConflictError(
                f"Child {child.id} must be removed from its current parent before being added to a new parent."
            )

        ancestor = self.parent
        while ancestor is not None:
            if ancestor is child:
                raise StructuralConflictError(f"Parenting {child.id} to {self._id} would create a cycle in the hierarchy.")
            ancestor = ancestor.parent

        if child.id in self._children:
            raise StructuralConflictError(f"State {self._id} already contains a child with ID {child.id}.")

        self._children[child.id] = child
        child._parent = ref(self)
        logger.debug("Attached %s to %s", child.id, self._id)

        if len(self._children) == 1:
            self._default_child_id = child.id
            self._active_child_id = child.id
            child.enter_state()

        return self

    def add_children(self, children: Iterable[State]) -> State:
        """
        Attach each state in ``children`` in order. Children attached before a
        failing one stay attached.

        :return: This state, for chaining.
        """
        for child in children:
            self.add_child(child)
        return self

    def remove_child(self, state_id: StateIdLike) -> State:
        """
        Detach the child with the given id and drop every transition that starts
        or ends at it.

        If the removed child was active, the default child becomes active again
        and is re-entered. The removed subtree is not exited.

        :return: This state, for chaining.
        :raises MissingEntityError: If there is no such child.
        :raises InvariantViolationError: If the child is the default child and
            other children remain. The tree is left unchanged.
        """
        child = self._children.get(lookup_state_id(state_id))
        if child is None:
            raise MissingEntityError(f"State {self._id} does not contain a child with ID {state_id}.")
        state_id = child.id

        if state_id == self._default_child_id and len(self._children) > 1:
            raise InvariantViolationError("Default child must not be removed while other children remain.")

        del self._children[state_id]
        child._parent = None
        stale = [key for key, transition in self._transitions.items() if key.origin == state_id or transition.to == state_id]
        for key in stale:
            del self._transitions[key]
        logger.debug("Detached %s from %s", state_id, self._id)

        if not self._children:
            self._default_child_id = None
            self._active_child_id = None
            return self

        if state_id == self._active_child_id:
            self._active_child_id = self._default_child_id
            self._children[self._active_child_id].enter_state()

        return self

    def clear_children(self) -> State:
        """
        Detach every child and drop every transition. Detached children are not
        exited.

        :return: This state, for chaining.
        """
        for child in self._children.values():
            child._parent = None
        self._children.clear()
        self._transitions.clear()
        self._default_child_id = None
        self._active_child_id = None
        logger.debug("Cleared children of %s", self._id)
        return self

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def add_transition(
        self,
        from_id: StateIdLike,
        to_id: StateIdLike,
        on: EventIdLike,
        condition: Optional[Condition] = None,
        behavior: Optional[Behavior] = None,
        is_shallow: bool = True,
    ) -> State:
        """
        Register a transition between two children.

        A transition already registered for the same event and origin is
        replaced.

        :param from_id: Child that must be active for the transition to fire.
        :param to_id: Child that becomes active when it does.
        :param on: Event that triggers the transition.
        :param condition: Optional guard evaluated when the event arrives.
        :param behavior: Optional action run between exit and entry.
        :param is_shallow: Whether only the two children (rather than their
            active branches) are exited and entered.
        :return: This state, for chaining.
        :raises MissingEntityError: If either endpoint is not a child, or both
            endpoints are the same.
        :raises InvalidIdentifierError: If the event id is blank.
        """
        origin = self._children.get(lookup_state_id(from_id))
        if origin is None:
            raise MissingEntityError(f"State {self._id} does not contain a child with ID {from_id}.")
        target = self._children.get(lookup_state_id(to_id))
        if target is None:
            raise MissingEntityError(f"State {self._id} does not contain a child with ID {to_id}.")
        from_id, to_id = origin.id, target.id
        event_id = as_event_id(on)

        if from_id == to_id:
            raise MissingEntityError(f"Transition origin and target may not both be {from_id}.")
        if event_id.is_blank():
            raise InvalidIdentifierError("Event ID may not be None, empty, or comprised solely of whitespace.")

        key = TransitionId(event_id, from_id)
        if key in self._transitions:
            logger.debug("Replacing transition %s -> %s on %s in %s", from_id, self._transitions[key].to, event_id, self._id)
        self._transitions[key] = Transition(to_id, condition, behavior, is_shallow)
        logger.debug("Registered transition %s -> %s on %s in %s", from_id, to_id, event_id, self._id)
        return self

    def remove_transition(self, on: EventIdLike, from_id: StateIdLike) -> State:
        """
        Remove the transition triggered by ``on`` while ``from_id`` is active.
        Does nothing if there is none.

        :return: This state, for chaining.
        """
        origin = lookup_state_id(from_id)
        if origin is None:
            return self
        key = TransitionId(as_event_id(on), origin)
        if self._transitions.pop(key, None) is not None:
            logger.debug("Removed transition from %s on %s in %s", key.origin, key.event, self._id)
        return self

    # ------------------------------------------------------------------
    # Behaviours
    # ------------------------------------------------------------------

    def add_enter_behavior(self, behavior: Behavior) -> State:
        """Append a callback to this state's enter behaviour."""
        self._enter_behaviors.add(behavior)
        return self

    def remove_enter_behavior(self, behavior: Behavior) -> State:
        """Remove a callback from this state's enter behaviour, if present."""
        self._enter_behaviors.remove(behavior)
        return self

    def add_update_behavior(self, behavior: Behavior) -> State:
        """Append a callback to this state's update behaviour."""
        self._update_behaviors.add(behavior)
        return self

    def remove_update_behavior(self, behavior: Behavior) -> State:
        """Remove a callback from this state's update behaviour, if present."""
        self._update_behaviors.remove(behavior)
        return self

    def add_exit_behavior(self, behavior: Behavior) -> State:
        """Append a callback to this state's exit behaviour."""
        self._exit_behaviors.add(behavior)
        return self

    def remove_exit_behavior(self, behavior: Behavior) -> State:
        """Remove a callback from this state's exit behaviour, if present."""
        self._exit_behaviors.remove(behavior)
        return self

    # ------------------------------------------------------------------
    # Event propagation
    # ------------------------------------------------------------------

    def fire_event(self, event: EventIdLike) -> bool:
        """
        Offer ``event`` to this state, then to each ancestor in turn until one
        consumes it.

        Does nothing if this state is not the active child of its parent.

        :return: True if some state consumed the event.
        """
        event = as_event_id(event)
        parent = self.parent
        if parent is not None and parent.active_child_id != self._id:
            logger.debug("Ignoring %s fired at inactive state %s", event, self._id)
            return False

        if self.try_transition(event):
            return True
        if self.try_handle_event(event):
            return True

        if parent is None:
            logger.debug("Event %s dropped at root %s", event, self._id)
            return False
        return parent.fire_event(event)

    def drill_event(self, event: EventIdLike) -> bool:
        """
        Offer ``event`` to the active child, then to each active descendant in
        turn until one consumes it. This state's own transitions and responses
        are not consulted.

        Does nothing if this state is not the active child of its parent.

        :return: True if some state consumed the event.
        """
        event = as_event_id(event)
        parent = self.parent
        if parent is not None and parent.active_child_id != self._id:
            logger.debug("Ignoring %s drilled into inactive state %s", event, self._id)
            return False

        child = self.active_child
        if child is None:
            return False

        if child.try_transition(event):
            return True
        if child.try_handle_event(event):
            return True

        return child.drill_event(event)

    def try_handle_event(self, event: EventId) -> bool:
        """
        Run this state's response to ``event``, if it has one.

        :return: The response's consume flag, or False when there is no response.
        """
        event_response = self.event_responses.get(event)
        if event_response is None:
            return False
        logger.debug("State %s responding to %s", self._id, event)
        return event_response.invoke()

    def try_transition(self, event: EventId) -> bool:
        """
        Take the transition registered for ``event`` from the active child, if
        there is one and its condition passes.

        :return: True if the transition was taken.
        """
        if self._active_child_id is None:
            return False

        transition = self._transitions.get(TransitionId(event, self._active_child_id))
        if transition is None or not transition.evaluate_condition():
            return False

        origin = self._children[self._active_child_id]
        if transition.is_shallow:
            origin._exit_behaviors.invoke()
        else:
            origin.exit_state()

        if transition.behavior is not None:
            transition.behavior()
        self._active_child_id = transition.to

        target = self._children[transition.to]
        if transition.is_shallow:
            target._enter_behaviors.invoke()
        else:
            target.enter_state()

        logger.debug(
            "State %s transitioned %s -> %s on %s (%s)",
            self._id,
            origin.id,
            target.id,
            event,
            "shallow" if transition.is_shallow else "deep",
        )
        return True

    # ------------------------------------------------------------------
    # Lifecycle traversal
    # ------------------------------------------------------------------

    def enter_state(self) -> None:
        """Run enter behaviours along the active branch, outermost first."""
        self._enter_behaviors.invoke()
        child = self.active_child
        if child is not None:
            child.enter_state()

    def update_state(self) -> None:
        """Run update behaviours along the active branch, outermost first."""
        self._update_behaviors.invoke()
        child = self.active_child
        if child is not None:
            child.update_state()

    def exit_state(self) -> None:
        """Run exit behaviours along the active branch, innermost first."""
        child = self.active_child
        if child is not None:
            child.exit_state()
        self._exit_behaviors.invoke()
