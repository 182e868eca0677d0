# statetree/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, List, Set

from statetree.core.errors import ValidationError

if TYPE_CHECKING:
    from statetree.core.states import State


class Validator:
    """
    Checks a built tree against its structural invariants. Never invoked
    implicitly; embedders call it after building or mutating a tree.
    """

    def validate_tree(self, root: "State") -> None:
        """
        Check every node reachable from ``root``.

        :param root: The state to start from.
        :raises ValidationError: If any invariant is broken. The message lists
            every problem found.
        """
        errors = self.collect_errors(root)
        if errors:
            raise ValidationError("\n".join(errors))

    def collect_errors(self, root: "State") -> List[str]:
        """
        Return a message for every broken invariant under ``root``.
        """
        errors: List[str] = []
        visited: Set[int] = set()
        stack = [root]
        while stack:
            state = stack.pop()
            if id(state) in visited:
                errors.append(f"State {state.id} is reachable more than once.")
                continue
            visited.add(id(state))
            errors.extend(_DefaultValidationRules.validate_state(state))
            stack.extend(reversed(state.get_all_children()))
        return errors


class _DefaultValidationRules:
    """
    Built-in rules applied to each node of a tree.
    """

    @staticmethod
    def validate_state(state: "State") -> List[str]:
        errors = []
        children = state.get_all_children()
        child_ids = {child.id for child in children}

        for child in children:
            if child.parent is not state:
                errors.append(f"Child {child.id} of {state.id} does not point back to its parent.")

        if children:
            if state.default_child_id not in child_ids:
                errors.append(f"Default child {state.default_child_id} of {state.id} is not one of its children.")
            if state.active_child_id not in child_ids:
                errors.append(f"Active child {state.active_child_id} of {state.id} is not one of its children.")
        elif state.default_child_id is not None or state.active_child_id is not None:
            errors.append(f"State {state.id} has no children but still names an active or default child.")

        for key, transition in state.get_transitions().items():
            if key.origin not in child_ids:
                errors.append(f"Transition on {key.event} in {state.id} starts at unknown child {key.origin}.")
            if transition.to not in child_ids:
                errors.append(f"Transition on {key.event} in {state.id} targets unknown child {transition.to}.")
            if key.origin == transition.to:
                errors.append(f"Transition on {key.event} in {state.id} starts and ends at {key.origin}.")

        return errors
