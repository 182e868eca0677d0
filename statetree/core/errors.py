# statetree/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class StateTreeError(Exception):
    """
    Base exception class for errors within the state tree library.
    """


class InvalidIdentifierError(StateTreeError, ValueError):
    """
    Raised when a state or event identifier is missing, empty, or made up solely
    of whitespace.
    """


class StructuralConflictError(StateTreeError, ValueError):
    """
    Raised when a child cannot be attached without breaking the tree: the node
    would parent itself, the child already has a parent, the attachment would
    create a cycle, or a sibling with the same id already exists.
    """


class MissingEntityError(StateTreeError, LookupError):
    """
    Raised when a referenced child does not exist, or when a transition names
    endpoints that are not distinct current children of the owning node.
    """


class InvariantViolationError(StateTreeError, RuntimeError):
    """
    Raised when an operation would leave a node without a valid default child.
    """


class ValidationError(StateTreeError, ValueError):
    """
    Raised when validation detects a tree that breaks its structural invariants.
    """
