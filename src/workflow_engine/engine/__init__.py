"""Workflow validation and transition engine.

This package holds:
- the immutable entity model
- the definition validator
- the pure transition engine
- an in-memory store with compare-and-swap
- the service that sequences them
"""

from __future__ import annotations

from .errors import (
    ConflictError,
    NotFoundError,
    TransitionError,
    TransitionErrorKind,
    ValidationError,
    WorkflowError,
)
from .models import (
    NIL_ID,
    Action,
    HistoryEntry,
    State,
    WorkflowDefinition,
    WorkflowInstance,
)
from .service import WorkflowService
from .store import InMemoryStore
from .transitions import execute_action, start_instance
from .validation import parse_definition, validate_definition

__all__ = [
    "NIL_ID",
    "Action",
    "ConflictError",
    "HistoryEntry",
    "InMemoryStore",
    "NotFoundError",
    "State",
    "TransitionError",
    "TransitionErrorKind",
    "ValidationError",
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowInstance",
    "WorkflowService",
    "execute_action",
    "parse_definition",
    "start_instance",
    "validate_definition",
]
