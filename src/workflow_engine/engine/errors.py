"""Error taxonomy for the workflow engine.

All failures are request-scoped business-rule rejections. None of them are
retried internally and none leave the stores partially updated.
"""

from __future__ import annotations

import uuid
from enum import Enum


class TransitionErrorKind(str, Enum):
    UNKNOWN_ACTION = "unknown_action"
    ACTION_DISABLED = "action_disabled"
    INSTANCE_FINAL = "instance_final"
    INVALID_SOURCE_STATE = "invalid_source_state"
    UNKNOWN_TARGET_STATE = "unknown_target_state"
    TARGET_STATE_DISABLED = "target_state_disabled"
    INITIAL_STATE_DISABLED = "initial_state_disabled"
    UNKNOWN_CURRENT_STATE = "unknown_current_state"


class WorkflowError(Exception):
    """Base class for engine failures."""

    kind: str = "workflow_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(WorkflowError):
    """Raised when a definition is malformed."""

    kind = "validation_error"


class TransitionError(WorkflowError):
    """Raised when an instance cannot be started or advanced."""

    def __init__(self, kind: TransitionErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind.value
        self.transition_kind = kind


class NotFoundError(WorkflowError):
    kind = "not_found"

    def __init__(self, entity: str, entity_id: uuid.UUID) -> None:
        super().__init__(f"{entity.capitalize()} not found.")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(WorkflowError):
    kind = "conflict"
