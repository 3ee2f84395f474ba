"""Transition engine.

Pure functions: (instance, definition, action) -> next instance. Nothing here
touches a store; the caller is responsible for swapping the result in.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from .errors import TransitionError, TransitionErrorKind
from .models import HistoryEntry, WorkflowDefinition, WorkflowInstance


def start_instance(
    definition: WorkflowDefinition, *, instance_id: uuid.UUID | None = None
) -> WorkflowInstance:
    """Create a new instance positioned at the definition's initial state."""

    initial = definition.initial_state()
    if not initial.enabled:
        raise TransitionError(
            TransitionErrorKind.INITIAL_STATE_DISABLED,
            f"Initial state '{initial.name}' is disabled; cannot start instance.",
        )
    return WorkflowInstance(
        id=instance_id if instance_id is not None else uuid.uuid4(),
        definition_id=definition.id,
        current_state_id=initial.id,
        history=(),
    )


def execute_action(
    instance: WorkflowInstance,
    definition: WorkflowDefinition,
    action_id: uuid.UUID,
    *,
    now: datetime | None = None,
) -> WorkflowInstance:
    """Apply an action to an instance and return the resulting instance.

    The action is looked up in ``definition`` only; an action id that belongs
    to another definition is unknown here. Checks run in a fixed order and the
    first failure is raised as a `TransitionError`.
    """

    action = definition.find_action(action_id)
    if action is None:
        raise TransitionError(
            TransitionErrorKind.UNKNOWN_ACTION,
            f"Unknown action {action_id} for this instance's definition.",
        )

    if not action.enabled:
        raise TransitionError(
            TransitionErrorKind.ACTION_DISABLED, f"Action '{action.name}' is disabled."
        )

    current = definition.find_state(instance.current_state_id)
    if current is None:
        raise TransitionError(
            TransitionErrorKind.UNKNOWN_CURRENT_STATE,
            f"Current state {instance.current_state_id} is not part of the definition.",
        )

    # Final states are absorbing, whatever the action's from-states say.
    if current.is_final:
        raise TransitionError(
            TransitionErrorKind.INSTANCE_FINAL,
            f"Instance is already in final state '{current.name}'.",
        )

    if current.id not in action.from_states:
        raise TransitionError(
            TransitionErrorKind.INVALID_SOURCE_STATE,
            f"Action '{action.name}' cannot be executed from state '{current.name}'.",
        )

    target = definition.find_state(action.to_state)
    if target is None:
        raise TransitionError(
            TransitionErrorKind.UNKNOWN_TARGET_STATE,
            f"Action '{action.name}' points to unknown target state.",
        )
    if not target.enabled:
        raise TransitionError(
            TransitionErrorKind.TARGET_STATE_DISABLED,
            f"Target state '{target.name}' is disabled.",
        )

    if now is None:
        timestamp = datetime.now(tz=UTC)
    elif now.tzinfo is None:
        timestamp = now.replace(tzinfo=UTC)
    else:
        timestamp = now.astimezone(UTC)

    return WorkflowInstance(
        id=instance.id,
        definition_id=instance.definition_id,
        current_state_id=target.id,
        history=(*instance.history, HistoryEntry(action_id=action.id, timestamp=timestamp)),
    )
