"""Workflow service: definitions, instances and action execution.

Wires the validator and the transition engine to the stores. Business rules
live in `validation` and `transitions`; this module only sequences reads,
computations and atomic writes.
"""

from __future__ import annotations

import logging
import uuid

from .errors import ConflictError, NotFoundError, TransitionError, ValidationError
from .models import WorkflowDefinition, WorkflowInstance
from .store import InMemoryStore
from .transitions import execute_action, start_instance
from .validation import parse_definition, validate_definition

logger = logging.getLogger(__name__)

DEFAULT_MAX_TRANSITION_RETRIES = 16


class WorkflowService:
    """High-level, testable workflow operations."""

    def __init__(
        self,
        *,
        definitions: InMemoryStore[uuid.UUID, WorkflowDefinition] | None = None,
        instances: InMemoryStore[uuid.UUID, WorkflowInstance] | None = None,
        max_transition_retries: int = DEFAULT_MAX_TRANSITION_RETRIES,
    ) -> None:
        if max_transition_retries < 1:
            raise ValueError("max_transition_retries must be >= 1")
        self._definitions = definitions if definitions is not None else InMemoryStore()
        self._instances = instances if instances is not None else InMemoryStore()
        self._max_transition_retries = max_transition_retries

    # Definitions

    def create_definition(self, definition: WorkflowDefinition | None) -> WorkflowDefinition:
        try:
            validate_definition(definition)
        except ValidationError as e:
            logger.info(
                "Definition rejected",
                extra={"definition_id": _id_or_none(definition), "reason": e.message},
            )
            raise

        assert definition is not None
        if not self._definitions.insert_if_absent(definition.id, definition):
            logger.info(
                "Definition already exists", extra={"definition_id": str(definition.id)}
            )
            raise ConflictError("Definition already exists.")

        logger.info(
            "Created definition",
            extra={
                "definition_id": str(definition.id),
                "states": len(definition.states),
                "actions": len(definition.actions),
            },
        )
        return definition

    def create_definition_from_json(self, raw: object) -> WorkflowDefinition:
        try:
            definition = parse_definition(raw)
        except ValidationError as e:
            logger.info("Definition payload rejected", extra={"reason": e.message})
            raise
        return self.create_definition(definition)

    def get_definition(self, definition_id: uuid.UUID) -> WorkflowDefinition:
        definition = self._definitions.get(definition_id)
        if definition is None:
            raise NotFoundError("definition", definition_id)
        return definition

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self._definitions.list_all()

    # Instances

    def start_instance(self, definition_id: uuid.UUID) -> WorkflowInstance:
        definition = self.get_definition(definition_id)
        try:
            instance = start_instance(definition)
        except TransitionError as e:
            logger.info(
                "Instance start rejected",
                extra={"definition_id": str(definition_id), "kind": e.kind},
            )
            raise

        # uuid4 collisions are not expected; treat one as a conflict rather than overwrite.
        if not self._instances.insert_if_absent(instance.id, instance):
            raise ConflictError("Instance already exists.")

        logger.info(
            "Started instance",
            extra={
                "definition_id": str(definition_id),
                "instance_id": str(instance.id),
                "state_id": str(instance.current_state_id),
            },
        )
        return instance

    def get_instance(self, instance_id: uuid.UUID) -> WorkflowInstance:
        instance = self._instances.get(instance_id)
        if instance is None:
            raise NotFoundError("instance", instance_id)
        return instance

    def list_instances(self) -> list[WorkflowInstance]:
        return self._instances.list_all()

    def execute_action(self, instance_id: uuid.UUID, action_id: uuid.UUID) -> WorkflowInstance:
        """Advance an instance by one action.

        Runs read -> compute -> compare-and-swap, retrying when another caller
        committed a transition on the same instance in between.
        """

        for attempt in range(1, self._max_transition_retries + 1):
            current = self.get_instance(instance_id)
            definition = self._definitions.get(current.definition_id)
            if definition is None:
                raise NotFoundError("definition", current.definition_id)

            try:
                updated = execute_action(current, definition, action_id)
            except TransitionError as e:
                logger.info(
                    "Action rejected",
                    extra={
                        "instance_id": str(instance_id),
                        "action_id": str(action_id),
                        "kind": e.kind,
                    },
                )
                raise

            if self._instances.compare_and_swap(instance_id, current, updated):
                logger.info(
                    "Executed action",
                    extra={
                        "instance_id": str(instance_id),
                        "action_id": str(action_id),
                        "from_state_id": str(current.current_state_id),
                        "to_state_id": str(updated.current_state_id),
                    },
                )
                return updated

            logger.debug(
                "Instance changed concurrently; retrying",
                extra={"instance_id": str(instance_id), "attempt": attempt},
            )

        raise ConflictError(
            f"Instance {instance_id} kept changing concurrently; gave up after "
            f"{self._max_transition_retries} attempts."
        )


def _id_or_none(definition: WorkflowDefinition | None) -> str | None:
    if definition is None:
        return None
    return str(definition.id)
