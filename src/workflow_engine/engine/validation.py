"""Definition validation.

A definition is validated exactly once, before it is stored. Validation is
fail-fast: the first violated rule is reported.

Two entry points:
- `parse_definition` turns an untrusted JSON-like payload into a
  `WorkflowDefinition`, rejecting payloads that are missing, have missing
  collections or contain null entries.
- `validate_definition` enforces the structural rules (unique ids, exactly one
  initial state, resolvable action references).
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import NIL_ID, Action, State, WorkflowDefinition

PAYLOAD_MISSING = "Definition payload missing."
NO_STATES = "Workflow must include at least one state."
ACTIONS_REQUIRED = "Actions collection is required (may be empty)."
NULL_STATE = "Null state entry detected."
NULL_ACTION = "Null action entry detected."
DUPLICATE_IDS = "Duplicate state or action IDs detected."
INITIAL_STATE_COUNT = "Definition must have exactly one initial state."


def _lenient_id(value: object) -> uuid.UUID:
    # Unparseable references collapse to the nil id so the structural rules
    # report them against the owning action.
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        try:
            return uuid.UUID(value)
        except ValueError:
            return NIL_ID
    return NIL_ID


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value: object) -> object:
        return "" if value is None else value


class _DefinitionHeader(_WireModel):
    id: uuid.UUID


class _StatePayload(_WireModel):
    id: uuid.UUID
    is_initial: StrictBool = Field(default=False, alias="isInitial")
    is_final: StrictBool = Field(default=False, alias="isFinal")
    enabled: StrictBool = True

    def to_state(self) -> State:
        return State(
            id=self.id,
            name=self.name,
            is_initial=self.is_initial,
            is_final=self.is_final,
            enabled=self.enabled,
        )


class _ActionPayload(_WireModel):
    id: uuid.UUID
    enabled: StrictBool = True
    from_states: list[uuid.UUID] = Field(default_factory=list, alias="fromStates")
    to_state: uuid.UUID = Field(default=NIL_ID, alias="toState")

    @field_validator("from_states", mode="before")
    @classmethod
    def _coerce_from_states(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list):
            return [_lenient_id(v) for v in value]
        return value

    @field_validator("to_state", mode="before")
    @classmethod
    def _coerce_to_state(cls, value: object) -> uuid.UUID:
        return _lenient_id(value)

    def to_action(self) -> Action:
        return Action(
            id=self.id,
            name=self.name,
            enabled=self.enabled,
            from_states=tuple(self.from_states),
            to_state=self.to_state,
        )


def _first_error(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def parse_definition(raw: object) -> WorkflowDefinition:
    """Build a `WorkflowDefinition` from a JSON-like payload.

    Raises:
        ValidationError: the payload is missing, a collection is missing or
            null, an entry is null, or a field cannot be parsed.
    """

    if raw is None:
        raise ValidationError(PAYLOAD_MISSING)
    if not isinstance(raw, Mapping):
        raise ValidationError("Definition payload must be a JSON object.")

    states_raw = raw.get("states")
    if states_raw is None or (isinstance(states_raw, list) and not states_raw):
        raise ValidationError(NO_STATES)
    if not isinstance(states_raw, list):
        raise ValidationError("States must be a list.")

    actions_raw = raw.get("actions")
    if actions_raw is None:
        raise ValidationError(ACTIONS_REQUIRED)
    if not isinstance(actions_raw, list):
        raise ValidationError("Actions must be a list.")

    if any(s is None for s in states_raw):
        raise ValidationError(NULL_STATE)
    if any(a is None for a in actions_raw):
        raise ValidationError(NULL_ACTION)

    try:
        header = _DefinitionHeader.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid definition: {_first_error(e)}") from e

    states: list[State] = []
    for idx, item in enumerate(states_raw):
        try:
            states.append(_StatePayload.model_validate(item).to_state())
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid state entry at index {idx}: {_first_error(e)}") from e

    actions: list[Action] = []
    for idx, item in enumerate(actions_raw):
        try:
            actions.append(_ActionPayload.model_validate(item).to_action())
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid action entry at index {idx}: {_first_error(e)}"
            ) from e

    return WorkflowDefinition(
        id=header.id, name=header.name, states=tuple(states), actions=tuple(actions)
    )


def _validate_action(action: Action, state_ids: set[uuid.UUID]) -> None:
    if not action.from_states:
        raise ValidationError(f"Action '{action.name}' must specify at least one from-state.")

    if any(fs == NIL_ID for fs in action.from_states):
        raise ValidationError(f"Action '{action.name}' has an invalid from-state id.")
    if len(set(action.from_states)) != len(action.from_states):
        raise ValidationError(f"Action '{action.name}' has duplicate from-state ids.")

    if action.to_state not in state_ids:
        raise ValidationError(f"Action '{action.name}' points to unknown target state.")

    unknown = [str(fs) for fs in action.from_states if fs not in state_ids]
    if unknown:
        raise ValidationError(
            f"Action '{action.name}' references unknown from-state(s): {','.join(unknown)}."
        )


def validate_definition(definition: WorkflowDefinition | None) -> None:
    """Check a candidate definition against the structural rules.

    Pure and total: returns None when the definition is acceptable, otherwise
    raises `ValidationError` naming the first violated rule.
    """

    if definition is None:
        raise ValidationError(PAYLOAD_MISSING)

    if not definition.states:
        raise ValidationError(NO_STATES)
    if definition.actions is None:
        raise ValidationError(ACTIONS_REQUIRED)

    if any(s is None for s in definition.states):
        raise ValidationError(NULL_STATE)
    if any(a is None for a in definition.actions):
        raise ValidationError(NULL_ACTION)

    state_ids = {s.id for s in definition.states}
    action_ids = {a.id for a in definition.actions}
    if len(state_ids) != len(definition.states) or len(action_ids) != len(definition.actions):
        raise ValidationError(DUPLICATE_IDS)

    if sum(1 for s in definition.states if s.is_initial) != 1:
        raise ValidationError(INITIAL_STATE_COUNT)

    for action in definition.actions:
        _validate_action(action, state_ids)
