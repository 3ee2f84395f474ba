"""Workflow entity model.

Plain immutable value records. Transitions never mutate these; they build new
values and the store swaps them in.

Incoming payloads are parsed by `workflow_engine.engine.validation.parse_definition`;
the records here only know how to render themselves.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

NIL_ID = uuid.UUID(int=0)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class State:
    id: uuid.UUID
    name: str
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True

    def to_json(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "name": self.name,
            "isInitial": self.is_initial,
            "isFinal": self.is_final,
            "enabled": self.enabled,
        }


@dataclass(frozen=True, slots=True)
class Action:
    """A directed transition: any of ``from_states`` -> ``to_state``."""

    id: uuid.UUID
    name: str
    from_states: tuple[uuid.UUID, ...]
    to_state: uuid.UUID
    enabled: bool = True

    def to_json(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "name": self.name,
            "enabled": self.enabled,
            "fromStates": [str(s) for s in self.from_states],
            "toState": str(self.to_state),
        }


@dataclass(frozen=True, slots=True)
class WorkflowDefinition:
    id: uuid.UUID
    name: str
    states: tuple[State, ...]
    actions: tuple[Action, ...] = ()

    def find_state(self, state_id: uuid.UUID) -> State | None:
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: uuid.UUID) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None

    def initial_state(self) -> State:
        """Return the unique initial state.

        Only meaningful for a definition that passed validation.
        """

        for state in self.states:
            if state.is_initial:
                return state
        raise LookupError(f"Definition {self.id} has no initial state")

    def to_json(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "name": self.name,
            "states": [s.to_json() for s in self.states],
            "actions": [a.to_json() for a in self.actions],
        }


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    action_id: uuid.UUID
    timestamp: datetime

    def to_json(self) -> dict[str, object]:
        return {"actionId": str(self.action_id), "timestamp": _as_utc(self.timestamp).isoformat()}


@dataclass(frozen=True, slots=True)
class WorkflowInstance:
    """A running token in a definition's state graph."""

    id: uuid.UUID
    definition_id: uuid.UUID
    current_state_id: uuid.UUID
    history: tuple[HistoryEntry, ...] = ()

    def to_json(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "definitionId": str(self.definition_id),
            "currentStateId": str(self.current_state_id),
            "history": [h.to_json() for h in self.history],
        }
