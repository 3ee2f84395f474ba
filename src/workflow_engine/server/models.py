"""Pydantic models for the REST server.

Response shapes only. Definition payloads are parsed by
`workflow_engine.engine.validation.parse_definition` so malformed bodies are
reported as validation rejections rather than framework errors.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from workflow_engine.engine.models import (
    HistoryEntry,
    WorkflowDefinition,
    WorkflowInstance,
)


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ApiState(_ApiModel):
    id: UUID
    name: str
    is_initial: bool = Field(alias="isInitial")
    is_final: bool = Field(alias="isFinal")
    enabled: bool


class ApiAction(_ApiModel):
    id: UUID
    name: str
    enabled: bool
    from_states: list[UUID] = Field(alias="fromStates")
    to_state: UUID = Field(alias="toState")


class ApiDefinition(_ApiModel):
    id: UUID
    name: str
    states: list[ApiState]
    actions: list[ApiAction]

    @classmethod
    def from_definition(cls, definition: WorkflowDefinition) -> ApiDefinition:
        return cls.model_validate(definition.to_json())


class ApiHistoryEntry(_ApiModel):
    action_id: UUID = Field(alias="actionId")
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> ApiHistoryEntry:
        return cls(action_id=entry.action_id, timestamp=entry.timestamp)


class ApiInstance(_ApiModel):
    id: UUID
    definition_id: UUID = Field(alias="definitionId")
    current_state_id: UUID = Field(alias="currentStateId")
    history: list[ApiHistoryEntry] = Field(default_factory=list)

    @classmethod
    def from_instance(cls, instance: WorkflowInstance) -> ApiInstance:
        return cls(
            id=instance.id,
            definition_id=instance.definition_id,
            current_state_id=instance.current_state_id,
            history=[ApiHistoryEntry.from_entry(h) for h in instance.history],
        )


class ApiHealth(BaseModel):
    status: str
    version: str
