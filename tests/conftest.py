"""Test configuration and fixtures."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

import pytest

from workflow_engine.engine.models import Action, State, WorkflowDefinition
from workflow_engine.engine.service import WorkflowService


@dataclass(frozen=True)
class ReviewIds:
    draft: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
    review: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000a2")
    approved: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000a3")
    submit: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000b1")
    approve: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000b2")
    definition: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")


@pytest.fixture
def ids() -> ReviewIds:
    """Identifiers used by the review definition."""
    return ReviewIds()


@pytest.fixture
def review_definition(ids: ReviewIds) -> WorkflowDefinition:
    """Draft (initial) -> Review -> Approved (final)."""
    return WorkflowDefinition(
        id=ids.definition,
        name="Document review",
        states=(
            State(id=ids.draft, name="Draft", is_initial=True),
            State(id=ids.review, name="Review"),
            State(id=ids.approved, name="Approved", is_final=True),
        ),
        actions=(
            Action(
                id=ids.submit, name="SubmitForReview", from_states=(ids.draft,), to_state=ids.review
            ),
            Action(
                id=ids.approve, name="Approve", from_states=(ids.review,), to_state=ids.approved
            ),
        ),
    )


@pytest.fixture
def review_payload(review_definition: WorkflowDefinition) -> dict[str, object]:
    """The review definition in its JSON wire form."""
    return review_definition.to_json()


@pytest.fixture
def service() -> WorkflowService:
    """Provide an empty workflow service."""
    return WorkflowService()
