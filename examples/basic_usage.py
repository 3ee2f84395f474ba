#!/usr/bin/env python3
"""Programmatic workflow example.

This demonstrates using the engine components directly:

* define a Draft -> Review -> Approved workflow
* start an instance of it
* drive the instance with actions and print its history

Pass `--reject-early` to see a rejected transition first.
"""

from __future__ import annotations

import argparse
import uuid
from typing import Sequence

from workflow_engine.engine import (
    Action,
    State,
    TransitionError,
    WorkflowDefinition,
    WorkflowService,
)
from workflow_engine.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a review workflow (programmatic example).")
    parser.add_argument(
        "--reject-early",
        action="store_true",
        help="Try to approve before submitting for review",
    )
    parser.add_argument("--log-level", default="WARNING", help="Root logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    draft, review, approved = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    submit, approve = uuid.uuid4(), uuid.uuid4()
    definition = WorkflowDefinition(
        id=uuid.uuid4(),
        name="Document review",
        states=(
            State(id=draft, name="Draft", is_initial=True),
            State(id=review, name="Review"),
            State(id=approved, name="Approved", is_final=True),
        ),
        actions=(
            Action(id=submit, name="SubmitForReview", from_states=(draft,), to_state=review),
            Action(id=approve, name="Approve", from_states=(review,), to_state=approved),
        ),
    )

    service = WorkflowService()
    service.create_definition(definition)
    instance = service.start_instance(definition.id)
    print(f"Started instance {instance.id} in state Draft")

    steps = [approve, submit, approve] if args.reject_early else [submit, approve]
    for action_id in steps:
        try:
            instance = service.execute_action(instance.id, action_id)
        except TransitionError as exc:
            print(f"Rejected ({exc.kind}): {exc}")
            continue
        state = definition.find_state(instance.current_state_id)
        print(f"-> {state.name if state else instance.current_state_id}")

    for entry in instance.history:
        action = definition.find_action(entry.action_id)
        print(f"{entry.timestamp.isoformat()}  {action.name if action else entry.action_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
