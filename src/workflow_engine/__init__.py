"""Workflow Engine.

Define finite-state workflows, start instances of them, and drive instances
forward through validated actions:
- definition validation before acceptance
- a pure transition engine
- an in-memory store with compare-and-swap updates
- a thin FastAPI surface and CLI
"""

__version__ = "0.1.0"

from workflow_engine.engine.service import WorkflowService

__all__ = ["__version__", "WorkflowService"]
