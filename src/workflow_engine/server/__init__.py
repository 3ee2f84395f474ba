"""FastAPI server adapter for workflow-engine.

Design intent:
- Keep business rules in `workflow_engine.engine.*`
- Keep server-specific concerns (routing, CORS, status codes) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_engine.server.app import create_app
