"""CLI entrypoint for the workflow engine.

Commands:
- serve:    run the REST API with uvicorn
- validate: check a workflow definition JSON file without starting a server
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError as SettingsValidationError

from workflow_engine import __version__
from workflow_engine.engine.errors import ValidationError
from workflow_engine.engine.validation import parse_definition, validate_definition
from workflow_engine.logging import configure_logging
from workflow_engine.server.app import create_app
from workflow_engine.server.config import ServerSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-engine",
        description="Finite-state workflow definitions, instances and transitions",
    )
    parser.add_argument("--version", action="version", version=f"workflow-engine {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument(
        "--host", default=None, help="Bind address (defaults to WORKFLOW_ENGINE_HOST)"
    )
    serve.add_argument(
        "--port", type=int, default=None, help="Bind port (defaults to WORKFLOW_ENGINE_PORT)"
    )

    validate = subparsers.add_parser(
        "validate", help="Validate a workflow definition JSON file"
    )
    validate.add_argument("path", type=Path, help="Path to the definition JSON file")

    return parser


def _validate_file(path: Path) -> int:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read definition {path}: {e}", file=sys.stderr)
        return 2

    try:
        definition = parse_definition(raw)
        validate_definition(definition)
    except ValidationError as e:
        logger.info("Definition rejected", extra={"path": str(path), "reason": e.message})
        print(f"Rejected: {e.message}", file=sys.stderr)
        return 1

    print(f"OK {definition.id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ServerSettings()
    except SettingsValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "validate":
        return _validate_file(args.path)

    if args.command == "serve":
        host = args.host or settings.host
        port = args.port or settings.port
        logger.info("Starting server", extra={"host": host, "port": port})
        uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
        return 0

    logger.error("Unknown command", extra={"command": args.command})
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
