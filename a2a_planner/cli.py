#!/usr/bin/env python3
"""
a2a-planner command-line interface.

    a2a-planner call <operation> [JSON params]   send one operation
    a2a-planner operations                       list catalog operations
    a2a-planner run [GOAL ...]                   plan and execute goals

``run`` without goals starts an interactive prompt; all goals of one
invocation share a single conversation.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .catalog import OperationCatalog
from .config_loader import load_app_config
from .inference import OpenAIProvider
from .models import AppConfig
from .orchestration import (
    AnswerReady,
    LoopEvent,
    OperationFinished,
    OperationStarted,
    OrchestrationLoop,
    PlanDeclared,
)
from .protocol import A2AClient, A2AClientError, RequestsTransport, fetch_agent_card

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_banner(config: AppConfig, counterpart: str, operations: int) -> None:
    """Print the welcome banner."""
    print(
        f"""
A2A planner - {config.orchestration.agent_name} <-> {counterpart}
  server : {config.a2a.base_url}{config.a2a.endpoint_path}
  model  : {config.inference.model}
  catalog: {operations} operations

Commands: /ops  /clear  /quit
"""
    )


class ConsoleObserver:
    """Prints loop events as plain text."""

    def on_event(self, event: LoopEvent) -> None:
        if isinstance(event, PlanDeclared):
            print(f"\n[plan] {event.title}")
            for i, step in enumerate(event.steps, 1):
                print(f"  {i}. {step}")
        elif isinstance(event, OperationStarted):
            if event.reflection:
                print(f"\n  {event.reflection}")
            print(f"\n> {event.narration}")
            if event.reason:
                print(f"  why: {event.reason}")
            print(f"  {event.operation} {json.dumps(event.params, ensure_ascii=False)}")
        elif isinstance(event, OperationFinished):
            if event.error is not None:
                print(f"  x failed ({event.elapsed_ms}ms): {event.error}")
            else:
                mark = "ok" if event.succeeded else event.status
                print(f"  {mark} ({event.elapsed_ms}ms)")
                print(_indent(json.dumps(event.data, indent=2, ensure_ascii=False)))
            if event.warning:
                print(f"  ! {event.warning}")
        elif isinstance(event, AnswerReady):
            print("\n" + "-" * 70)
            print(event.text)
            print("-" * 70)


def _indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def build_client(config: AppConfig) -> A2AClient:
    return A2AClient(
        config.a2a.base_url,
        transport=RequestsTransport(),
        endpoint_path=config.a2a.endpoint_path,
        timeout=config.a2a.timeout,
    )


def cmd_call(config: AppConfig, operation: str, params_json: Optional[str]) -> int:
    """Send a single operation and print ``{status, data}``."""
    try:
        params = json.loads(params_json) if params_json else {}
    except json.JSONDecodeError as e:
        print(f"Error: params are not valid JSON: {e}", file=sys.stderr)
        return 2
    if not isinstance(params, dict):
        print("Error: params must be a JSON object", file=sys.stderr)
        return 2

    client = build_client(config)
    try:
        task = client.send(operation, params)
    except A2AClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        json.dumps(
            {"status": task.state, "data": client.extract_data(task)},
            indent=2,
            ensure_ascii=False,
        )
    )
    warning = task.low_balance_warning
    if warning is not None:
        print(f"\n! {warning.message}", file=sys.stderr)
    return 0


def cmd_operations(config: AppConfig) -> int:
    """List the configured operation catalog."""
    catalog = OperationCatalog.from_entries(config.operations)
    if not len(catalog):
        print("No operations configured.")
        return 0
    width = max(len(op.operation) for op in catalog())
    print("Operations:")
    for op in catalog():
        params = f" [{op.params}]" if op.params else ""
        print(f"  {op.operation.ljust(width + 2)}{op.description}{params}")
    return 0


def build_loop(config: AppConfig, client: A2AClient, counterpart: str) -> OrchestrationLoop:
    return OrchestrationLoop(
        client=client,
        provider=OpenAIProvider(config.inference),
        catalog=OperationCatalog.from_entries(config.operations),
        observer=ConsoleObserver(),
        max_turns=config.orchestration.max_turns,
        max_tool_calls_per_turn=config.orchestration.max_tool_calls_per_turn,
        agent_name=config.orchestration.agent_name,
        counterpart_name=counterpart,
    )


def cmd_run(config: AppConfig, goals: list[str]) -> int:
    """Run goals through the planner, or prompt for them interactively."""
    client = build_client(config)
    card = fetch_agent_card(
        config.a2a.base_url, transport=client.transport, timeout=config.a2a.card_timeout
    )
    loop = build_loop(config, client, card.name)

    if goals:
        for i, goal in enumerate(goals, 1):
            print(f"\n[{i}/{len(goals)}] {goal}")
            try:
                loop.run(goal)
            except Exception as e:
                logger.error("Run failed: %s", e)
                print(f"Error: {e}", file=sys.stderr)
                return 1
        return 0

    print_banner(config, card.name, len(config.operations))
    while True:
        try:
            line = input("goal> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line in ("/quit", "/exit"):
            return 0
        if line == "/clear":
            loop.reset()
            print("Conversation cleared.")
            continue
        if line == "/ops":
            cmd_operations(config)
            continue
        try:
            loop.run(line)
        except KeyboardInterrupt:
            print("\nInterrupted.")
            loop.reset()
        except Exception as e:
            logger.error("Run failed: %s", e)
            print(f"Error: {e}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a2a-planner",
        description="Plan and execute remote operations on an A2A agent",
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    call = sub.add_parser("call", help="Send one operation")
    call.add_argument("operation")
    call.add_argument("params", nargs="?", help="JSON object of parameters")

    sub.add_parser("operations", help="List catalog operations")

    run = sub.add_parser("run", help="Plan and execute goals")
    run.add_argument("goals", nargs="*", help="Goals to run in order")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_app_config(args.config)
    setup_logging(config.log_level, args.verbose)

    if args.command == "call":
        return cmd_call(config, args.operation, args.params)
    if args.command == "operations":
        return cmd_operations(config)
    return cmd_run(config, args.goals)


if __name__ == "__main__":
    sys.exit(main())
