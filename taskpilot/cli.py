"""
TaskPilot CLI
=============
Command-line interface for listing tools, running tasks and chatting with
the tool-calling assistant.
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.agent.components.task.models import Task, TaskStatus
from taskpilot.agent.core.errors import AgentError
from taskpilot.agent.core.factory import create_default_registry, create_llm_client, create_orchestrator
from taskpilot.agent.core.interactive import InteractiveSession
from taskpilot.core.events.events import AgentEvent, EventType
from taskpilot.core.settings.settings import TaskPilotSettings, load_settings
from taskpilot.utils.formatting.json import format_json
from taskpilot.utils.logging_config import configure_logging

DEMO_CALLS = [
    ("analyze_text", {"text": "TaskPilot plans tasks. It runs tools in order!", "include_word_frequency": True}),
    ("transform_json", {"data": {"user": {"name": "Ada", "address": {"city": "London"}}}, "operation": "flatten"}),
    ("calculate_date", {"operation": "add", "date": "2024-01-01T00:00:00Z", "amount": 10, "unit": "days"}),
    ("http_request", {"method": "GET", "url": "https://api.example.com/status"}),
    ("validate_data", {"value": "user@example.com", "type": "email"}),
]

EVENT_STYLES = {
    EventType.TASK_COMPLETED: "green",
    EventType.STEP_COMPLETED: "green",
    EventType.TASK_FAILED: "red",
    EventType.STEP_FAILED: "red",
}


class TaskPilotCLI:
    """Command handlers sharing one console and one settings object."""

    def __init__(self, settings: TaskPilotSettings, console: Optional[Console] = None):
        self.settings = settings
        self.console = console or Console()

    def list_tools(self, registry: ToolRegistry) -> int:
        table = Table(title="Registered Tools")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Parameters")

        for definition in registry.get_all():
            params = ", ".join(
                f"{p.name}{'*' if p.required else ''}: {p.type.value}" for p in definition.parameters
            )
            table.add_row(definition.name, definition.description, params)

        self.console.print(table)
        self.console.print("[dim]* required[/dim]")
        return 0

    def print_event(self, event: AgentEvent) -> None:
        style = EVENT_STYLES.get(event.type, "blue")
        details = ""
        if "step_id" in event.data:
            details = f" {event.data['step_id']} ({event.data.get('tool_name', '')})"
        elif "step_count" in event.data:
            details = f" {event.data['step_count']} step(s)"
        self.console.print(f"[{style}]{event.type.value}[/{style}]{details}")

    def print_task(self, task: Task) -> None:
        style = "green" if task.status == TaskStatus.COMPLETED else "red"
        table = Table(title=f"Task {task.id}", show_header=True)
        table.add_column("Step")
        table.add_column("Tool", style="cyan")
        table.add_column("Status")
        table.add_column("Error")
        for step in task.steps:
            table.add_row(step.id, step.tool_name, step.status.value, step.error or "")
        self.console.print(table)

        body = format_json(task.result) if task.status == TaskStatus.COMPLETED else (task.error or "Unknown error")
        self.console.print(Panel(body, title=f"[{style}]{task.status.value}[/{style}]"))

    async def run_task(self, args: argparse.Namespace) -> int:
        task_input = {
            "description": args.description,
            "priority": args.priority,
            "max_steps": args.max_steps,
            "timeout_ms": args.timeout_ms,
        }
        if args.context:
            try:
                task_input["context"] = json.loads(args.context)
            except json.JSONDecodeError as e:
                self.console.print(f"[red]Invalid --context JSON: {e}[/red]")
                return 2

        orchestrator = create_orchestrator(self.settings, use_llm=not args.no_llm)
        orchestrator.on_event(self.print_event)

        task = await orchestrator.execute(task_input)
        self.print_task(task)
        return 0 if task.status == TaskStatus.COMPLETED else 1

    async def run_demo(self) -> int:
        registry = create_default_registry()
        failures = 0
        for name, params in DEMO_CALLS:
            result = await registry.execute(name, params)
            style = "green" if result.success else "red"
            body = format_json(result.data) if result.success else (result.error or "")
            elapsed = result.metadata.get("execution_time_ms", 0.0)
            self.console.print(Panel(body, title=f"[{style}]{name}[/{style}] ({elapsed:.1f}ms)"))
            failures += 0 if result.success else 1
        return 0 if failures == 0 else 1

    async def run_chat(self, message: str) -> int:
        client = create_llm_client(self.settings)
        if client is None:
            self.console.print("[red]OPENAI_API_KEY is required for chat mode[/red]")
            return 2
        session = InteractiveSession(client, create_default_registry())
        reply = await session.run(message)
        self.console.print(Panel(reply, title="[bold green]Assistant[/bold green]"))
        return 0


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="taskpilot",
        description="TaskPilot task orchestration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskpilot tools
  taskpilot run "How long is this paragraph?" --no-llm
  taskpilot run "calculate date" --context '{"operation": "add", "amount": 30}' --no-llm
  taskpilot demo
  taskpilot chat "How many words are in 'hello brave new world'?"
        """,
    )
    parser.add_argument("-c", "--config", help="YAML or JSON settings file")
    parser.add_argument("--log-level", help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("tools", help="List registered tools")

    run_parser = subparsers.add_parser("run", help="Plan and execute a task")
    run_parser.add_argument("description", help="What the task should accomplish")
    run_parser.add_argument("--priority", default="medium", choices=["low", "medium", "high", "critical"])
    run_parser.add_argument("--context", help="Task context as a JSON object")
    run_parser.add_argument("--max-steps", type=int, default=10)
    run_parser.add_argument("--timeout-ms", type=int, default=60000)
    run_parser.add_argument("--no-llm", action="store_true", help="Plan with the heuristic planner only")

    subparsers.add_parser("demo", help="Run every built-in tool once")

    chat_parser = subparsers.add_parser("chat", help="Ask the tool-calling assistant")
    chat_parser.add_argument("message", help="Message to send")

    return parser


async def async_main(argv: Optional[List[str]] = None) -> int:
    """Async main function."""
    args = create_parser().parse_args(argv)
    console = Console()

    try:
        settings = load_settings(args.config)
    except AgentError as e:
        console.print(f"[red]{e}[/red]")
        return 2

    configure_logging(args.log_level or settings.log_level)
    cli = TaskPilotCLI(settings, console)

    try:
        if args.command == "tools":
            return cli.list_tools(create_default_registry())
        if args.command == "run":
            return await cli.run_task(args)
        if args.command == "demo":
            return await cli.run_demo()
        if args.command == "chat":
            return await cli.run_chat(args.message)
    except AgentError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    return 2


def main() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
