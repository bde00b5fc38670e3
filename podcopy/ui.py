import json
import os
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from podcopy.types import AttachRequest, PodSpec

# Global console for UI functions
_console = Console()
_err_console = Console(stderr=True)

# Check if we should use simple UI (e.g., when output is captured by CI logs)
_use_simple_ui = os.getenv("PODCOPY_SIMPLE_UI") == "1"

_verbose = os.getenv("PODCOPY_VERBOSE") == "1"


def set_verbose(enabled: bool):
    global _verbose
    _verbose = enabled


def render_containers_table(pod: PodSpec):
    table = Table(title=f"{pod.namespace}/{pod.name}" if pod.namespace else pod.name)

    table.add_column("Container", style="cyan", no_wrap=True)
    table.add_column("Image", style="magenta")
    table.add_column("Command", style="white")
    table.add_column("Args", style="white")
    table.add_column("stdin", style="green", justify="center")
    table.add_column("tty", style="green", justify="center")

    for container in pod.containers:
        table.add_row(
            container.name,
            container.image,
            " ".join(container.command),
            " ".join(container.args),
            "✓" if container.stdin else "",
            "✓" if container.tty else "",
        )

    _console.print(table)


def print_manifest(manifest: dict[str, Any]):
    """Print a pod manifest as JSON."""
    if _use_simple_ui:
        # Long values must stay on one line for the output to parse as JSON.
        _console.print(
            json.dumps(manifest, indent=2), markup=False, highlight=False, soft_wrap=True
        )
    else:
        _console.print_json(data=manifest)


def attach_command(request: AttachRequest) -> str:
    command = (
        f"kubectl attach {request.pod} -c {request.container} -n {request.namespace}"
    )
    if request.stdin:
        command += " -i"
    if request.tty:
        command += " -t"
    return command


def print_attach_failed(request: AttachRequest, reason: str):
    """Explain that the pod exists even though attaching to it failed."""
    command = attach_command(request)
    pod = request.pod
    _err_console.print()

    if _use_simple_ui:
        _err_console.print(
            "[yellow]============================ Attach failed ============================[/yellow]"
        )
        _err_console.print(f"Pod [cyan]{pod}[/cyan] was created, but attach failed.")
        _err_console.print(f"Reason: {reason}", markup=False)
        _err_console.print(f"Attach manually with: [cyan bold]{command}[/cyan bold]")
        _err_console.print("[yellow]" + "=" * 71 + "[/yellow]")
    else:
        _err_console.print(
            Panel(
                f"Pod [cyan]{pod}[/cyan] was created, but attach failed.\n"
                f"Reason: {escape(reason)}\n\n"
                f"Attach manually with: [cyan bold]{command}[/cyan bold]",
                border_style="yellow",
                title="Attach failed",
                expand=False,
            )
        )


def print_success(message: str, prefix: str = "✅"):
    """Print a success message."""
    _console.print(f"[green]{prefix}[/green] {message}")


def print_info(message: str, prefix: str = "ℹ️"):
    """Print an info message."""
    _console.print(f"[blue]{prefix}[/blue]  {message}")


def print_step(message: str, prefix: str = "🔧"):
    """Print a step/progress message."""
    _console.print(f"[cyan]{prefix}[/cyan] {message}")


def print_debug(message: str):
    """Print a debug line, only when verbose output is enabled."""
    if _verbose:
        _err_console.print(f"$ {message}", style="dim", markup=False, highlight=False)
