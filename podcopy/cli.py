from typing import Optional

import typer

from podcopy.kubernetes import DEFAULT_ATTACH_TIMEOUT
from podcopy.operations import (
    debug_pod_handler,
    get_pod_handler,
    prepare_debug_pod_handler,
)
from podcopy.types import OverrideRequest
from podcopy.ui import print_manifest, render_containers_table, set_verbose

app = typer.Typer()


def split_tokens(tokens: list[str], as_command: bool) -> tuple[list[str], list[str]]:
    """Split the tokens after `--` into (command, args).

    With --command the tokens replace the entry point, otherwise they replace
    the container's arguments.
    """
    if as_command:
        return list(tokens), []
    return [], list(tokens)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        envvar="PODCOPY_VERBOSE",
        help="Print every kubectl command before running it.",
    ),
):
    """Debug a pod by creating a modified copy of it."""
    set_verbose(verbose)


@app.command(help="List the containers of a pod.")
def containers(
    pod: str = typer.Argument(..., help="The pod to inspect."),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="The namespace of the pod."
    ),
):
    source = get_pod_handler(pod, namespace)
    if not source.containers:
        typer.echo(f"❌ Pod '{pod}' has no containers.", err=True)
        raise typer.Exit(code=1)
    render_containers_table(source)


@app.command(
    help="Create a copy of a pod with a patched or added container and "
    "optionally attach to it. Tokens after -- replace the container's args, "
    "or its command when --command is given."
)
def debug(
    pod: str = typer.Argument(..., help="The pod to copy."),
    tokens: Optional[list[str]] = typer.Argument(
        None, help="Command or args for the target container, after --."
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="The namespace of the pod to copy."
    ),
    copy_to: str = typer.Option(
        "",
        "--copy-to",
        help="Name of the new pod. Defaults to '<pod>-debug'.",
    ),
    container: str = typer.Option(
        "",
        "--container",
        "-c",
        help="Container to patch, or to add if the pod has no container by that "
        "name. Defaults to the first container.",
    ),
    image: str = typer.Option("", "--image", help="Image for the target container."),
    as_command: bool = typer.Option(
        False,
        "--command",
        help="Treat the tokens after -- as the entry point instead of args.",
    ),
    stdin: bool = typer.Option(
        False, "--stdin", "-i", help="Keep stdin open on the target container."
    ),
    tty: bool = typer.Option(
        False, "--tty", "-t", help="Allocate a TTY for the target container."
    ),
    attach: Optional[bool] = typer.Option(
        None,
        "--attach/--no-attach",
        help="Attach to the target container once the pod is created. "
        "Defaults to the value of --stdin.",
    ),
    keep_labels: bool = typer.Option(
        False,
        "--keep-labels",
        help="Copy the source pod's labels. Off by default so services and "
        "controllers do not pick up the copy.",
    ),
    attach_timeout: int = typer.Option(
        DEFAULT_ATTACH_TIMEOUT,
        "--attach-timeout",
        envvar="PODCOPY_ATTACH_TIMEOUT",
        min=1,
        help="Seconds to wait for the new pod to run before attaching.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Print the pod that would be created and exit.",
    ),
):
    command, args = split_tokens(tokens or [], as_command)
    override = OverrideRequest(
        container=container,
        destination=copy_to,
        image=image,
        command=command,
        args=args,
        stdin=stdin,
        tty=tty,
        attach=attach,
        keep_labels=keep_labels,
    )

    if dry_run:
        derived = prepare_debug_pod_handler(pod, namespace, override)
        print_manifest(derived.to_manifest())
        return

    debug_pod_handler(pod, namespace, override, attach_timeout)


if __name__ == "__main__":
    app()
