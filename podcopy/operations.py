"""Debug-copy pipeline for podcopy: load, transform, submit, attach."""

from typing import IO, Any

import typer

from podcopy import kubernetes
from podcopy.errors import AttachError, PodCopyError
from podcopy.transform import resolve_target_container, transform_pod
from podcopy.types import (
    AttachRequest,
    DebugResult,
    DebugStage,
    OverrideRequest,
    PodSpec,
)
from podcopy.ui import (
    attach_command,
    print_attach_failed,
    print_info,
    print_step,
    print_success,
)

# ===== Attach decision =====


def should_attach(override: OverrideRequest) -> bool:
    """Whether to open an interactive session after creating the pod.

    An explicit --attach/--no-attach wins. When unset, asking for stdin also
    asks for attach, the same convention as `kubectl run -i`.
    """
    if override.attach is not None:
        return override.attach
    return override.stdin


def build_attach_request(
    created: PodSpec, container: str, override: OverrideRequest
) -> AttachRequest:
    return AttachRequest(
        namespace=created.namespace,
        pod=created.name,
        container=container,
        stdin=override.stdin,
        tty=override.tty,
    )


def attach_to_debug_pod(
    request: AttachRequest,
    timeout: int = kubernetes.DEFAULT_ATTACH_TIMEOUT,
    stdin: IO[Any] | None = None,
    stdout: IO[Any] | None = None,
    stderr: IO[Any] | None = None,
) -> int:
    """Wait for the pod to run, then attach. Returns kubectl attach's exit code.

    Raises:
        AttachError: If the pod never runs or kubectl attach fails
    """
    print_step(f"Waiting for pod [blue]{request.pod}[/blue] to start...", prefix="⏳")
    kubernetes.wait_for_pod_running(request, timeout=timeout)
    print_step(
        f"Attaching to container [cyan]{request.container}[/cyan] "
        f"in pod [blue]{request.pod}[/blue]..."
    )
    return kubernetes.attach(request, stdin=stdin, stdout=stdout, stderr=stderr)


# ===== Pipeline =====


def prepare_debug_pod(
    source_name: str, namespace: str | None, override: OverrideRequest
) -> tuple[PodSpec, PodSpec, str]:
    """Load the source pod and derive the debug copy without creating it.

    Returns (source, derived, target_container).
    """
    source = kubernetes.get_pod(source_name, namespace)
    container = resolve_target_container(source, override)
    derived = transform_pod(source, override)
    return source, derived, container


def debug_pod(
    source_name: str,
    namespace: str | None,
    override: OverrideRequest,
    attach_timeout: int = kubernetes.DEFAULT_ATTACH_TIMEOUT,
) -> DebugResult:
    """Copy a pod with the requested changes and optionally attach to it.

    Every error up to and including pod creation propagates. An attach
    failure happens after the pod exists, so it is recorded on the result
    instead of raised.
    """
    source = kubernetes.get_pod(source_name, namespace)
    result = DebugResult(
        stage=DebugStage.LOADED,
        pod=source,
        container=resolve_target_container(source, override),
    )

    result.pod = transform_pod(source, override)
    result.stage = DebugStage.TRANSFORMED
    print_step(
        f"Creating [blue]{result.pod.name}[/blue] from [blue]{source.name}[/blue] "
        f"(container [cyan]{result.container}[/cyan])..."
    )

    # From here on the pod exists; only the canonical copy is used.
    result.pod = kubernetes.create_pod(result.pod)
    result.stage = DebugStage.SUBMITTED
    print_success(f"Created debug pod [blue]{result.pod.name}[/blue]")

    if not should_attach(override):
        return result

    request = build_attach_request(result.pod, result.container, override)
    try:
        result.attach_exit_code = attach_to_debug_pod(request, timeout=attach_timeout)
        result.stage = DebugStage.ATTACHED
    except AttachError as e:
        result.attach_error = e
        result.attach_exit_code = e.exit_code
        result.stage = DebugStage.ATTACH_FAILED
    return result


def debug_pod_handler(
    source_name: str,
    namespace: str | None,
    override: OverrideRequest,
    attach_timeout: int = kubernetes.DEFAULT_ATTACH_TIMEOUT,
) -> DebugResult:
    try:
        result = debug_pod(source_name, namespace, override, attach_timeout)
    except PodCopyError as e:
        typer.echo(f"❌ Debug pod creation failed: {e}", err=True)
        raise typer.Exit(code=1)

    request = build_attach_request(result.pod, result.container, override)
    if result.stage == DebugStage.ATTACH_FAILED:
        reason = result.attach_error.reason if result.attach_error else "unknown error"
        print_attach_failed(request, reason)
        raise typer.Exit(code=2)

    if result.stage == DebugStage.SUBMITTED:
        print_info("Attach later with: " + attach_command(request))

    return result


def prepare_debug_pod_handler(
    source_name: str, namespace: str | None, override: OverrideRequest
) -> PodSpec:
    try:
        _, derived, _ = prepare_debug_pod(source_name, namespace, override)
    except PodCopyError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)
    return derived


def get_pod_handler(name: str, namespace: str | None) -> PodSpec:
    try:
        return kubernetes.get_pod(name, namespace)
    except PodCopyError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)
