"""Kubernetes operations for podcopy."""

import json
import os
import subprocess
import time
from typing import IO, Any

from podcopy.errors import (
    AlreadyExistsError,
    AttachError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from podcopy.types import AttachRequest, PodSpec
from podcopy.ui import print_debug

DEFAULT_ATTACH_TIMEOUT = 300


def _kubectl() -> list[str]:
    cmd = [os.environ.get("PODCOPY_KUBECTL", "kubectl")]
    context = os.environ.get("PODCOPY_CONTEXT")
    if context:
        cmd.extend(["--context", context])
    return cmd


def _run(
    cmd: list[str], pod: str, input: str | None = None
) -> subprocess.CompletedProcess[str]:
    print_debug(" ".join(cmd))
    try:
        return subprocess.run(
            cmd, input=input, capture_output=True, text=True, check=False
        )
    except OSError as e:
        raise TransportError(pod, f"Failed to run {cmd[0]}: {e}") from e


def _is_not_found(stderr: str, name: str) -> bool:
    # A missing namespace is also reported as (NotFound), for the namespace.
    return "(NotFound)" in stderr and f'pods "{name}" not found' in stderr


def _is_already_exists(stderr: str) -> bool:
    return "AlreadyExists" in stderr or "already exists" in stderr


def _parse_pod(stdout: str, pod: str) -> PodSpec:
    try:
        data: dict[str, Any] = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise TransportError(pod, f"Unexpected kubectl output: {e}") from e
    return PodSpec.from_manifest(data)


# ===== Control-plane read =====


def get_pod(name: str, namespace: str | None) -> PodSpec:
    """Fetch a pod by name. A single attempt, no retries.

    Raises:
        ValidationError: If name is empty
        NotFoundError: If the pod does not exist
        TransportError: If kubectl fails for any other reason
    """
    if not name:
        raise ValidationError("A source pod name is required.")

    cmd = _kubectl() + ["get", "pod", name, "-o", "json"]
    if namespace:
        cmd.extend(["-n", namespace])

    result = _run(cmd, name)
    if result.returncode != 0:
        if _is_not_found(result.stderr, name):
            raise NotFoundError(name, namespace)
        raise TransportError(name, "Failed to get pod", result.stderr)

    return _parse_pod(result.stdout, name)


# ===== Control-plane write =====


def create_pod(pod: PodSpec) -> PodSpec:
    """Create a new pod and return the control plane's copy of it.

    Name collisions are left to the API server to detect.
    """
    cmd = _kubectl() + ["create", "-f", "-", "-o", "json"]
    if pod.namespace:
        cmd.extend(["-n", pod.namespace])

    result = _run(cmd, pod.name, input=json.dumps(pod.to_manifest()))
    if result.returncode != 0:
        if _is_already_exists(result.stderr):
            raise AlreadyExistsError(pod.name, pod.namespace)
        raise TransportError(pod.name, "Failed to create pod", result.stderr)

    return _parse_pod(result.stdout, pod.name)


# ===== Attach =====


def wait_for_pod_running(
    request: AttachRequest,
    timeout: int = DEFAULT_ATTACH_TIMEOUT,
    wait_interval: float = 1,
) -> PodSpec:
    """Poll until the pod reaches the Running phase."""
    start_time = time.time()

    while True:
        try:
            pod = get_pod(request.pod, request.namespace)
        except (NotFoundError, TransportError) as e:
            raise AttachError(
                request.pod, request.namespace, request.container, str(e)
            ) from e

        if pod.status == "Running":
            return pod
        if pod.status in ("Succeeded", "Failed"):
            raise AttachError(
                request.pod,
                request.namespace,
                request.container,
                f"Pod '{request.pod}' finished with phase {pod.status} before it could be attached.",
            )
        if time.time() - start_time >= timeout:
            raise AttachError(
                request.pod,
                request.namespace,
                request.container,
                f"Timed out after {timeout}s waiting for pod '{request.pod}' to start "
                f"(phase: {pod.status or 'Unknown'}).",
            )
        time.sleep(wait_interval)


def attach(
    request: AttachRequest,
    stdin: IO[Any] | None = None,
    stdout: IO[Any] | None = None,
    stderr: IO[Any] | None = None,
) -> int:
    """Run `kubectl attach` against the request and return its exit code.

    Streams default to the ones inherited from this process. The byte stream
    is not inspected.

    Raises:
        AttachError: If kubectl cannot be started or exits non-zero
    """
    cmd = _kubectl() + [
        "attach",
        request.pod,
        "-c",
        request.container,
        "-n",
        request.namespace,
    ]
    if request.stdin:
        cmd.append("-i")
    if request.tty:
        cmd.append("-t")

    print_debug(" ".join(cmd))
    try:
        result = subprocess.run(cmd, stdin=stdin, stdout=stdout, stderr=stderr)
    except OSError as e:
        raise AttachError(
            request.pod,
            request.namespace,
            request.container,
            f"Failed to run {cmd[0]}: {e}",
        ) from e

    # kubectl attach does not relay the container's exit status; non-zero
    # means the attach itself failed.
    if result.returncode != 0:
        raise AttachError(
            request.pod,
            request.namespace,
            request.container,
            f"kubectl attach exited with code {result.returncode}",
            exit_code=result.returncode,
        )
    return result.returncode
