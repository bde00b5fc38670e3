"""Derive a debug copy of a pod from sparse caller overrides.

Nothing in this module performs I/O. The source pod is never mutated: every
container list and nested dict in the result is a fresh copy, so editing the
result cannot leak back into the caller's value.
"""

import copy

from podcopy.errors import ValidationError
from podcopy.types import ContainerSpec, OverrideRequest, PodSpec

DEBUG_SUFFIX = "-debug"


def destination_name(source: PodSpec, override: OverrideRequest) -> str:
    return override.destination or f"{source.name}{DEBUG_SUFFIX}"


def resolve_target_container(source: PodSpec, override: OverrideRequest) -> str:
    """Name of the container to patch or create.

    The override's container wins; otherwise the first container of the pod.
    """
    if override.container:
        return override.container
    if not source.containers:
        raise ValidationError(
            f"Pod '{source.name}' has no containers; specify one with --container."
        )
    return source.containers[0].name


def _patch_container(
    container: ContainerSpec, override: OverrideRequest
) -> ContainerSpec:
    patched = copy.deepcopy(container)
    if override.image:
        patched.image = override.image
    if override.command:
        patched.command = list(override.command)
    if override.args:
        patched.args = list(override.args)
    # stdin/tty are always explicit, so a bare flag change is a valid patch
    patched.stdin = override.stdin
    patched.tty = override.tty
    return patched


def _new_container(name: str, override: OverrideRequest) -> ContainerSpec:
    if not override.image:
        raise ValidationError(
            f"Container '{name}' does not exist in the source pod; --image is required to add it."
        )
    return ContainerSpec(
        name=name,
        image=override.image,
        command=list(override.command),
        args=list(override.args),
        stdin=override.stdin,
        tty=override.tty,
    )


def transform_pod(source: PodSpec, override: OverrideRequest) -> PodSpec:
    """Build the debug copy of `source`.

    If the target container exists it is patched in place in the copy,
    otherwise a new container is appended. All other containers are carried
    over unchanged and in order.
    """
    target = resolve_target_container(source, override)

    containers: list[ContainerSpec] = []
    found = False
    for container in source.containers:
        if container.name == target:
            containers.append(_patch_container(container, override))
            found = True
        else:
            containers.append(copy.deepcopy(container))
    if not found:
        containers.append(_new_container(target, override))

    # No server-assigned identity, owner or node binding is carried over.
    spec_extra = copy.deepcopy(source.spec_extra)
    spec_extra.pop("nodeName", None)
    spec_extra.pop("ephemeralContainers", None)

    return PodSpec(
        name=destination_name(source, override),
        namespace=source.namespace,
        containers=containers,
        labels=dict(source.labels) if override.keep_labels else {},
        annotations=dict(source.annotations),
        spec_extra=spec_extra,
    )
