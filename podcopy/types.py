"""Type definitions for podcopy."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from podcopy.errors import AttachError

# Container fields modelled explicitly; everything else rides along in `extra`.
_CONTAINER_FIELDS = ("name", "image", "command", "args", "stdin", "tty")

# Metadata/spec fields owned by the control plane or by this tool.
_METADATA_FIELDS = ("name", "namespace", "labels", "annotations")


@dataclass
class ContainerSpec:
    name: str
    image: str = ""
    command: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    stdin: bool = False
    tty: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_manifest(cls, data: dict[str, Any]) -> "ContainerSpec":
        return cls(
            name=data["name"],
            image=data.get("image", ""),
            command=list(data.get("command") or []),
            args=list(data.get("args") or []),
            stdin=bool(data.get("stdin", False)),
            tty=bool(data.get("tty", False)),
            extra={
                key: copy.deepcopy(value)
                for key, value in data.items()
                if key not in _CONTAINER_FIELDS
            },
        )

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {"name": self.name}
        if self.image:
            manifest["image"] = self.image
        if self.command:
            manifest["command"] = list(self.command)
        if self.args:
            manifest["args"] = list(self.args)
        if self.stdin:
            manifest["stdin"] = True
        if self.tty:
            manifest["tty"] = True
        manifest.update(copy.deepcopy(self.extra))
        return manifest


@dataclass
class PodSpec:
    """A pod as read from, or submitted to, the cluster.

    Only the fields this tool reasons about are modelled; the rest of the
    manifest is kept verbatim in `metadata_extra` and `spec_extra` so that a
    copy stays valid under the pod schema.
    """

    name: str
    namespace: str
    containers: list[ContainerSpec] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    metadata_extra: dict[str, Any] = field(default_factory=dict)
    spec_extra: dict[str, Any] = field(default_factory=dict)
    status: str = ""  # phase from status.phase, never submitted

    @classmethod
    def from_manifest(cls, data: dict[str, Any]) -> "PodSpec":
        metadata = data.get("metadata", {})
        spec = data.get("spec", {})
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            containers=[
                ContainerSpec.from_manifest(c) for c in spec.get("containers", [])
            ],
            labels=dict(metadata.get("labels") or {}),
            annotations=dict(metadata.get("annotations") or {}),
            metadata_extra={
                key: copy.deepcopy(value)
                for key, value in metadata.items()
                if key not in _METADATA_FIELDS
            },
            spec_extra={
                key: copy.deepcopy(value)
                for key, value in spec.items()
                if key != "containers"
            },
            status=data.get("status", {}).get("phase", ""),
        )

    def to_manifest(self) -> dict[str, Any]:
        metadata: dict[str, Any] = copy.deepcopy(self.metadata_extra)
        metadata["name"] = self.name
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)

        spec: dict[str, Any] = copy.deepcopy(self.spec_extra)
        spec["containers"] = [c.to_manifest() for c in self.containers]

        return {"apiVersion": "v1", "kind": "Pod", "metadata": metadata, "spec": spec}

    def find_container(self, name: str) -> ContainerSpec | None:
        for container in self.containers:
            if container.name == name:
                return container
        return None


@dataclass
class OverrideRequest:
    """Caller intent for a debug copy.

    Empty strings and lists mean "not supplied". `stdin` and `tty` are always
    explicit. `attach` is tri-state: None defers to `stdin`.
    """

    container: str = ""
    destination: str = ""
    image: str = ""
    command: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    stdin: bool = False
    tty: bool = False
    attach: bool | None = None
    keep_labels: bool = False


@dataclass
class AttachRequest:
    namespace: str
    pod: str
    container: str
    stdin: bool
    tty: bool


class DebugStage(Enum):
    LOADED = "loaded"
    TRANSFORMED = "transformed"
    SUBMITTED = "submitted"
    ATTACHED = "attached"
    ATTACH_FAILED = "attach_failed"


@dataclass
class DebugResult:
    stage: DebugStage
    pod: PodSpec
    container: str
    attach_exit_code: int | None = None
    attach_error: "AttachError | None" = None

    @property
    def created(self) -> bool:
        return self.stage in (
            DebugStage.SUBMITTED,
            DebugStage.ATTACHED,
            DebugStage.ATTACH_FAILED,
        )
