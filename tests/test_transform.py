"""Tests for transform module - deriving the debug copy of a pod."""

import copy

import pytest

from podcopy.errors import ValidationError
from podcopy.transform import (
    destination_name,
    resolve_target_container,
    transform_pod,
)
from podcopy.types import ContainerSpec, OverrideRequest, PodSpec


def make_pod() -> PodSpec:
    return PodSpec(
        name="web",
        namespace="default",
        containers=[
            ContainerSpec(
                name="app",
                image="nginx",
                command=["nginx"],
                args=["-g", "daemon off;"],
                extra={
                    "env": [{"name": "MODE", "value": "prod"}],
                    "ports": [{"containerPort": 80}],
                },
            ),
            ContainerSpec(
                name="sidecar", image="envoy", args=["--config", "/etc/envoy"]
            ),
        ],
        labels={"app": "web", "pod-template-hash": "abc123"},
        annotations={"team": "platform"},
        metadata_extra={"uid": "1234", "resourceVersion": "99"},
        spec_extra={
            "nodeName": "node-1",
            "restartPolicy": "Always",
            "volumes": [{"name": "data", "emptyDir": {}}],
        },
        status="Running",
    )


class TestResolveTargetContainer:
    """Tests for resolve_target_container."""

    def test_defaults_to_first_container(self):
        """Test that the first container is used when no name is given."""
        assert resolve_target_container(make_pod(), OverrideRequest()) == "app"

    def test_override_name_wins(self):
        """Test that an explicit container name is used as-is, even if absent."""
        override = OverrideRequest(container="shell")

        assert resolve_target_container(make_pod(), override) == "shell"

    def test_no_containers_raises_error(self):
        """Test that a pod without containers cannot be resolved."""
        pod = PodSpec(name="empty", namespace="default")

        with pytest.raises(ValidationError, match="has no containers"):
            resolve_target_container(pod, OverrideRequest())


class TestDestinationName:
    """Tests for destination_name."""

    def test_default_suffix(self):
        assert destination_name(make_pod(), OverrideRequest()) == "web-debug"

    def test_explicit_destination(self):
        override = OverrideRequest(destination="web-copy")

        assert destination_name(make_pod(), override) == "web-copy"


class TestPatchExistingContainer:
    """Tests for transform_pod when the target container exists."""

    def test_default_target_patched(self):
        """Test the web/app scenario: image replaced, stdin/tty set."""
        override = OverrideRequest(image="debian", stdin=True, tty=True)

        result = transform_pod(make_pod(), override)

        assert result.name == "web-debug"
        assert result.namespace == "default"
        assert len(result.containers) == 2
        app = result.containers[0]
        assert app.name == "app"
        assert app.image == "debian"
        assert app.stdin is True
        assert app.tty is True
        # Sparse fields not supplied are kept
        assert app.command == ["nginx"]
        assert app.args == ["-g", "daemon off;"]
        assert app.extra["env"] == [{"name": "MODE", "value": "prod"}]

    def test_other_containers_unchanged_and_ordered(self):
        """Test that only the target container differs from the source."""
        source = make_pod()
        override = OverrideRequest(container="sidecar", image="busybox")

        result = transform_pod(source, override)

        assert [c.name for c in result.containers] == ["app", "sidecar"]
        assert result.containers[0] == source.containers[0]
        assert result.containers[1].image == "busybox"
        assert result.containers[1].args == ["--config", "/etc/envoy"]

    def test_command_and_args_replace_whole_list(self):
        """Test that command and args are replaced, not merged."""
        override = OverrideRequest(command=["/bin/sh"], args=["-c", "sleep 1d"])

        result = transform_pod(make_pod(), override)

        assert result.containers[0].command == ["/bin/sh"]
        assert result.containers[0].args == ["-c", "sleep 1d"]

    def test_flag_only_override(self):
        """Test that an override with no image/command/args only changes stdin/tty."""
        source = make_pod()
        source.containers[0].stdin = True
        source.containers[0].tty = True

        result = transform_pod(source, OverrideRequest(stdin=False, tty=False))

        app = result.containers[0]
        assert app.image == "nginx"
        assert app.command == ["nginx"]
        assert app.stdin is False
        assert app.tty is False


class TestAppendNewContainer:
    """Tests for transform_pod when the target container does not exist."""

    def test_shell_container_appended(self):
        """Test the web/shell scenario: new container appended at the end."""
        override = OverrideRequest(
            container="shell", image="debian", command=["/bin/sh"], attach=False
        )

        result = transform_pod(make_pod(), override)

        assert len(result.containers) == 3
        assert result.containers[0].image == "nginx"
        shell = result.containers[-1]
        assert shell == ContainerSpec(
            name="shell", image="debian", command=["/bin/sh"], args=[]
        )

    def test_new_container_inherits_nothing(self):
        """Test that the new container is built only from the override."""
        override = OverrideRequest(container="shell", image="debian", stdin=True)

        shell = transform_pod(make_pod(), override).containers[-1]

        assert shell.command == []
        assert shell.args == []
        assert shell.extra == {}
        assert shell.stdin is True
        assert shell.tty is False

    def test_new_container_requires_image(self):
        """Test that a new container without an image is rejected."""
        override = OverrideRequest(container="shell", command=["/bin/sh"])

        with pytest.raises(ValidationError, match="--image is required"):
            transform_pod(make_pod(), override)

    def test_container_names_stay_unique(self):
        """Test that no container name appears twice after transformation."""
        override = OverrideRequest(container="shell", image="debian")

        result = transform_pod(make_pod(), override)

        names = [c.name for c in result.containers]
        assert len(names) == len(set(names))


class TestCopyHygiene:
    """Tests for the identity and metadata of the derived pod."""

    def test_server_assigned_fields_dropped(self):
        """Test that uid, resourceVersion, nodeName and status are not copied."""
        result = transform_pod(make_pod(), OverrideRequest(image="debian"))
        manifest = result.to_manifest()

        assert "uid" not in manifest["metadata"]
        assert "resourceVersion" not in manifest["metadata"]
        assert "nodeName" not in manifest["spec"]
        assert "status" not in manifest
        assert manifest["spec"]["restartPolicy"] == "Always"
        assert manifest["spec"]["volumes"] == [{"name": "data", "emptyDir": {}}]

    def test_labels_dropped_by_default(self):
        result = transform_pod(make_pod(), OverrideRequest())

        assert result.labels == {}
        assert result.annotations == {"team": "platform"}

    def test_keep_labels(self):
        result = transform_pod(make_pod(), OverrideRequest(keep_labels=True))

        assert result.labels == {"app": "web", "pod-template-hash": "abc123"}


class TestPurity:
    """Tests that transform_pod has no side effects."""

    def test_source_not_mutated(self):
        """Test that the source pod is unchanged after transformation."""
        source = make_pod()
        snapshot = copy.deepcopy(source)
        override = OverrideRequest(image="debian", command=["/bin/sh"], stdin=True)

        result = transform_pod(source, override)
        result.containers[1].extra["mutated"] = True
        result.spec_extra["volumes"].append({"name": "extra"})

        assert source == snapshot

    def test_same_input_same_output(self):
        """Test that repeated calls give equal results."""
        source = make_pod()
        override = OverrideRequest(container="shell", image="debian", tty=True)

        assert transform_pod(source, override) == transform_pod(source, override)
