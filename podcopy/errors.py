"""Errors raised by podcopy."""


class PodCopyError(Exception):
    """Base class for all podcopy errors."""


class ValidationError(PodCopyError):
    """The request cannot produce a valid pod (missing name, no containers, ...)."""


class NotFoundError(PodCopyError):
    def __init__(self, pod: str, namespace: str | None):
        self.pod = pod
        self.namespace = namespace
        where = f" in namespace '{namespace}'" if namespace else ""
        super().__init__(f"Pod '{pod}' not found{where}.")


class AlreadyExistsError(PodCopyError):
    def __init__(self, pod: str, namespace: str | None):
        self.pod = pod
        self.namespace = namespace
        where = f" in namespace '{namespace}'" if namespace else ""
        super().__init__(
            f"Pod '{pod}' already exists{where}. "
            f"Choose another name with --copy-to or delete the existing pod."
        )


class TransportError(PodCopyError):
    """kubectl failed for a reason other than not-found/already-exists."""

    def __init__(self, pod: str, message: str, stderr: str = ""):
        self.pod = pod
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"{message} (pod '{pod}'){detail}")


class AttachError(PodCopyError):
    """Attaching to an already created pod failed. The pod itself is kept."""

    def __init__(
        self,
        pod: str,
        namespace: str,
        container: str,
        reason: str,
        exit_code: int | None = None,
    ):
        self.pod = pod
        self.namespace = namespace
        self.container = container
        self.reason = reason
        self.exit_code = exit_code
        super().__init__(reason)
