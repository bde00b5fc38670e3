from podcopy.types import AttachRequest
from podcopy.ui import attach_command


class TestAttachCommand:
    """Tests for attach_command - the manual attach hint."""

    def test_includes_requested_flags(self):
        request = AttachRequest("default", "web-debug", "app", True, True)

        assert attach_command(request) == (
            "kubectl attach web-debug -c app -n default -i -t"
        )

    def test_omits_flags_not_requested(self):
        """Test that no TTY is requested for a container created without one."""
        request = AttachRequest("default", "web-debug", "app", True, False)

        assert attach_command(request) == "kubectl attach web-debug -c app -n default -i"
