"""Controller lifecycle exceptions.

These are raised to callers of the blocking controller calls (wait/stop)
and by the instance registry.
"""

from .base import PiGlowError


class ControllerError(PiGlowError):
    """Base class for controller lifecycle errors."""

    def __init__(self, user_message: str, name: str | None = None, **kwargs):
        """
        Initialize controller error.

        Args:
            user_message: User-friendly error message
            name: Registered name of the controller involved (if any)
        """
        super().__init__(user_message, **kwargs)
        self.name = name


class ControllerNotRunningError(ControllerError):
    """A blocking call was made on a controller that is not running."""

    def __init__(self, name: str | None = None, operation: str = "call"):
        label = f"'{name}'" if name else "instance"
        super().__init__(
            user_message=f"Cannot {operation}: PiGlow controller {label} is not running",
            name=name,
            recoverable=True,
            recovery_hint="Start the controller first, or check the log for startup errors.",
        )
        self.operation = operation


class ControllerTimeoutError(ControllerError, TimeoutError):
    """A blocking call did not get its reply before the deadline."""

    def __init__(self, operation: str, timeout: float, name: str | None = None):
        super().__init__(
            user_message=f"Timed out after {timeout}s waiting for PiGlow {operation}",
            name=name,
            recoverable=True,
            recovery_hint="The controller keeps processing its queue; try again with a longer timeout.",
        )
        self.operation = operation
        self.timeout = timeout


class ControllerCrashedError(ControllerError):
    """The controller terminated before it could reply."""

    def __init__(self, name: str | None = None, cause: BaseException | None = None):
        reason = str(cause) if cause else "terminated"
        super().__init__(
            user_message=f"PiGlow controller stopped unexpectedly: {reason}",
            technical_message=f"Controller {name!r} exited abnormally: {cause!r}",
            name=name,
            recoverable=False,
        )
        self.cause = cause


class ControllerAlreadyRegisteredError(ControllerError):
    """Another live controller is already registered under this name."""

    def __init__(self, name: str):
        super().__init__(
            user_message=f"A PiGlow controller named '{name}' is already running",
            name=name,
            recoverable=True,
            recovery_hint="Stop the existing controller or choose a different name.",
        )


class ControllerNotFoundError(ControllerError, LookupError):
    """No controller is registered under this name."""

    def __init__(self, name: str):
        super().__init__(
            user_message=f"No PiGlow controller named '{name}'",
            name=name,
            recoverable=True,
        )
