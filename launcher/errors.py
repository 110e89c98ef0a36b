"""Exceptions raised when an invocation fails."""


class LauncherError(Exception):
    """Base class for invocation failures."""


class ProcessExitError(LauncherError):
    """The child process exited with a non-zero status."""

    def __init__(self, returncode: int):
        self.returncode = returncode
        super().__init__(f"Process exited with non-zero status code: {returncode}")


class ProcessTimeoutError(LauncherError):
    """The child process was still running when the timeout elapsed."""

    def __init__(self, timeout_sec: float):
        self.timeout_sec = timeout_sec
        super().__init__(f"Process did not exit within {timeout_sec} seconds")
