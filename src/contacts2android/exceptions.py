"""Custom exceptions for contacts2android."""


class ContactsBridgeError(Exception):
    """Base exception for all contacts2android errors."""


class ConfigurationError(ContactsBridgeError):
    """Configuration or environment variable error."""


class ProviderError(ContactsBridgeError):
    """The content provider could not be reached or rejected a call."""


class OperationApplicationError(ProviderError):
    """A batch of provider operations failed to apply."""

    def __init__(self, message: str, index: int | None = None):
        self.index = index
        if index is not None:
            message = f"Operation {index} failed: {message}"
        super().__init__(message)


class AdbError(ProviderError):
    """Error running an adb command against the device."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output"
        super().__init__(f"adb command failed ({returncode}): {' '.join(command)}: {detail}")


class PhotoLoadError(ContactsBridgeError):
    """Photo bytes could not be read from the given source."""


class UnsupportedOperationError(ContactsBridgeError, NotImplementedError):
    """The account authenticator does not implement this callback."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} is not supported")
