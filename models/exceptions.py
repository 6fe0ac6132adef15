"""Exceptions raised by the CTI event simulator core."""


class CTISimulatorError(Exception):
    """Base exception for all simulator errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotConnectedError(CTISimulatorError):
    """Raised when an event is emitted or a script is started while disconnected.

    The simulator never reconnects on its own. Callers recover by awaiting
    connect() and retrying the operation.

    Args:
        message: Description of the operation that failed.
    """

    def __init__(self, message: str = "CTI client not connected. Call connect() first."):
        super().__init__(message)
