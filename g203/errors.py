"""
G203 LED — exception hierarchy shared by the encoder and the transport.
"""


class G203Error(Exception):
    """Base class for everything this package raises on purpose."""


class ValidationError(G203Error, ValueError):
    """A colour, speed or brightness value is outside its domain."""


class DeviceNotFound(G203Error):
    """No HID interface reports the requested vendor/product id."""


class InterfaceMissing(G203Error):
    """The LED sub-interface is absent (or no longer open)."""


class OpenFailed(G203Error):
    """The OS refused to open an interface, usually a permissions problem."""

    def __init__(self, path, reason):
        super().__init__(f"Cannot open HID interface {path}: {reason}")
        self.path = path
        self.reason = reason


class InitializationFailed(G203Error):
    """The onboard-memory disable command was not accepted."""


class WriteFailed(G203Error):
    """An output report write was rejected by the OS or driver."""

    def __init__(self, message, code=None):
        if code is not None:
            message = f"{message} (error {code})"
        super().__init__(message)
        self.code = code
