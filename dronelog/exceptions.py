"""Custom exceptions for dronelog."""

__all__ = [
    "DronelogError",
    "InvalidArgumentError",
    "TelemetryShapeError",
    "DataExportError",
    "WeatherUnavailableError",
    "ConfigurationError",
]


class DronelogError(Exception):
    """Base exception for all dronelog errors."""

    pass


class InvalidArgumentError(DronelogError, ValueError):
    """Raised when a caller passes a structurally invalid parameter."""

    def __init__(self, message: str, argument: str = None, value=None):
        self.argument = argument
        self.value = value
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with the offending argument."""
        if self.argument:
            return f"{message} ({self.argument}={self.value!r})"
        return message


class TelemetryShapeError(DronelogError):
    """Raised when a bundle or telemetry series violates its shape contract."""

    def __init__(
        self,
        message: str,
        channel: str = None,
        expected: int = None,
        actual: int = None,
    ):
        self.channel = channel
        self.expected = expected
        self.actual = actual
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with channel length information."""
        parts = [message]
        if self.channel:
            parts.append(f"Channel: {self.channel}")
        if self.expected is not None and self.actual is not None:
            parts.append(f"Length: {self.actual} (expected {self.expected})")
        return " | ".join(parts)


class DataExportError(DronelogError):
    """Raised when an export cannot be produced or written."""

    def __init__(self, message: str, output_path: str = None):
        self.output_path = output_path
        if output_path:
            message = f"{message} (Output: {output_path})"
        super().__init__(message)


class WeatherUnavailableError(DronelogError):
    """Raised when the weather provider returns no usable data."""

    def __init__(self, message: str, status: int = None):
        self.status = status
        if status is not None:
            message = f"{message} (HTTP {status})"
        super().__init__(message)


class ConfigurationError(DronelogError):
    """Raised when report configuration is invalid."""

    def __init__(self, message: str, config_key: str = None):
        self.config_key = config_key
        if config_key:
            message = f"{message} (Key: {config_key})"
        super().__init__(message)
