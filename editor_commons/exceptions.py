from typing import Optional


class EditorCommonsError(Exception):
    """Base exception for all editor-commons errors."""
    pass


class TelemetryConfigError(EditorCommonsError, ValueError):
    """Raised when the telemetry reporter is given an invalid configuration."""
    pass


class UpdateCheckError(EditorCommonsError):
    """Raised when a product's installed or latest version cannot be determined."""
    def __init__(self, message: str, product_name: Optional[str] = None):
        self.product_name = product_name
        super().__init__(message)
