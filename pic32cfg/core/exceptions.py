"""Custom exceptions used throughout the pic32cfg package.

Only programming errors in the static reference tables are raised.
Data-quality problems in caller input are reported as diagnostics
(see pic32cfg.core.diagnostics) and never raised.
"""

from typing import Any, Optional


class Pic32CfgError(Exception):
    """Base exception for all pic32cfg errors.

    All package-specific exceptions should inherit from this class.
    This allows catching all pic32cfg errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(Pic32CfgError):
    """Raised when there's an error in a configuration file.

    This includes:
    - Unreadable or unparsable YAML
    - Missing required configuration keys
    - Values of the wrong shape
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        full_message = f"Configuration error for '{config_key}': {message}"
        super().__init__(message=full_message, details=details)
        self.config_key = config_key


class TableValidationError(ConfigurationError):
    """Raised when the static reference tables are internally inconsistent.

    Examples:
    - Two settings sharing one index
    - Overlapping bit fields inside one register
    - A PPS selector that does not exist in its pin group
    """

    def __init__(
        self,
        table: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(config_key=table, message=message, details=details)
        self.table = table
