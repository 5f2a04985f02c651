"""Exception hierarchy for the bar synchronization engine.

The tick path never raises: update and calc report failure by returning
False. Exceptions are reserved for construction and configuration problems.
All exceptions inherit from BarSyncError for easy catching and handling.
"""

from typing import Any, Dict


class BarSyncError(Exception):
    """Base exception for all bar synchronization errors.
    
    All custom exceptions in the package inherit from this class,
    allowing for easy catching of any engine related errors.
    """
    
    def __init__(self, message: str, **context: Any):
        """Initialize the exception with a message and optional context.
        
        Args:
            message: Error message describing what went wrong
            **context: Additional context information for logging and debugging
        """
        super().__init__(message)
        self.context: Dict[str, Any] = context
    
    def __str__(self) -> str:
        """Return string representation including context."""
        if self.context:
            ctx = ', '.join(f'{k}={v}' for k, v in self.context.items())
            return f"{super().__str__()} [{ctx}]"
        return super().__str__()


# ============================================================================
# Configuration Exceptions
# ============================================================================

class InvalidConfigError(BarSyncError):
    """Raised when configuration contains invalid values.
    
    This exception is raised when construction arguments or configuration
    values fail validation, such as a non-positive timeframe, window size
    or symbol count.
    """
    
    def __init__(self, message: str, **context: Any):
        super().__init__(message, **context)


class MissingConfigError(BarSyncError):
    """Raised when required configuration is missing.
    
    This exception is raised when the configuration file does not exist or
    a mandatory key such as the symbol list is absent.
    """
    
    def __init__(self, message: str, **context: Any):
        super().__init__(message, **context)


class ConfigValidationError(BarSyncError):
    """Raised when configuration fails schema validation.
    
    This exception is raised when the configuration structure does not
    match the expected schema, such as a section that is not a mapping or
    a value of the wrong type.
    """
    
    def __init__(self, message: str, **context: Any):
        super().__init__(message, **context)
