"""
Custom exceptions for typeref.

Provides structured error handling with detailed context for debugging and user feedback.
"""


class TyperefError(Exception):
    """Base exception for typeref errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to a serializable error report."""
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'details': self.details
        }


class ConfigurationError(TyperefError):
    """Invalid configuration."""

    def __init__(self, message: str, config_file: str = None):
        super().__init__(
            message,
            details={'config_file': config_file}
        )


class SourceRootError(ConfigurationError):
    """A file with an argument-less @module tag is outside every source root."""

    def __init__(self, file_path: str, source_roots: list):
        super().__init__(
            f"Cannot derive module id for {file_path}: not under any source root"
        )
        self.details.update({
            'file': file_path,
            'source_roots': list(source_roots)
        })


class PhaseOrderError(TyperefError):
    """A rewrite pass was invoked out of the two-phase order."""

    def __init__(self, message: str, file_path: str = None, phase: str = None):
        super().__init__(
            message,
            details={
                'file': file_path,
                'phase': phase
            }
        )
