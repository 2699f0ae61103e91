"""Error types raised by the kontemplate pipeline."""


class KontemplateError(Exception):
    """Base class for all kontemplate failures.

    Attributes:
        message: Short human-readable description
        details: Optional extra context (command line, offending file, ...)
    """

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigError(KontemplateError):
    """Raised when the cluster configuration cannot be loaded."""


class TemplateError(KontemplateError):
    """Raised when a single template file cannot be rendered."""


class ProcessError(KontemplateError):
    """Raised when an external tool fails to launch, exits non-zero or
    cannot be fed its input."""
