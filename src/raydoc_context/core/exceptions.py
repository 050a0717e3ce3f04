"""Custom exception hierarchy for raydoc-context.

All custom exceptions inherit from RaydocContextError to enable:
- Unified exception handling
- Clear distinction from built-in exceptions
- Consistent error messaging patterns

NotFound is deliberately not an exception: a missing symbol or definition
is an ordinary empty result.
"""

__all__ = [
    "RaydocContextError",
    "ConfigError",
    "ProviderError",
    "WorkspaceError",
]


class RaydocContextError(Exception):
    """Base exception for all raydoc-context errors."""

    pass


class ConfigError(RaydocContextError):
    """Configuration loading or validation error.

    Raised when:
    - The configuration file does not exist or cannot be read
    - The YAML is malformed or its root is not a mapping
    - Pydantic validation of the configuration fails
    """

    pass


class ProviderError(RaydocContextError):
    """A Capability Provider call failed.

    Providers may raise this (or any other exception); the wrappers in
    raydoc_context.providers.base convert it into an empty result.

    Attributes:
        operation: Provider operation that failed (e.g. "definitions_at").
        uri: Document the call was made against, if any.

    """

    def __init__(self, message: str, operation: str = "", uri: str | None = None) -> None:
        """Initialize ProviderError.

        Args:
            message: Human-readable error message.
            operation: Provider operation name.
            uri: Document path the call targeted.

        """
        super().__init__(message)
        self.operation = operation
        self.uri = uri


class WorkspaceError(RaydocContextError):
    """No usable workspace root is available.

    Extraction cannot proceed without a root: relative paths, the
    in-workspace filter and the file tree all depend on it.
    """

    pass
